# src/eztodo/store/entity_store.py

from __future__ import annotations

import contextlib
import copy
import json
import logging
import os
import tempfile
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any, Generic, TypeVar

from ..core.errors import InvalidInput, NotFound, PersistenceFailure
from ..items.ids import MonotonicIdGenerator
from ..lib.dates import today_str
from .rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

T = TypeVar("T")
InputT = TypeVar("InputT")


class EntityStore(ABC, Generic[T, InputT]):
    """
    In-memory ordered collection of one entity kind, mirrored to a JSON array file.

    Thread-safety:
    - reads (list/get/snapshot) share the lock, mutations take it exclusively
    - every entity handed in or out is a deep copy; callers never alias stored state

    Durability:
    - each mutation rewrites the whole file: temp file in the same directory,
      fsync, then os.replace onto the target
    - a failed write raises PersistenceFailure but the in-memory mutation stays
      applied; memory leads disk until the next successful write
    """

    kind_name = "entity"

    def __init__(
        self,
        storage_path: str | Path,
        *,
        today: Callable[[], str] | None = None,
        id_generator: MonotonicIdGenerator | None = None,
    ) -> None:
        self._path = Path(storage_path)
        self._today = today or today_str
        self._ids = id_generator or MonotonicIdGenerator(self.id_prefix())
        self._lock = ReadWriteLock()
        self._entities: list[T] = self._load()
        logger.info(
            "%s store ready path=%s total=%s", self.kind_name, self._path, len(self._entities)
        )

    @property
    def storage_path(self) -> Path:
        return self._path

    # ---- entity-specific hooks ----

    def id_prefix(self) -> str:
        return ""

    @abstractmethod
    def id_of(self, entity: T) -> str: ...

    @abstractmethod
    def encode(self, entity: T) -> dict[str, Any]: ...

    @abstractmethod
    def decode(self, raw: dict[str, Any]) -> T: ...

    @abstractmethod
    def build(self, data: InputT, new_id: str, today: str) -> T:
        """Validate create input and build a new entity. Raises InvalidInput."""

    # ---- disk ----

    def _load(self) -> list[T]:
        if not self._path.exists():
            return []

        try:
            data = self._path.read_bytes()
        except OSError:
            logger.warning("Cannot read %s; starting empty.", self._path, exc_info=True)
            return []

        try:
            raw = json.loads(data.decode("utf-8"))
            if not isinstance(raw, list):
                raise ValueError(f"expected a JSON array, got {type(raw).__name__}")
            return [self.decode(item) for item in raw]
        except (ValueError, KeyError, TypeError, AttributeError):
            logger.warning("Unparsable %s file %s; starting empty.", self.kind_name, self._path, exc_info=True)
            self._quarantine()
            return []

    def _quarantine(self) -> None:
        target = self._path.with_name(f"{self._path.name}.corrupt-{int(time.time())}")
        try:
            os.replace(self._path, target)
            logger.warning("Moved unreadable %s to %s", self._path, target)
        except OSError:
            logger.exception("Failed to move unreadable %s aside", self._path)

    def _persist(self) -> None:
        """Write the current sequence to disk. Caller holds the write side."""
        try:
            data = json.dumps([self.encode(e) for e in self._entities], ensure_ascii=False)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(
                prefix=f"{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp, self._path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.exception("Failed to save %s store to %s", self.kind_name, self._path)
            raise PersistenceFailure(f"failed to save {self._path}: {e}") from e

        logger.debug("Saved %s %s(s) to %s", len(self._entities), self.kind_name, self._path)

    def _index_of(self, entity_id: str) -> int:
        for idx, e in enumerate(self._entities):
            if self.id_of(e) == entity_id:
                return idx
        return -1

    # ---- public API ----

    def list(self) -> list[T]:
        with self._lock.read():
            return copy.deepcopy(self._entities)

    def snapshot(self) -> list[T]:
        """Read-only copy for consumers that must not mutate (history, reports)."""
        return self.list()

    def get(self, entity_id: str) -> T:
        with self._lock.read():
            idx = self._index_of(entity_id)
            if idx < 0:
                raise NotFound(entity_id)
            return copy.deepcopy(self._entities[idx])

    def create(self, data: InputT) -> T:
        with self._lock.write():
            existing = {self.id_of(e) for e in self._entities}
            new_id = self._ids.next_id()
            while new_id in existing:
                new_id = self._ids.next_id()

            entity = self.build(data, new_id, self._today())
            self._entities.append(entity)
            logger.debug("%s created id=%s", self.kind_name, new_id)
            self._persist()
            return copy.deepcopy(entity)

    def update(self, entity: T) -> T:
        """Whole-entity replace, matched by id."""
        entity_id = self.id_of(entity)
        with self._lock.write():
            idx = self._index_of(entity_id)
            if idx < 0:
                raise NotFound(entity_id)
            self._entities[idx] = copy.deepcopy(entity)
            self._persist()
            return copy.deepcopy(entity)

    def modify(self, entity_id: str, fn: Callable[[T], None]) -> T:
        """
        Read-modify-write of one entity inside a single exclusive section.

        `fn` mutates the stored entity in place. If it raises, nothing is
        written; partial changes it made in memory are not rolled back, so
        validate before mutating.
        """
        with self._lock.write():
            idx = self._index_of(entity_id)
            if idx < 0:
                raise NotFound(entity_id)
            fn(self._entities[idx])
            self._persist()
            return copy.deepcopy(self._entities[idx])

    def delete(self, entity_id: str) -> bool:
        with self._lock.write():
            before = len(self._entities)
            self._entities = [e for e in self._entities if self.id_of(e) != entity_id]
            if len(self._entities) == before:
                raise NotFound(entity_id)
            logger.debug("%s deleted id=%s", self.kind_name, entity_id)
            self._persist()
            return True

    def remove_where(self, predicate: Callable[[T], bool]) -> list[T]:
        """Remove every matching entity; persist once if anything was removed."""
        with self._lock.write():
            removed = [e for e in self._entities if predicate(e)]
            if not removed:
                return []
            self._entities = [e for e in self._entities if not predicate(e)]
            self._persist()
            return removed

    def apply_all(self, fn: Callable[[T], Any]) -> list[T]:
        """
        Apply `fn` to every entity in place under one exclusive section and
        persist once for the whole batch.
        """
        with self._lock.write():
            for e in self._entities:
                fn(e)
            self._persist()
            return copy.deepcopy(self._entities)


def require_text(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidInput(f"{field_name} is required")
    return str(value)
