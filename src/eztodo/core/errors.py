# src/eztodo/core/errors.py

"""
Error taxonomy shared by stores and services.

Every error carries a stable symbolic `kind` so calling layers can branch on it
without parsing the message.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    INVALID_INPUT = "BAD_INPUT"
    NOT_FOUND = "NOT_FOUND"
    LOCK_ERROR = "LOCK_ERROR"
    PERSISTENCE = "PERSISTENCE"
    DATE_PARSE = "DATE_PARSE"


class EzTodoError(Exception):
    kind: ErrorKind

    def __init__(self, message: str = "") -> None:
        self.message = message or self.kind.value
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class InvalidInput(EzTodoError):
    kind = ErrorKind.INVALID_INPUT


class NotFound(EzTodoError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity_id: str, message: str = "") -> None:
        self.entity_id = entity_id
        super().__init__(message or f"no entity with id {entity_id!r}")


class LockError(EzTodoError):
    kind = ErrorKind.LOCK_ERROR


class PersistenceFailure(EzTodoError):
    """Raised after an in-memory mutation when writing it to disk failed."""

    kind = ErrorKind.PERSISTENCE


class DateParseError(EzTodoError):
    kind = ErrorKind.DATE_PARSE
