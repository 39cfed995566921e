# src/eztodo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the services.

Services depend on Protocols instead of the concrete JSON stores, so tests can
swap in fakes (e.g. a plan repo whose writes always fail).
"""

from collections.abc import Callable
from typing import Any, Protocol

from ..items.models import Plan, PlanCreateInput, Todo, TodoCreateInput

Clock = Callable[[], str]
# Returns today's date as "YYYY-MM-DD".


class TodoRepo(Protocol):
    def list(self) -> list[Todo]: ...
    def snapshot(self) -> list[Todo]: ...
    def get(self, entity_id: str) -> Todo: ...
    def create(self, data: TodoCreateInput) -> Todo: ...
    def update(self, entity: Todo) -> Todo: ...
    def modify(self, entity_id: str, fn: Callable[[Todo], None]) -> Todo: ...
    def delete(self, entity_id: str) -> bool: ...
    def remove_where(self, predicate: Callable[[Todo], bool]) -> list[Todo]: ...


class PlanRepo(Protocol):
    def list(self) -> list[Plan]: ...
    def get(self, entity_id: str) -> Plan: ...
    def create(self, data: PlanCreateInput) -> Plan: ...
    def update(self, entity: Plan) -> Plan: ...
    def modify(self, entity_id: str, fn: Callable[[Plan], None]) -> Plan: ...
    def delete(self, entity_id: str) -> bool: ...
    def apply_all(self, fn: Callable[[Plan], Any]) -> list[Plan]: ...
