"""Persistence capability interface used by the generic helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence

from .predicates import Predicate

Record = dict[str, Any]


@dataclass(frozen=True, slots=True)
class SortSpec:
    attribute: str
    descending: bool = False


class TableGateway(Protocol):
    """Operations on one logical table or collection.

    Any backend (relational, document, in-memory) implementing these is
    interchangeable; callers never reach for a backend's own query DSL.
    """

    async def find_one(self, predicate: Predicate | None) -> Record | None:
        ...

    async def find_many(
        self,
        predicate: Predicate | None,
        order: Sequence[SortSpec] = (),
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Record]:
        ...

    async def count(self, predicate: Predicate | None) -> int:
        ...

    async def insert(self, record: Mapping[str, Any]) -> Record:
        ...

    async def update(self, record_id: Any, partial: Mapping[str, Any]) -> Record | None:
        ...

    async def delete(self, record_id: Any) -> Record | None:
        ...


__all__ = ["Record", "SortSpec", "TableGateway"]
