"""Table gateway over an :class:`InMemorySession` table."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from crudapi.modules.common.gateway import Record, SortSpec
from crudapi.modules.common.predicates import Predicate, matches

from .store import InMemorySession


def _sort_key(attribute: str):
    # None sorts first ascending, like NULLs in SQLite.
    def key(record: Record) -> tuple[bool, Any]:
        value = record.get(attribute)
        return (value is not None, value)

    return key


class InMemoryTableGateway:
    def __init__(self, session: InMemorySession, table: str) -> None:
        self._session = session
        self._table = table

    @property
    def _rows(self) -> dict[int, Record]:
        return self._session.table(self._table)

    async def find_one(self, predicate: Predicate | None) -> Record | None:
        for record in self._rows.values():
            if matches(predicate, record):
                return dict(record)
        return None

    async def find_many(
        self,
        predicate: Predicate | None,
        order: Sequence[SortSpec] = (),
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Record]:
        rows = [record for record in self._rows.values() if matches(predicate, record)]
        # Stable sorts applied from the least to the most significant key.
        for spec in reversed(order):
            rows.sort(key=_sort_key(spec.attribute), reverse=spec.descending)
        end = None if limit is None else offset + limit
        return [dict(record) for record in rows[offset:end]]

    async def count(self, predicate: Predicate | None) -> int:
        return sum(1 for record in self._rows.values() if matches(predicate, record))

    async def insert(self, record: Mapping[str, Any]) -> Record:
        values = {key: value for key, value in record.items() if key != "id"}
        return dict(self._session.add(self._table, values))

    async def update(self, record_id: Any, partial: Mapping[str, Any]) -> Record | None:
        values = {key: value for key, value in partial.items() if key != "id"}
        record = self._session.touch(self._table, record_id, values)
        return dict(record) if record is not None else None

    async def delete(self, record_id: Any) -> Record | None:
        record = self._session.remove(self._table, record_id)
        return dict(record) if record is not None else None


__all__ = ["InMemoryTableGateway"]
