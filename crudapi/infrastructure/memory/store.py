"""Dictionary-backed tables with a minimal unit of work."""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any

from crudapi.modules.common.gateway import Record


class InMemoryStore:
    """Committed state: ``tables[name][id] -> record`` plus id sequences."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[int, Record]] = {}
        self.sequences: dict[str, int] = {}


class InMemorySession:
    """Works on a private copy of the store until ``commit``.

    Only the columns this session wrote are copied back on commit, so two
    sessions that touch different columns of one row do not overwrite each
    other. Counters bumped with :meth:`increment` are applied as a delta on
    top of whatever is committed at that moment, like
    ``UPDATE ... SET n = n + 1``. ``rollback`` throws away everything written
    since the last commit.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self._reset()

    def _reset(self) -> None:
        self.tables = copy.deepcopy(self._store.tables)
        self._written: dict[tuple[str, int], set[str]] = {}
        self._deltas: dict[tuple[str, int, str], int] = {}
        self._inserted: set[tuple[str, int]] = set()
        self._deleted: set[tuple[str, int]] = set()

    def table(self, name: str) -> dict[int, Record]:
        return self.tables.setdefault(name, {})

    def next_id(self, name: str) -> int:
        # Ids come from the shared sequence and are never handed out twice.
        sequences = self._store.sequences
        sequences[name] = sequences.get(name, 0) + 1
        return sequences[name]

    def add(self, name: str, values: dict[str, Any]) -> Record:
        now = datetime.now(timezone.utc)
        record = {"created_at": now, "updated_at": now, **values, "id": self.next_id(name)}
        self.table(name)[record["id"]] = record
        self._written[(name, record["id"])] = set(record)
        self._inserted.add((name, record["id"]))
        return record

    def touch(self, name: str, record_id: int, values: dict[str, Any]) -> Record | None:
        record = self.table(name).get(record_id)
        if record is None:
            return None
        record.update(values)
        record["updated_at"] = datetime.now(timezone.utc)
        self._written.setdefault((name, record_id), set()).update(values, ("updated_at",))
        return record

    def increment(self, name: str, record_id: int, column: str, by: int = 1) -> int | None:
        record = self.table(name).get(record_id)
        if record is None:
            return None
        if column in self._written.get((name, record_id), ()):
            record[column] = int(record.get(column) or 0) + by
            return record[column]
        key = (name, record_id, column)
        self._deltas[key] = self._deltas.get(key, 0) + by
        committed = self._store.tables.get(name, {}).get(record_id) or {}
        record[column] = int(committed.get(column) or 0) + self._deltas[key]
        return record[column]

    def remove(self, name: str, record_id: int) -> Record | None:
        record = self.table(name).pop(record_id, None)
        if record is not None:
            self._written.pop((name, record_id), None)
            self._deleted.add((name, record_id))
        return record

    async def commit(self) -> None:
        tables = self._store.tables
        for name, record_id in self._deleted:
            tables.get(name, {}).pop(record_id, None)
        for (name, record_id), columns in self._written.items():
            record = self.tables[name][record_id]
            committed = tables.setdefault(name, {}).get(record_id)
            if committed is None:
                # Rows deleted by another session stay deleted.
                if (name, record_id) in self._inserted:
                    tables[name][record_id] = copy.deepcopy(record)
                continue
            committed.update({column: copy.deepcopy(record[column]) for column in columns})
        for (name, record_id, column), delta in self._deltas.items():
            committed = tables.get(name, {}).get(record_id)
            if committed is not None:
                committed[column] = int(committed.get(column) or 0) + delta
        self._reset()

    async def rollback(self) -> None:
        self._reset()
