"""Reversible mutations of the controller's local working set.

Each command is applied to the local list before the matching repository
call and reverted if that call fails.
"""

from __future__ import annotations

from typing import Any


def _index_of(records: list, record_id: str) -> int | None:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return None


class Mutation:
    description = "mutation"

    def apply(self) -> None:
        raise NotImplementedError

    def revert(self) -> None:
        raise NotImplementedError


class InsertRecord(Mutation):
    def __init__(self, records: list, record: Any, description: str = "insert") -> None:
        self.records = records
        self.record = record
        self.description = description

    def apply(self) -> None:
        self.records.append(self.record)

    def revert(self) -> None:
        index = _index_of(self.records, self.record.id)
        if index is not None:
            del self.records[index]


class ReplaceRecord(Mutation):
    """Full replacement of the record sharing ``record.id``."""

    def __init__(self, records: list, record: Any, description: str = "update") -> None:
        self.records = records
        self.record = record
        self.description = description
        self._previous: Any = None
        self._index: int | None = None

    def apply(self) -> None:
        self._index = _index_of(self.records, self.record.id)
        if self._index is not None:
            self._previous = self.records[self._index]
            self.records[self._index] = self.record

    def revert(self) -> None:
        if self._previous is None:
            return
        index = _index_of(self.records, self.record.id)
        if index is not None:
            self.records[index] = self._previous
        else:
            self.records.insert(min(self._index, len(self.records)), self._previous)


class RemoveRecord(Mutation):
    def __init__(
        self, records: list, record_id: str, description: str = "delete"
    ) -> None:
        self.records = records
        self.record_id = record_id
        self.description = description
        self._removed: Any = None
        self._index: int | None = None

    def apply(self) -> None:
        self._index = _index_of(self.records, self.record_id)
        if self._index is not None:
            self._removed = self.records.pop(self._index)

    def revert(self) -> None:
        if self._removed is None or _index_of(self.records, self.record_id) is not None:
            return
        self.records.insert(min(self._index, len(self.records)), self._removed)
