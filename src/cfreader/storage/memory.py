"""
In-memory column-family store.

Implements the Connection/Table protocols from cfreader.storage.store on top
of plain dicts. Used for local development and throughout the test suite.

Besides storing multi-version cells it records every multi-get (so callers
can assert on batching), counts close() calls, and can raise a configured
exception on the N-th get() call to simulate store failures.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from cfreader.constants import (
    DATA_COLUMN_FAMILY,
    DATA_NAMESPACE,
    ROWDATA_QUALIFIER,
    TIMESTAMP_QUALIFIER,
)
from cfreader.schema.codec import encode_long, encode_values
from cfreader.storage.store import Cell, Get, RowResult, generate_table_name

logger = logging.getLogger(__name__)

# (family, qualifier) -> [Cell, ...] in write order
_Row = Dict[Tuple[str, str], List[Cell]]


class InMemoryTable:
    def __init__(self, name: str):
        self.name = name
        self._rows: Dict[str, _Row] = {}
        self.get_calls: List[List[str]] = []
        self.close_calls = 0
        self.faults: Dict[int, BaseException] = {}
        self.close_error: Optional[BaseException] = None

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def put(
        self, row: str, family: str, qualifier: str, value: bytes, timestamp: int
    ) -> None:
        cells = self._rows.setdefault(row, {}).setdefault((family, qualifier), [])
        cells.append(Cell(family, qualifier, value, timestamp))

    def put_record(
        self,
        row: str,
        values: Mapping[str, Any],
        timestamp: int,
        family: str = DATA_COLUMN_FAMILY,
    ) -> None:
        self.put(row, family, ROWDATA_QUALIFIER, encode_values(values), timestamp)

    def put_timestamp(
        self,
        row: str,
        timestamp: int,
        write_time: Optional[int] = None,
        family: str = DATA_COLUMN_FAMILY,
    ) -> None:
        self.put(
            row,
            family,
            TIMESTAMP_QUALIFIER,
            encode_long(timestamp),
            timestamp if write_time is None else write_time,
        )

    def fail_on_call(self, call_index: int, error: BaseException) -> None:
        """Raise error on the call_index-th get() (0-based)."""
        self.faults[call_index] = error

    def get(self, gets: Sequence[Get]) -> List[RowResult]:
        call_index = len(self.get_calls)
        self.get_calls.append([g.row for g in gets])
        if call_index in self.faults:
            raise self.faults[call_index]

        results = []
        for get in gets:
            row = self._rows.get(get.row)
            if row is None:
                results.append(RowResult())
                continue
            cells = [
                cell
                for (family, qualifier), versions in row.items()
                if family == get.family
                and (get.qualifier is None or qualifier == get.qualifier)
                for cell in versions
            ]
            results.append(RowResult(row=get.row if cells else None, cells=cells))
        return results

    def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class InMemoryConnection:
    """
    Holds named InMemoryTables.

    Example:
        >>> conn = InMemoryConnection()
        >>> table = conn.create_table(1, "events")
        >>> table.put_record("k1", {"v": 1}, timestamp=10)
    """

    def __init__(self):
        self.tables: Dict[str, InMemoryTable] = {}
        self.opened: List[str] = []

    def create_table(
        self, tenant_id: int, table_name: str, namespace: str = DATA_NAMESPACE
    ) -> InMemoryTable:
        name = generate_table_name(tenant_id, table_name, namespace)
        table = self.tables.setdefault(name, InMemoryTable(name))
        logger.debug("Created in-memory table %s", name)
        return table

    def get_table(self, name: str) -> InMemoryTable:
        if name not in self.tables:
            raise IOError(f"Table {name} does not exist")
        self.opened.append(name)
        return self.tables[name]
