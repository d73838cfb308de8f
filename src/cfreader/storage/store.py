"""
Column-family store interface consumed by the record iterator.

The iterator never talks to a wire protocol directly. It needs four things
from a store client, modelled here as Protocols:

    Connection.get_table(name)  -> Table       open a table handle
    Table.get([Get, ...])       -> [RowResult]  one bulk multi-get
    Table.close()                               release the handle
    RetriesExhaustedError                       "store unreachable" signal

Any client (an HBase/Bigtable binding, the in-memory store in
cfreader.storage.memory, a test double) can back the iterator as long as it
returns one RowResult per Get, in request order.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from cfreader.constants import TABLE_PREFIX

_TABLE_NAME_RE = re.compile(r"[^A-Za-z0-9]")


class RetriesExhaustedError(IOError):
    """Raised by a store client once its retry budget is spent."""


@dataclass(frozen=True)
class Cell:
    family: str
    qualifier: str
    value: bytes
    timestamp: int


@dataclass(frozen=True)
class Get:
    """
    Read request for one row.

    If qualifier is None the whole family is requested, otherwise only that
    column of the family.
    """

    row: str
    family: str
    qualifier: Optional[str] = None


@dataclass
class RowResult:
    """Cells returned for one row key. Empty when the key does not exist."""

    row: Optional[str] = None
    cells: List[Cell] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.cells

    def contains_column(self, family: str, qualifier: str) -> bool:
        return any(c.family == family and c.qualifier == qualifier for c in self.cells)

    def latest_cell(self, family: str, qualifier: str) -> Optional[Cell]:
        """Return the newest version of a column, or None if absent."""
        versions = [
            c for c in self.cells if c.family == family and c.qualifier == qualifier
        ]
        if not versions:
            return None
        return max(versions, key=lambda c: c.timestamp)


class Table(Protocol):
    def get(self, gets: Sequence[Get]) -> List[RowResult]:
        ...

    def close(self) -> None:
        ...


class Connection(Protocol):
    def get_table(self, name: str) -> Table:
        ...


def generate_table_name(tenant_id: int, table_name: str, namespace: str) -> str:
    """
    Build the physical table name for a tenant's logical table.

    Example:
        >>> generate_table_name(-1234, "sensor.events", "DATA")
        'ANX_X1234_SENSOR_EVENTS_DATA'
    """
    tenant = f"X{-tenant_id}" if tenant_id < 0 else str(tenant_id)
    normalized = _TABLE_NAME_RE.sub("_", table_name).upper()
    return f"{TABLE_PREFIX}_{tenant}_{normalized}_{namespace}"
