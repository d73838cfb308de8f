"""
Store interface, in-memory store, row decoding and the batched record iterator.
"""

from .store import (
    Cell,
    Connection,
    Get,
    RetriesExhaustedError,
    RowResult,
    Table,
    generate_table_name,
)
from .memory import InMemoryConnection, InMemoryTable
from .decoder import DecodedRow, RowKind, decode_row
from .reader import CursorState, FetchStatus, RecordIterator

__all__ = [
    # Store protocol
    "Cell",
    "Connection",
    "Get",
    "RetriesExhaustedError",
    "RowResult",
    "Table",
    "generate_table_name",
    # In-memory store
    "InMemoryConnection",
    "InMemoryTable",
    # Decoding
    "DecodedRow",
    "RowKind",
    "decode_row",
    # Iterator
    "CursorState",
    "FetchStatus",
    "RecordIterator",
]
