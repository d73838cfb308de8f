"""
cfreader - batched record retrieval from column-family stores.

Turns a list of row keys into a lazily fetched stream of Records, one
multi-get batch at a time.
"""

from cfreader.storage import (
    CursorState,
    InMemoryConnection,
    RecordIterator,
    RetriesExhaustedError,
)
from cfreader.schema import Record
from cfreader.analysis import BatchPlan, chunk_ids
from cfreader.exceptions import (
    CFReaderError,
    ConfigurationError,
    FetchError,
    InitializationError,
    NoMoreElementsError,
    RowDecodeError,
    TableUnavailableError,
)

__version__ = "0.1.0"

__all__ = [
    # Iterator
    "RecordIterator",
    "CursorState",
    "Record",
    # Planning
    "BatchPlan",
    "chunk_ids",
    # Store
    "InMemoryConnection",
    "RetriesExhaustedError",
    # Errors
    "CFReaderError",
    "ConfigurationError",
    "InitializationError",
    "TableUnavailableError",
    "FetchError",
    "NoMoreElementsError",
    "RowDecodeError",
]
