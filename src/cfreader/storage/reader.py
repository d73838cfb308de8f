"""
Batched record iterator.

This module turns a (possibly very long) list of row keys into a lazily
produced stream of Records, fetching from the column-family store one batch
at a time.

DATA FLOW
=========

STEP 1: PLAN (once, at construction)
------------------------------------
    record_ids = [k1, k2, k3, k4, k5], batch_size = 2

    BatchPlan: [(k1, k2), (k3, k4), (k5,)]     total_batches = 3

A non-positive batch size fails here with ConfigurationError, before the
table is opened.


STEP 2: OPEN TABLE
------------------
    Connection.get_table("ANX_<tenant>_<TABLE>_DATA")

Failure -> InitializationError (wrapping the store's error).


STEP 3: PREFETCH BATCH 0 (at construction)
------------------------------------------
So that has_next() is cheap immediately after construction.


STEP 4: PULL
------------
    has_next()
      |
      +-- pending not empty ----------------------------> True
      +-- EXHAUSTED / UNAVAILABLE ----------------------> False
      +-- fully fetched ------> EXHAUSTED, close -------> False
      +-- fetch next batch
            FETCHED + records --> HAS_BUFFERED ---------> True
            FETCHED, no records --> fetch next batch (loop)
            UNAVAILABLE ---------> UNAVAILABLE, close --> False
            FetchError ----------> close, raise

    take_next()
      has_next() ? pending.popleft() : close + NoMoreElementsError


CURSOR STATES
=============

    AWAITING_FETCH  nothing buffered yet, more batches to fetch
    HAS_BUFFERED    decoded records waiting in `pending`
    EXHAUSTED       terminal, every batch fetched and drained
    UNAVAILABLE     terminal, store unreachable, remaining batches skipped

Both terminal states release the table handle. UNAVAILABLE is a silent,
lossy early end: the caller sees a short result, not an error.


EXHAUSTION RULE
===============

After each fetched batch, batch_index += 1. The plan is fully fetched once
batch_index == total_batches, i.e. only after the final batch has actually
been requested.
"""

import logging
from collections import deque
from enum import Enum
from typing import Any, Deque, Dict, FrozenSet, Iterable, Iterator, List, Optional

import pyarrow as pa

from cfreader.analysis import BatchPlan, chunk_ids
from cfreader.constants import DATA_NAMESPACE, DEFAULT_BATCH_SIZE
from cfreader.exceptions import (
    FetchError,
    InitializationError,
    NoMoreElementsError,
    RowDecodeError,
    TableUnavailableError,
)
from cfreader.execution.fetcher import BatchFetcher
from cfreader.schema import Record
from cfreader.storage.decoder import decode_row
from cfreader.storage.store import Connection, Table, generate_table_name

logger = logging.getLogger(__name__)


class CursorState(str, Enum):
    AWAITING_FETCH = "awaiting_fetch"
    HAS_BUFFERED = "has_buffered"
    EXHAUSTED = "exhausted"
    UNAVAILABLE = "unavailable"


class FetchStatus(str, Enum):
    """Outcome of one batch step. Fatal errors are raised instead."""

    FETCHED = "fetched"
    EXHAUSTED = "exhausted"
    UNAVAILABLE = "unavailable"


_TERMINAL = (CursorState.EXHAUSTED, CursorState.UNAVAILABLE)

# Columns to_arrow() reserves for the row key and timestamp
_KEY_COLUMNS = ("_id", "_timestamp")


class RecordIterator:
    """
    Pull-based iterator over the records for a list of row keys.

    Not thread-safe: one iterator is owned by one caller, and the iterator
    exclusively owns its table handle until it is exhausted or closed.

    Example:
        >>> with RecordIterator(1, "events", None, ids, conn, batch_size=500) as it:
        ...     for record in it:
        ...         process(record)
        >>>
        >>> # Or the explicit protocol
        >>> it = RecordIterator(1, "events", ["temp"], ids, conn)
        >>> while it.has_next():
        ...     record = it.take_next()
    """

    def __init__(
        self,
        tenant_id: int,
        table_name: str,
        columns: Optional[Iterable[str]],
        record_ids: Iterable[str],
        connection: Connection,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        """
        Plan batches, open the table and prefetch the first batch.

        Args:
            tenant_id: Tenant owning the logical table
            table_name: Logical table name
            columns: Column projection; None or empty means all columns
            record_ids: Row keys, in the order records should be returned
            connection: Store connection used to open the table handle
            batch_size: Keys per multi-get, must be >= 1

        Raises:
            ConfigurationError: batch_size is not a positive integer
            InitializationError: the table could not be opened
            FetchError: the first batch failed with a non-recoverable error
        """
        self.tenant_id = tenant_id
        self.table_name = table_name
        self.columns: Optional[FrozenSet[str]] = (
            frozenset(columns) if columns else None
        )

        # Planning validates batch_size before any I/O
        self._plan: BatchPlan = chunk_ids(list(record_ids), batch_size)
        self._table: Optional[Table] = self._open_table(connection)
        self._fetcher = BatchFetcher(self._table, tenant_id, table_name, self.columns)

        self._pending: Deque[Record] = deque()
        self._batch_index = 0
        self._fully_fetched = False
        self._state = CursorState.AWAITING_FETCH

        logger.debug(
            "Iterating table %s (tenant %s): %d ids in %d batches of %d",
            table_name,
            tenant_id,
            self._plan.record_count,
            self._plan.total_batches,
            self._plan.batch_size,
        )

        if self._plan.total_batches == 0:
            self._fully_fetched = True
            self._finish(CursorState.EXHAUSTED)
        else:
            self._prefetch()

    # ------------------------------------------------------------------
    # Public enumeration contract
    # ------------------------------------------------------------------

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def plan(self) -> BatchPlan:
        return self._plan

    @property
    def batch_index(self) -> int:
        return self._batch_index

    @property
    def fully_fetched(self) -> bool:
        return self._fully_fetched

    def has_next(self) -> bool:
        """
        Return True if another record is available, fetching forward if needed.

        Never raises for an unreachable store; raises FetchError for any other
        fetch failure.
        """
        if self._pending:
            return True
        if self._state in _TERMINAL:
            return False

        while not self._pending:
            if self._fully_fetched:
                self._finish(CursorState.EXHAUSTED)
                return False
            if self._prefetch() is FetchStatus.UNAVAILABLE:
                return False
        return True

    def take_next(self) -> Record:
        """
        Return the next record.

        Raises:
            NoMoreElementsError: the iterator is exhausted
        """
        if self.has_next():
            return self._pending.popleft()
        self.close()
        raise NoMoreElementsError()

    def mark_consumed(self) -> None:
        """Acknowledge the last record. Read-only iterator: nothing to do."""

    def close(self) -> None:
        """Release the table handle. Safe to call any number of times."""
        if self._state not in _TERMINAL:
            self._pending.clear()
            self._state = CursorState.EXHAUSTED
        self._release()

    def __iter__(self) -> Iterator[Record]:
        return self

    def __next__(self) -> Record:
        if not self.has_next():
            raise StopIteration
        return self._pending.popleft()

    def __enter__(self) -> "RecordIterator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Tabular export
    # ------------------------------------------------------------------

    def to_arrow(self) -> pa.Table:
        """
        Drain the remaining records into a pyarrow Table.

        Columns are `_id`, `_timestamp`, then every value column seen, in
        first-seen order. Records missing a column get null. A value column
        named like a key column is exported as `values.<name>`. A column whose
        values mix types Arrow cannot unify is exported as strings.
        """
        records = list(self)
        names: List[str] = []
        for record in records:
            for name in record.values:
                if name not in names:
                    names.append(name)

        data: Dict[str, Any] = {
            "_id": pa.array([r.id for r in records], type=pa.string()),
            "_timestamp": pa.array([r.timestamp for r in records], type=pa.int64()),
        }
        for name in names:
            column = name if name not in _KEY_COLUMNS else f"values.{name}"
            values = [r.values.get(name) for r in records]
            data[column] = self._value_array(name, values)
        return pa.table(data)

    def to_dataframe(self):
        """Drain the remaining records into a pandas DataFrame."""
        return self.to_arrow().to_pandas()

    def _value_array(self, name: str, values: List[Any]) -> pa.Array:
        try:
            return pa.array(values)
        except (pa.ArrowInvalid, pa.ArrowTypeError):
            logger.warning(
                "Column %s of table %s has mixed types; exporting as strings",
                name,
                self.table_name,
            )
            return pa.array(
                [None if v is None else str(v) for v in values], type=pa.string()
            )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _open_table(self, connection: Connection) -> Table:
        name = generate_table_name(self.tenant_id, self.table_name, DATA_NAMESPACE)
        try:
            return connection.get_table(name)
        except Exception as exc:
            raise InitializationError(self.tenant_id, self.table_name, exc) from exc

    def _prefetch(self) -> FetchStatus:
        """Fetch and decode the batch at batch_index into `pending`."""
        if self._fully_fetched:
            return FetchStatus.EXHAUSTED

        batch = self._plan[self._batch_index]
        try:
            results = self._fetcher.fetch(batch)
            records = []
            for result in results:
                record = decode_row(result, self.columns).to_record(
                    self.tenant_id, self.table_name
                )
                if record is not None:
                    records.append(record)
        except TableUnavailableError:
            skipped = self._plan.total_batches - self._batch_index
            logger.warning(
                "Table %s for tenant %s became unavailable; "
                "skipping %d remaining batches",
                self.table_name,
                self.tenant_id,
                skipped,
            )
            self._finish(CursorState.UNAVAILABLE)
            return FetchStatus.UNAVAILABLE
        except RowDecodeError as exc:
            self._finish(CursorState.EXHAUSTED)
            raise FetchError(
                self.tenant_id,
                self.table_name,
                f"Error decoding data from table {self.table_name} "
                f"for tenant {self.tenant_id}: {exc}",
            ) from exc
        except FetchError:
            self._finish(CursorState.EXHAUSTED)
            raise
        except Exception as exc:
            self._finish(CursorState.EXHAUSTED)
            raise FetchError(self.tenant_id, self.table_name) from exc

        self._pending.extend(records)
        self._batch_index += 1
        if self._batch_index == self._plan.total_batches:
            self._fully_fetched = True

        logger.debug(
            "Batch %d/%d of table %s: %d keys, %d records",
            self._batch_index,
            self._plan.total_batches,
            self.table_name,
            len(batch),
            len(records),
        )

        self._state = (
            CursorState.HAS_BUFFERED if self._pending else CursorState.AWAITING_FETCH
        )
        return FetchStatus.FETCHED

    def _finish(self, state: CursorState) -> None:
        self._state = state
        self._release()

    def _release(self) -> None:
        table, self._table = self._table, None
        if table is None:
            return
        try:
            table.close()
        except Exception as exc:
            # the handle is unusable either way
            logger.warning("Error closing table %s: %s", self.table_name, exc)
