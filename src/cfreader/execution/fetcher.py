"""
Bulk multi-get for one batch of row keys.

REQUEST SHAPE
=============

No projection (columns is None or empty):

    Get(row="k1", family="data")                       whole family
    Get(row="k2", family="data")

With projection (columns={"a", "b"}):

    Get(row="k1", family="data", qualifier="rowdata")  encoded row only
    Get(row="k2", family="data", qualifier="rowdata")

Individual record columns live inside the encoded rowdata payload, so the
store cannot select them natively; the projection is applied while decoding.
With a projection active, rows holding only a timestamp marker are not
returned.

All gets of a batch are sent in ONE table.get() call.

FAILURES
========

    RetriesExhaustedError  -> TableUnavailableError  (recoverable by caller)
    anything else          -> FetchError             (fatal)
"""

import logging
from typing import AbstractSet, List, Optional, Sequence

from cfreader.constants import DATA_COLUMN_FAMILY, ROWDATA_QUALIFIER
from cfreader.exceptions import FetchError, TableUnavailableError
from cfreader.storage.store import Get, RetriesExhaustedError, RowResult, Table

logger = logging.getLogger(__name__)


def build_gets(
    batch: Sequence[str], columns: Optional[AbstractSet[str]] = None
) -> List[Get]:
    """Build one Get per key, restricted to the rowdata column if projecting."""
    qualifier = ROWDATA_QUALIFIER if columns else None
    return [
        Get(row=row_id, family=DATA_COLUMN_FAMILY, qualifier=qualifier)
        for row_id in batch
    ]


class BatchFetcher:
    """
    Executes multi-gets against one table handle on behalf of one iterator.

    The fetcher does not own the handle; releasing it is the iterator's job.
    """

    def __init__(
        self,
        table: Table,
        tenant_id: int,
        table_name: str,
        columns: Optional[AbstractSet[str]] = None,
    ):
        self.table = table
        self.tenant_id = tenant_id
        self.table_name = table_name
        self.columns = columns

    def fetch(self, batch: Sequence[str]) -> List[RowResult]:
        """
        Fetch one batch with a single bulk request.

        Returns:
            One RowResult per key, in batch order

        Raises:
            TableUnavailableError: the store's retries were exhausted
            FetchError: any other failure
        """
        gets = build_gets(batch, self.columns)
        try:
            results = self.table.get(gets)
        except RetriesExhaustedError as exc:
            raise TableUnavailableError(self.tenant_id, self.table_name) from exc
        except Exception as exc:
            raise FetchError(self.tenant_id, self.table_name) from exc

        logger.debug(
            "Fetched %d keys from table %s (tenant %s)",
            len(gets),
            self.table_name,
            self.tenant_id,
        )
        return list(results)
