"""
Row classification and decoding.

Every RowResult returned by a multi-get is one of three shapes:

    FULL            data:rowdata present   -> values + cell write timestamp
    TIMESTAMP_ONLY  data:ts present        -> empty values + decoded timestamp
    EMPTY           neither (or no row)    -> skipped by the iterator

The checks run in that order, so a row carrying both cells is FULL. When a
column has several versions only the newest one is decoded.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Any, Dict, Optional

from cfreader.constants import (
    DATA_COLUMN_FAMILY,
    ROWDATA_QUALIFIER,
    TIMESTAMP_QUALIFIER,
)
from cfreader.schema import Record, decode_long, decode_values
from cfreader.storage.store import RowResult


class RowKind(str, Enum):
    FULL = "full"
    TIMESTAMP_ONLY = "timestamp_only"
    EMPTY = "empty"


@dataclass(frozen=True)
class DecodedRow:
    """Tagged result of decoding one RowResult."""

    kind: RowKind
    row_id: Optional[str] = None
    values: Dict[str, Any] = field(default_factory=dict)
    timestamp: Optional[int] = None

    @classmethod
    def empty(cls, row_id: Optional[str] = None) -> "DecodedRow":
        return cls(kind=RowKind.EMPTY, row_id=row_id)

    def to_record(self, tenant_id: int, table_name: str) -> Optional[Record]:
        """Build the Record for this row, or None for EMPTY rows."""
        if self.kind is RowKind.EMPTY:
            return None
        return Record(
            id=self.row_id,
            tenant_id=tenant_id,
            table_name=table_name,
            values=dict(self.values),
            timestamp=self.timestamp,
        )


def decode_row(
    result: RowResult, columns: Optional[AbstractSet[str]] = None
) -> DecodedRow:
    """
    Classify and decode one row.

    Args:
        result: Cells returned for one key
        columns: Column projection applied to full-data rows (None/empty = all)

    Raises:
        RowDecodeError: a recognised cell holds a malformed payload
    """
    if result.row is None or result.is_empty:
        return DecodedRow.empty()

    data_cell = result.latest_cell(DATA_COLUMN_FAMILY, ROWDATA_QUALIFIER)
    if data_cell is not None:
        return DecodedRow(
            kind=RowKind.FULL,
            row_id=result.row,
            values=decode_values(data_cell.value, columns),
            timestamp=data_cell.timestamp,
        )

    ts_cell = result.latest_cell(DATA_COLUMN_FAMILY, TIMESTAMP_QUALIFIER)
    if ts_cell is not None:
        return DecodedRow(
            kind=RowKind.TIMESTAMP_ONLY,
            row_id=result.row,
            timestamp=decode_long(ts_cell.value),
        )

    # No valid data in row
    return DecodedRow.empty(result.row)
