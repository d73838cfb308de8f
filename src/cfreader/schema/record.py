"""Domain record produced by the record iterator."""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class Record:
    """
    One decoded row of a logical table.

    Attributes:
        id: Store row key
        tenant_id: Tenant partition the table belongs to
        table_name: Logical table name
        values: Column name -> decoded value (empty for timestamp-only rows)
        timestamp: Version/time of the data, in milliseconds
    """

    id: str
    tenant_id: int
    table_name: str
    values: Dict[str, Any] = field(default_factory=dict)
    timestamp: int = 0

    def get_value(self, column: str) -> Any:
        return self.values.get(column)
