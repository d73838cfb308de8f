"""
Exception hierarchy for cfreader.

Everything raised by the package derives from CFReaderError. Errors tied to a
specific logical table carry ``tenant_id`` and ``table_name`` so callers can
report which scan failed.
"""

from typing import Optional


class CFReaderError(Exception):
    """Base class for all cfreader errors."""


class ConfigurationError(CFReaderError):
    """Invalid iterator configuration (e.g. non-positive batch size)."""


class RowDecodeError(CFReaderError):
    """A cell payload could not be decoded."""


class NoMoreElementsError(CFReaderError):
    """take_next() was called on an exhausted iterator."""

    def __init__(self, message: str = "No further elements exist in iterator"):
        super().__init__(message)


class TableError(CFReaderError):
    """Base for errors bound to one logical table of one tenant."""

    def __init__(self, tenant_id: int, table_name: str, message: str):
        self.tenant_id = tenant_id
        self.table_name = table_name
        super().__init__(message)


class InitializationError(TableError):
    """The table handle could not be opened for reading."""

    def __init__(
        self, tenant_id: int, table_name: str, cause: Optional[BaseException] = None
    ):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(
            tenant_id,
            table_name,
            f"The table {table_name} for tenant {tenant_id} could not be "
            f"initialized for reading{detail}",
        )


class TableUnavailableError(TableError):
    """The store exhausted its retries; the table is effectively unreachable."""

    def __init__(self, tenant_id: int, table_name: str):
        super().__init__(
            tenant_id,
            table_name,
            f"Table {table_name} for tenant {tenant_id} is not available",
        )


class FetchError(TableError):
    """Fatal failure while reading a batch; iteration cannot continue."""

    def __init__(self, tenant_id: int, table_name: str, message: Optional[str] = None):
        super().__init__(
            tenant_id,
            table_name,
            message
            or f"Error reading data from table {table_name} for tenant {tenant_id}",
        )
