"""
Shared fixtures: an in-memory store with one logical table for tenant 1.
"""

import pytest

from cfreader.storage import InMemoryConnection, RecordIterator

TENANT_ID = 1
TABLE_NAME = "events"


@pytest.fixture
def connection():
    return InMemoryConnection()


@pytest.fixture
def table(connection):
    return connection.create_table(TENANT_ID, TABLE_NAME)


@pytest.fixture
def make_iterator(connection, table):
    """Factory building a RecordIterator over the `table` fixture."""

    def _make(record_ids, batch_size=2, columns=None):
        return RecordIterator(
            TENANT_ID,
            TABLE_NAME,
            columns,
            record_ids,
            connection,
            batch_size=batch_size,
        )

    return _make
