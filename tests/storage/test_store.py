"""
Tests for store.py helpers and the in-memory store behind the test suite.
"""

import pytest

from cfreader.constants import (
    DATA_COLUMN_FAMILY,
    ROWDATA_QUALIFIER,
    TIMESTAMP_QUALIFIER,
)
from cfreader.storage import (
    Cell,
    Get,
    InMemoryConnection,
    RowResult,
    generate_table_name,
)


@pytest.mark.parametrize(
    "tenant_id, table_name, expected",
    [
        (1, "events", "ANX_1_EVENTS_DATA"),
        (-1234, "sensor.events", "ANX_X1234_SENSOR_EVENTS_DATA"),
        (7, "a-b c", "ANX_7_A_B_C_DATA"),
    ],
)
def test_generate_table_name(tenant_id, table_name, expected):
    assert generate_table_name(tenant_id, table_name, "DATA") == expected


def test_latest_cell_picks_highest_timestamp():
    result = RowResult(
        "k1",
        [
            Cell(DATA_COLUMN_FAMILY, ROWDATA_QUALIFIER, b"a", 2),
            Cell(DATA_COLUMN_FAMILY, ROWDATA_QUALIFIER, b"b", 9),
            Cell(DATA_COLUMN_FAMILY, TIMESTAMP_QUALIFIER, b"c", 20),
        ],
    )

    assert result.latest_cell(DATA_COLUMN_FAMILY, ROWDATA_QUALIFIER).value == b"b"
    assert result.contains_column(DATA_COLUMN_FAMILY, TIMESTAMP_QUALIFIER)
    assert result.latest_cell("other", ROWDATA_QUALIFIER) is None


def test_memory_table_returns_one_result_per_get_in_order(table):
    table.put_record("k2", {"a": 1}, timestamp=10)
    table.put_timestamp("k3", 77)

    gets = [Get(row, DATA_COLUMN_FAMILY) for row in ("k1", "k2", "k3")]

    results = table.get(gets)

    assert [r.row for r in results] == [None, "k2", "k3"]
    assert results[0].is_empty
    assert table.get_calls == [["k1", "k2", "k3"]]


def test_memory_table_honours_qualifier(table):
    table.put_timestamp("k1", 77)

    (result,) = table.get([Get("k1", DATA_COLUMN_FAMILY, ROWDATA_QUALIFIER)])

    assert result.is_empty


def test_memory_table_fault_injection(table):
    table.fail_on_call(1, IOError("down"))

    table.get([Get("k1", DATA_COLUMN_FAMILY)])
    with pytest.raises(IOError, match="down"):
        table.get([Get("k1", DATA_COLUMN_FAMILY)])


def test_unknown_table_cannot_be_opened():
    with pytest.raises(IOError):
        InMemoryConnection().get_table("ANX_1_NOPE_DATA")
