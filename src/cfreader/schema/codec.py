"""
Cell payload codec.

PAYLOAD FORMATS
===============

Full-data cell (family=data, qualifier=rowdata)
-----------------------------------------------
A single-row Arrow IPC stream. Each record column is one Arrow column:

    {"name": "pump-3", "pressure": 4.2}

    Arrow schema:  name: string, pressure: double
    num_rows:      1

An empty value mapping is a stream with no columns and no rows.

Timestamp-marker cell (family=data, qualifier=ts)
-------------------------------------------------
The raw timestamp as an 8-byte big-endian signed long:

    1704067200000 -> struct.pack(">q", 1704067200000)
"""

import struct
from typing import AbstractSet, Any, Dict, Mapping, Optional

import pyarrow as pa

from cfreader.exceptions import RowDecodeError

_LONG = struct.Struct(">q")


def encode_values(values: Mapping[str, Any]) -> bytes:
    """Encode a value mapping as a single-row Arrow IPC stream."""
    table = pa.table({name: [value] for name, value in values.items()})
    sink = pa.BufferOutputStream()
    with pa.ipc.new_stream(sink, table.schema) as writer:
        writer.write_table(table)
    return sink.getvalue().to_pybytes()


def decode_values(
    payload: bytes, columns: Optional[AbstractSet[str]] = None
) -> Dict[str, Any]:
    """
    Decode a full-data payload into a value mapping.

    Args:
        payload: Bytes produced by encode_values()
        columns: If non-empty, only these columns are kept

    Raises:
        RowDecodeError: payload is not a readable Arrow stream
    """
    try:
        table = pa.ipc.open_stream(pa.py_buffer(payload)).read_all()
    except (pa.ArrowException, TypeError, ValueError, OSError) as exc:
        raise RowDecodeError(f"Invalid row payload: {exc}") from exc

    if table.num_rows == 0:
        return {}

    return {
        name: table.column(name)[0].as_py()
        for name in table.column_names
        if not columns or name in columns
    }


def encode_long(value: int) -> bytes:
    return _LONG.pack(value)


def decode_long(payload: bytes) -> int:
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise RowDecodeError(
            f"Timestamp payload must be bytes, got {type(payload).__name__}"
        )
    if len(payload) != _LONG.size:
        raise RowDecodeError(
            f"Timestamp payload must be {_LONG.size} bytes, got {len(payload)}"
        )
    return _LONG.unpack(payload)[0]
