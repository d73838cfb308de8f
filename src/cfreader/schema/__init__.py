"""
Record model and payload codec for cfreader.
"""

from .record import Record
from .codec import (
    decode_long,
    decode_values,
    encode_long,
    encode_values,
)

__all__ = [
    # Domain record
    "Record",
    # Payload codec
    "encode_values",
    "decode_values",
    "encode_long",
    "decode_long",
]
