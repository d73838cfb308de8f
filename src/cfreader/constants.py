"""
Store layout constants and defaults for cfreader.
"""

# Default number of row keys sent in a single multi-get
DEFAULT_BATCH_SIZE = 1000

# Column family holding all record data
DATA_COLUMN_FAMILY = "data"

# Qualifier of the encoded full-row payload (Arrow IPC, see schema.codec)
ROWDATA_QUALIFIER = "rowdata"

# Qualifier of the timestamp-only marker (8-byte big-endian long)
TIMESTAMP_QUALIFIER = "ts"

# Physical table naming: ANX_<tenant>_<TABLE>_<NAMESPACE>
TABLE_PREFIX = "ANX"
DATA_NAMESPACE = "DATA"
