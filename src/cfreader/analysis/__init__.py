"""
Batch planning.

This module turns the caller's ordered key list into the batch plan that the
record iterator walks through.
"""

from cfreader.analysis.chunker import (
    BatchPlan,
    chunk_ids,
    validate_batch_size,
)

__all__ = [
    "BatchPlan",
    "chunk_ids",
    "validate_batch_size",
]
