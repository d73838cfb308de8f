"""
Record-id batching for cfreader.

This module splits an ordered list of row keys into fixed-size batches.
Each batch becomes one multi-get request against the store.

WHY BATCH?
----------

Sending every key in one request would load the whole result set into memory
and risk store-side timeouts. Sending one request per key pays a round trip
per row. Batching bounds both:
1. Memory control - only one batch of decoded records is buffered at a time
2. Round trips - ceil(n / batch_size) requests instead of n
3. Laziness - later batches are only fetched when the caller asks for them

BATCHING ALGORITHM
------------------

INPUT:
  record_ids = ["k1", "k2", "k3", "k4", "k5"]
  batch_size = 2

OUTPUT (order-preserving, non-overlapping):

    Batch 0: ("k1", "k2")
    Batch 1: ("k3", "k4")
    Batch 2: ("k5",)          (partial last batch)

  total_batches = ceil(5 / 2) = 3

Concatenating the batches in order gives back the input exactly.
An empty id list gives zero batches.
"""

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from cfreader.exceptions import ConfigurationError


@dataclass(frozen=True)
class BatchPlan:
    """Ordered, immutable partition of row keys into batches."""

    batches: Tuple[Tuple[str, ...], ...]
    batch_size: int

    @property
    def total_batches(self) -> int:
        return len(self.batches)

    @property
    def record_count(self) -> int:
        return sum(len(batch) for batch in self.batches)

    def __len__(self) -> int:
        return len(self.batches)

    def __iter__(self) -> Iterator[Tuple[str, ...]]:
        return iter(self.batches)

    def __getitem__(self, index: int) -> Tuple[str, ...]:
        return self.batches[index]


def validate_batch_size(batch_size: int) -> int:
    """
    Check that batch_size is a positive integer.

    Raises:
        ConfigurationError: batch_size is not an int or is <= 0
    """
    # bool is an int subclass but True/False are never meant as sizes
    if isinstance(batch_size, bool) or not isinstance(batch_size, int):
        raise ConfigurationError(
            f"Error batching records: the batch size should be a positive "
            f"integer, got {batch_size!r}"
        )
    if batch_size <= 0:
        raise ConfigurationError(
            "Error batching records: the batch size should be a positive integer"
        )
    return batch_size


def chunk_ids(record_ids: Sequence[str], batch_size: int) -> BatchPlan:
    """
    Partition record_ids into consecutive batches of at most batch_size keys.

    Args:
        record_ids: Row keys in the order records should be returned
        batch_size: Maximum keys per batch, must be >= 1

    Returns:
        BatchPlan with ceil(len(record_ids) / batch_size) batches

    Example:
        >>> chunk_ids(["a", "b", "c"], 2).batches
        (('a', 'b'), ('c',))
    """
    size = validate_batch_size(batch_size)
    ids = tuple(record_ids)
    batches = tuple(ids[start : start + size] for start in range(0, len(ids), size))
    return BatchPlan(batches=batches, batch_size=size)
