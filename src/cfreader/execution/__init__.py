"""
Fetch execution against the column-family store.
"""

from cfreader.execution.fetcher import BatchFetcher, build_gets

__all__ = [
    "BatchFetcher",
    "build_gets",
]
