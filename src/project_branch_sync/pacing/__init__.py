"""Bounded-concurrency fan-out shared by every sync level.

Components:
- BatchExecutor: semaphore-gated fan-out collecting settled results
- BatchResult: succeeded results and (index, error) failures
- map_bounded: one-off convenience wrapper
"""

from .batch import BatchExecutor, BatchResult, map_bounded

__all__ = [
    "BatchExecutor",
    "BatchResult",
    "map_bounded",
]
