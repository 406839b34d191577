"""Bounded-concurrency fan-out with per-item failure isolation.

This module provides the single fan-out primitive used at every nesting
level of a sync (sources, targets, projects): run an async processor over
a sequence with at most N items in flight, and collect every outcome as it
settles instead of stopping at the first error.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from project_branch_sync.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class BatchResult(Generic[T]):
    """Result of a batch operation.

    Both lists are in completion order, not input order.
    """

    succeeded: list[T] = field(default_factory=list)
    failed: list[tuple[int, Exception]] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        """Number of successful items."""
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        """Number of failed items."""
        return len(self.failed)

    def raise_first_failure(self) -> None:
        """Re-raise the first recorded failure, if any."""
        if self.failed:
            raise self.failed[0][1]


class BatchExecutor(Generic[T, R]):
    """Runs an async processor over items with bounded concurrency.

    Usage:
        executor = BatchExecutor(concurrency=20)

        async def sync_one(target: Target) -> TargetSyncResult:
            return await synchronizer.sync_target(org_id, target)

        result = await executor.execute(targets, sync_one)

        for target_result in result.succeeded:
            ...
        for index, error in result.failed:
            ...

    A failing item never cancels its siblings; every started item runs to
    completion before execute() returns.
    """

    def __init__(self, concurrency: int = 5) -> None:
        """Initialize the batch executor.

        Args:
            concurrency: Maximum number of items processed at once
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._concurrency = concurrency

    @property
    def concurrency(self) -> int:
        """Maximum number of items in flight."""
        return self._concurrency

    async def execute(
        self,
        items: Sequence[T],
        processor: Callable[[T], Awaitable[R]],
        *,
        item_name: Callable[[T], str] | None = None,
    ) -> BatchResult[R]:
        """Execute the processor on all items.

        Args:
            items: Sequence of items to process
            processor: Async function to process each item
            item_name: Optional function to get display name for an item

        Returns:
            BatchResult containing succeeded results and failed items
        """
        result: BatchResult[R] = BatchResult()

        if not items:
            return result

        semaphore = asyncio.Semaphore(self._concurrency)

        async def run_one(index: int, item: T) -> None:
            async with semaphore:
                try:
                    value = await processor(item)
                except Exception as e:
                    name = item_name(item) if item_name else f"item {index}"
                    logger.debug("Batch item {} failed: {}", name, e)
                    result.failed.append((index, e))
                    return
                result.succeeded.append(value)

        await asyncio.gather(*(run_one(i, item) for i, item in enumerate(items)))

        logger.debug(
            "Batch complete: {} succeeded, {} failed (concurrency={})",
            result.success_count,
            result.failure_count,
            self._concurrency,
        )
        return result


async def map_bounded(
    items: Sequence[T],
    processor: Callable[[T], Awaitable[R]],
    *,
    concurrency: int,
    item_name: Callable[[T], str] | None = None,
) -> BatchResult[R]:
    """Convenience function for one-off bounded fan-out.

    Args:
        items: Sequence of items to process
        processor: Async function to process each item
        concurrency: Maximum number of items in flight
        item_name: Optional function to get display name for an item

    Returns:
        BatchResult containing succeeded results and failed items
    """
    executor: BatchExecutor[T, R] = BatchExecutor(concurrency=concurrency)
    return await executor.execute(items, processor, item_name=item_name)
