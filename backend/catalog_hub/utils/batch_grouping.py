"""
Batch grouping — bounded parallel chunks for DB merges and storefront lookups.

Items of one chunk run concurrently; chunks run one after another.
Version: 1.0.0
"""
import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence, TypeVar

logger = logging.getLogger("batch_grouping")

T = TypeVar("T")
R = TypeVar("R")


def calculate_batch_groups(items: Sequence[T], max_batch_size: int) -> List[List[T]]:
    """Group items into consecutive batches of at most max_batch_size."""
    if max_batch_size < 1:
        raise ValueError("max_batch_size must be >= 1")
    batches = []
    current_batch = []
    for item in items:
        current_batch.append(item)
        if len(current_batch) >= max_batch_size:
            batches.append(current_batch)
            current_batch = []
    if current_batch:
        batches.append(current_batch)
    return batches


async def run_in_chunks(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    chunk_size: int,
) -> List[R]:
    """Run worker over items chunk by chunk, returning results in input order.

    The worker owns its error handling: an exception escaping it aborts
    the remaining chunks.
    """
    results: List[R] = []
    batches = calculate_batch_groups(items, chunk_size)
    for index, batch in enumerate(batches, start=1):
        logger.info("processing chunk %d/%d size=%d", index, len(batches), len(batch))
        results.extend(await asyncio.gather(*(worker(item) for item in batch)))
    return results
