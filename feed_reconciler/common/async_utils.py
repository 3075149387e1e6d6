"""
Async helpers shared by the pipeline stages.
"""

import asyncio
from typing import Awaitable, Callable, Iterable, List, TypeVar

T = TypeVar('T')
R = TypeVar('R')

DEFAULT_CONCURRENCY = 4


async def bounded_gather(
    func: Callable[[T], Awaitable[R]],
    items: Iterable[T],
    limit: int = DEFAULT_CONCURRENCY,
) -> List[R]:
    """
    Run func over items with at most `limit` calls in flight.

    Results come back in input order regardless of completion order.
    """
    semaphore = asyncio.Semaphore(max(limit, 1))

    async def run(item: T) -> R:
        async with semaphore:
            return await func(item)

    return list(await asyncio.gather(*(run(item) for item in items)))
