"""
Async helpers for pagefeeds.

Feeds run as concurrent asyncio tasks. Blocking work (HTTP requests through
requests, local file reads) is pushed onto a thread pool so one
slow feed never stalls its siblings.
"""

import asyncio
import logging
from concurrent.futures import Executor
from functools import partial, wraps
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


def to_async(func: Callable[..., T]) -> Callable[..., Awaitable[T]]:
    """
    Convert synchronous function to async function.

    Runs the sync function in the event loop's default thread pool executor.

    Args:
        func: Synchronous function

    Returns:
        Async wrapper function

    Example:
        @to_async
        def read_page(path):
            return Path(path).read_text()

        async def main():
            html = await read_page("index.html")
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))
    return wrapper


async def run_blocking(
    func: Callable[..., T],
    *args,
    timeout: Optional[float] = None,
    executor: Optional[Executor] = None,
    **kwargs
) -> T:
    """
    Run a blocking callable off the event loop, optionally with a deadline.

    The deadline starts when a worker thread picks the call up, so time
    spent queued behind other calls in the executor does not count.

    Args:
        func: Synchronous callable
        *args: Positional arguments for func
        timeout: Seconds the call may run before raising asyncio.TimeoutError
        executor: Thread pool to run on (the loop's default pool if None)
        **kwargs: Keyword arguments for func

    Returns:
        Result of func
    """
    loop = asyncio.get_running_loop()
    if timeout is None:
        return await loop.run_in_executor(executor, partial(func, *args, **kwargs))

    started = asyncio.Event()

    def call():
        loop.call_soon_threadsafe(started.set)
        return func(*args, **kwargs)

    future = loop.run_in_executor(executor, call)
    waiter = asyncio.ensure_future(started.wait())
    try:
        await asyncio.wait({waiter, future}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
    return await asyncio.wait_for(future, timeout=timeout)


async def gather_with_errors(
    *coros,
    return_exceptions: bool = True
) -> List[Any]:
    """
    Gather coroutines with detailed error handling.

    Args:
        *coros: Coroutines to gather
        return_exceptions: Return exceptions instead of raising

    Returns:
        List of results

    Example:
        >>> results = await gather_with_errors(
        ...     pipeline_a.run(),
        ...     pipeline_b.run(),
        ... )
    """
    results = await asyncio.gather(*coros, return_exceptions=return_exceptions)

    # Log errors
    for i, result in enumerate(results):
        if isinstance(result, Exception):
            logger.error(f"Coroutine {i} failed: {result}")

    return results


def run_async(coro: Awaitable[T]) -> T:
    """
    Run async coroutine from synchronous context.

    Args:
        coro: Async coroutine to run

    Returns:
        Result of coroutine
    """
    return asyncio.run(coro)
