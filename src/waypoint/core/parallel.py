"""Bounded, order-preserving parallel map for action bodies."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from typing import Any, Awaitable, Callable, Optional, Sequence, TypeVar, Union

from waypoint.errors import RunCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class CancellationSignal:
    """Run-level cancellation flag.

    Thread-safe, so it can be raised from any thread, including the worker
    threads that run synchronous ``parallel_map`` functions.
    """

    def __init__(self):
        self._event = threading.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()
            logger.info(f"Run cancellation requested: {reason}")

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RunCancelledError(f"Run cancelled: {self.reason}")


async def parallel_map(
    items: Sequence[T],
    fn: Callable[[T], Union[R, Awaitable[R]]],
    *,
    max_concurrent: int,
    cancellation: Optional[CancellationSignal] = None,
) -> list[R]:
    """
    Map ``fn`` over ``items`` concurrently.

    Args:
        items: Inputs. Results come back in the same order.
        fn: Async function, or a sync function which is run in a worker thread.
        max_concurrent: Max number of in-flight calls.
        cancellation: Checked before each call and when each call completes.

    Returns:
        ``[fn(items[0]), fn(items[1]), ...]``

    The first failure cancels the calls still pending and is re-raised;
    no partial result is returned.
    """
    if max_concurrent < 1:
        raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")

    items = list(items)
    if not items:
        return []

    semaphore = asyncio.Semaphore(max_concurrent)
    is_async = inspect.iscoroutinefunction(fn)

    async def bounded(item: T) -> R:
        async with semaphore:
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            if is_async:
                result = await fn(item)
            else:
                result = await asyncio.to_thread(fn, item)
                if inspect.isawaitable(result):
                    result = await result
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            return result

    tasks = [asyncio.ensure_future(bounded(item)) for item in items]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    logger.debug(f"parallel_map completed {len(results)} items (max_concurrent={max_concurrent})")
    return list(results)
