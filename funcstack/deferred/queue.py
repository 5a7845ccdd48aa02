"""Deferred task queue.

Build obligations are registered synchronously while the declaration pass
runs and are drained together once the pass is complete:

1. drain_all() takes every pending task and clears the queue
2. All tasks run concurrently; a failing task never cancels its siblings
3. Failures are collected per task and returned together

There is no timeout: a hung task stalls the drain.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable

from funcstack.deferred.schemas import DeferredTaskFailure, DrainResult
from funcstack.errors import DeferredTaskError, FunctionBuildError

logger = logging.getLogger(__name__)

DeferredOperation = Callable[[], Awaitable[object]]


class DeferredTaskQueue:
    """Pending build obligations for one deployment pass."""

    def __init__(self) -> None:
        self._pending: list[tuple[str, DeferredOperation]] = []
        self._draining = False

    @property
    def is_draining(self) -> bool:
        return self._draining

    def pending_count(self) -> int:
        return len(self._pending)

    def register(self, task_id: str, operation: DeferredOperation) -> None:
        """Register a no-argument coroutine function to run at drain time.

        Raises:
            DeferredTaskError: If called while a drain is in progress
        """
        if self._draining:
            raise DeferredTaskError(
                f"Cannot register deferred task {task_id} while the queue is draining"
            )
        self._pending.append((task_id, operation))
        logger.debug(f"Registered deferred task {task_id} ({len(self._pending)} pending)")

    def reset(self) -> None:
        """Discard pending tasks without running them."""
        if self._pending:
            logger.warning(f"Discarding {len(self._pending)} pending deferred task(s)")
        self._pending = []

    async def drain_all(self) -> DrainResult:
        """Run every pending task concurrently and wait for all of them."""
        tasks = self._pending
        self._pending = []

        if not tasks:
            return DrainResult()

        logger.info(f"Draining {len(tasks)} deferred task(s)")
        start = time.time()
        self._draining = True
        try:
            outcomes = await asyncio.gather(
                *(_run(operation) for _, operation in tasks),
                return_exceptions=True,
            )
        finally:
            self._draining = False

        result = DrainResult()
        for (task_id, _), outcome in zip(tasks, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                failure = DeferredTaskFailure(task_id=task_id, messages=_messages(outcome))
                logger.error(f"Deferred task {task_id} failed: {failure.messages[0]}")
                result.failures.append(failure)
            else:
                result.succeeded.append(task_id)

        duration_ms = int((time.time() - start) * 1000)
        logger.info(
            f"Drained {len(tasks)} deferred task(s) in {duration_ms}ms: "
            f"{len(result.succeeded)} succeeded, {len(result.failures)} failed"
        )
        return result


async def _run(operation: DeferredOperation) -> object:
    return await operation()


def _messages(error: Exception) -> list[str]:
    if isinstance(error, FunctionBuildError):
        return error.lines
    return [f"{type(error).__name__}: {error}"]
