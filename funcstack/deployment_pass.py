"""Deployment pass: per-pass state shared by every function declaration.

One DeploymentPass owns the deferred task queue, the function registry and
the layer reference memo. A new pass is started for every synthesis so
tasks from a previous pass can never be drained twice.
"""

import asyncio
import logging
import uuid

from funcstack.deferred.queue import DeferredTaskQueue
from funcstack.deferred.schemas import DrainResult
from funcstack.errors import DeferredBuildError, DeferredTaskError
from funcstack.functions.registry import FunctionRegistry
from funcstack.references.resolver import ReferenceResolver

logger = logging.getLogger(__name__)


class DeploymentPass:
    """State scoped to one declaration pass and its drain."""

    def __init__(self) -> None:
        self.pass_id = f"pass-{uuid.uuid4().hex[:12]}"
        self.tasks = DeferredTaskQueue()
        self.functions = FunctionRegistry()
        self.references = ReferenceResolver(is_frozen=lambda: self.tasks.is_draining)
        self.finished = False
        logger.info(f"Started deployment pass {self.pass_id}")

    def _ensure_active(self) -> None:
        if self.finished:
            raise DeferredTaskError(f"Deployment pass {self.pass_id} is already finished")

    async def drain(self) -> DrainResult:
        """Drain all deferred tasks registered so far."""
        self._ensure_active()
        return await self.tasks.drain_all()

    def finalize(self) -> DrainResult:
        """Drain deferred tasks and close the pass.

        Returns:
            DrainResult listing the tasks that succeeded

        Raises:
            DeferredBuildError: If any task failed
        """
        self._ensure_active()
        loop = asyncio.new_event_loop()
        try:
            result = loop.run_until_complete(self.tasks.drain_all())
        finally:
            loop.close()
            self.finished = True

        if not result.ok:
            raise DeferredBuildError(result.failures)

        logger.info(
            f"Finished deployment pass {self.pass_id}: "
            f"{self.functions.count()} function(s), {len(result.succeeded)} build(s)"
        )
        return result
