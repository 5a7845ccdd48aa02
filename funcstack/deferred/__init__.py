"""Deferred build tasks, registered during declaration and drained once."""

from funcstack.deferred.queue import DeferredTaskQueue
from funcstack.deferred.schemas import (
    BuildFailure,
    BuildResult,
    BuildSuccess,
    DeferredTaskFailure,
    DrainResult,
)

__all__ = [
    "DeferredTaskQueue",
    "BuildFailure",
    "BuildResult",
    "BuildSuccess",
    "DeferredTaskFailure",
    "DrainResult",
]
