"""Schemas for deferred build tasks and their outcomes."""

from typing import Literal, Union

from pydantic import BaseModel, Field


class BuildSuccess(BaseModel):
    """A build produced an artifact."""

    type: Literal["success"] = "success"
    artifact_path: str = Field(..., description="Directory or archive holding the bundle")
    handler: str = Field(..., description="Resolved entry point inside the bundle")


class BuildFailure(BaseModel):
    """A build failed with human-readable errors."""

    type: Literal["error"] = "error"
    errors: list[str] = Field(default_factory=list)


BuildResult = Union[BuildSuccess, BuildFailure]


class DeferredTaskFailure(BaseModel):
    """A task that failed during a drain, attributed to its declaration."""

    task_id: str = Field(..., description="Address of the owning declaration")
    messages: list[str] = Field(default_factory=list)


class DrainResult(BaseModel):
    """Outcome of draining the deferred task queue."""

    succeeded: list[str] = Field(default_factory=list)
    failures: list[DeferredTaskFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
