"""Error types raised while declaring and building functions.

Configuration errors fail the declaration synchronously. Build errors are
collected per deferred task and surfaced once, when the pass is finalized.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from funcstack.deferred.schemas import DeferredTaskFailure


class FunctionConfigurationError(ValueError):
    """Invalid function definition detected during the declaration pass."""


class DeferredTaskError(RuntimeError):
    """Misuse of the deferred task queue (e.g. registering during a drain)."""


class CrossUnitResolutionError(RuntimeError):
    """A layer reference reached a state the resolver cannot handle."""


class FunctionBuildError(RuntimeError):
    """A single function failed to build."""

    def __init__(self, handler: str, errors: list[str]):
        self.handler = handler
        self.errors = list(errors)
        super().__init__("\n".join(self.lines))

    @property
    def lines(self) -> list[str]:
        return [f'Failed to build function "{self.handler}"', *self.errors]


class DeferredBuildError(RuntimeError):
    """One or more deferred tasks failed during the pass drain.

    Carries every failure so all misconfigured functions are reported at once.
    """

    def __init__(self, failures: "list[DeferredTaskFailure]"):
        self.failures = list(failures)
        blocks = []
        for failure in self.failures:
            blocks.append(f"[{failure.task_id}]\n" + "\n".join(failure.messages))
        super().__init__(
            f"{len(self.failures)} deferred task(s) failed:\n" + "\n\n".join(blocks)
        )
