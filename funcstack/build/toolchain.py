"""Build toolchain interface.

The toolchain compiles/bundles one function. It is given the function's
construct address and looks the props up in the pass's FunctionRegistry.
"""

from typing import Protocol, runtime_checkable

from funcstack.deferred.schemas import BuildResult


@runtime_checkable
class BuildToolchain(Protocol):
    """Builds function bundles."""

    async def build(self, address: str, mode: str) -> BuildResult:
        """Build the function registered under ``address``.

        Args:
            address: Construct address of the function
            mode: Session kind the build is for, e.g. "deploy"

        Returns:
            BuildSuccess with the artifact path and handler, or BuildFailure
        """
        ...
