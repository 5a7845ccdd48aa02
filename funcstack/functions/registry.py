"""Function registry - declared functions for one deployment pass.

Maps each function's construct address to its final merged props so that
build toolchains and introspection tooling can look them up after (or
during) the declaration pass.
"""

import logging
from typing import Optional

from funcstack.functions.schemas import FunctionProps, FunctionSummary

logger = logging.getLogger(__name__)


class FunctionRegistry:
    """Registry of function props keyed by construct address.

    No validation; the last registration for an address wins.
    """

    def __init__(self) -> None:
        self._functions: dict[str, FunctionProps] = {}

    def register(self, address: str, props: FunctionProps) -> None:
        """Record the final props for a declaration."""
        if address in self._functions:
            logger.debug(f"Replacing registered function: {address}")
        self._functions[address] = props
        logger.debug(f"Registered function {address} ({props.handler})")

    def lookup(self, address: str) -> Optional[FunctionProps]:
        """Get function props by address."""
        return self._functions.get(address)

    def all(self) -> dict[str, FunctionProps]:
        """All registered functions (a copy)."""
        return dict(self._functions)

    def list_summaries(self) -> list[FunctionSummary]:
        """List lightweight function summaries."""
        return [
            FunctionSummary.from_props(address, props)
            for address, props in self._functions.items()
        ]

    def count(self) -> int:
        """Get total number of functions."""
        return len(self._functions)

    def clear(self) -> None:
        self._functions.clear()
