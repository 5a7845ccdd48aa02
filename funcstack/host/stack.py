"""Deployment units (stacks).

A DeploymentUnit owns an arena of template resources keyed by logical id.
Resources register themselves on creation; later passes (e.g. deferred
builds) look them up again by that key instead of holding references.
"""

import logging
import re
from typing import TYPE_CHECKING, Any, Optional

from funcstack.host.construct import Construct
from funcstack.host.tokens import resolve_value

if TYPE_CHECKING:
    from funcstack.functions.schemas import FunctionProps
    from funcstack.host.resources import CfnResource

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


class DeploymentUnit(Construct):
    """An independently deployable group of resources."""

    def __init__(self, scope: Construct, id: str):
        super().__init__(scope, id)
        self.dependencies: set["DeploymentUnit"] = set()
        self.default_function_props: list["FunctionProps"] = []
        self.resources: dict[str, "CfnResource"] = {}
        self.parameters: dict[str, dict[str, Any]] = {}

    @staticmethod
    def of(construct: Construct) -> "DeploymentUnit":
        """Find the unit a construct belongs to."""
        current: Optional[Construct] = construct
        while current is not None:
            if isinstance(current, DeploymentUnit):
                return current
            current = current.node.scope
        raise ValueError(f"{construct!r} is not defined inside a DeploymentUnit")

    def add_dependency(self, other: "DeploymentUnit") -> None:
        """Deploy ``other`` before this unit. Repeated calls are no-ops."""
        if other is self:
            return
        if other not in self.dependencies:
            logger.debug(f"Unit {self.node.id} now depends on {other.node.id}")
        self.dependencies.add(other)

    def add_default_function_props(self, props: "FunctionProps") -> None:
        """Add defaults applied to every function declared after this call."""
        self.default_function_props.append(props)

    # -- Resource arena ----------------------------------------------------

    def allocate_logical_id(self, construct: Construct) -> str:
        """Stable logical id for a construct inside this unit."""
        unit_path = self.node.path
        relative = construct.node.path[len(unit_path):].strip("/")
        readable = "".join(
            _NON_ALNUM.sub("", part) for part in relative.split("/") if part != "Resource"
        )
        return f"{readable}{construct.node.addr[-8:].upper()}"

    def register_resource(self, resource: "CfnResource") -> None:
        if resource.logical_id in self.resources:
            raise ValueError(f"Duplicate logical id in {self.node.id}: {resource.logical_id}")
        self.resources[resource.logical_id] = resource

    def find_resource(self, logical_id: str) -> "CfnResource":
        resource = self.resources.get(logical_id)
        if resource is None:
            raise KeyError(f"Resource not found in {self.node.id}: {logical_id}")
        return resource

    def add_parameter(self, parameter_id: str, definition: dict[str, Any]) -> str:
        """Add a template parameter if missing and return its id."""
        if parameter_id not in self.parameters:
            self.parameters[parameter_id] = definition
        return parameter_id

    def to_template(self) -> dict[str, Any]:
        """Render this unit's resources and parameters."""
        template: dict[str, Any] = {
            "Resources": {
                logical_id: resource.render()
                for logical_id, resource in self.resources.items()
            }
        }
        if self.parameters:
            template["Parameters"] = resolve_value(self.parameters)
        return template
