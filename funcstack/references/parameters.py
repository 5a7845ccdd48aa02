"""SSM parameter bridge.

Carries a value produced in one unit into another unit. The value is
written as an SSM parameter in the owning unit and read back at deploy
time in the consuming unit, so it is looked up live on every deploy.
"""

import logging
from typing import Union

from funcstack.host.resources import StringParameter
from funcstack.host.stack import DeploymentUnit
from funcstack.host.tokens import Token

logger = logging.getLogger(__name__)


class ParameterStoreBridge:
    """Reads and writes SSM parameters scoped to deployment units."""

    def put(
        self,
        unit: DeploymentUnit,
        parameter_id: str,
        name: str,
        value: Union[str, Token],
    ) -> StringParameter:
        """Create the parameter in ``unit`` unless it already exists."""
        existing = unit.node.try_find_child(parameter_id)
        if existing is not None:
            return existing
        logger.debug(f"Creating SSM parameter {name} in {unit.node.id}")
        return StringParameter(unit, parameter_id, parameter_name=name, string_value=value)

    def read_at(self, unit: DeploymentUnit, name: str) -> Token:
        """Deploy-time read of parameter ``name`` from within ``unit``."""
        return StringParameter.value_for_string_parameter(unit, name)
