"""Translate permission grants into role policy statements."""

import logging
from typing import Any

from funcstack.errors import FunctionConfigurationError
from funcstack.functions.schemas import AllPermissions, Permissions
from funcstack.host.binding import Bindable, bind_permissions
from funcstack.host.resources import PolicyStatement, Role

logger = logging.getLogger(__name__)


def statements_for_grant(grant: Any) -> list[PolicyStatement]:
    """Policy statements for a single grant.

    - "s3" -> s3:* on *
    - "s3:GetObject" -> s3:GetObject on *
    - PolicyStatement -> as-is
    - bindable resource -> the actions its binding declares
    """
    if isinstance(grant, PolicyStatement):
        return [grant]
    if isinstance(grant, str):
        action = grant if ":" in grant else f"{grant}:*"
        return [PolicyStatement(actions=[action], resources=["*"])]
    if isinstance(grant, Bindable):
        return [
            PolicyStatement(actions=[action], resources=list(resources))
            for action, resources in bind_permissions(grant).items()
        ]
    raise FunctionConfigurationError(f"Unsupported permission grant: {grant!r}")


def attach_permissions_to_role(role: Role, permissions: Permissions) -> None:
    """Add statements for every grant to the role's inline policy."""
    if isinstance(permissions, AllPermissions):
        role.add_to_policy(PolicyStatement(actions=["*"], resources=["*"]))
        return

    for grant in permissions or []:
        for statement in statements_for_grant(grant):
            role.add_to_policy(statement)
    logger.debug(f"Attached {len(permissions or [])} grant(s) to {role.node.path}")
