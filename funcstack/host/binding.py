"""Bound resource helpers.

A bindable resource exposes ``get_function_binding()`` returning a
FunctionBinding: the environment variables a function needs to reach the
resource and the IAM actions it must be granted on it.
"""

from typing import Any, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from funcstack.host.tokens import Token


class BindingVariable(BaseModel):
    """One value exposed to bound functions."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    environment: Union[str, Token]
    parameter: Optional[Union[str, Token]] = None


class FunctionBinding(BaseModel):
    """What binding a resource contributes to a function."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    client_package: str = Field(..., description="Client package name, e.g. 'bucket'")
    variables: dict[str, BindingVariable] = Field(default_factory=dict)
    permissions: dict[str, list[Any]] = Field(
        default_factory=dict,
        description="IAM action -> resource ARNs",
    )


@runtime_checkable
class Bindable(Protocol):
    """A resource that can be bound to a function."""

    node: Any

    def get_function_binding(self) -> Optional[FunctionBinding]:
        ...


def _env_key(binding: FunctionBinding, resource_id: str, prop: str) -> str:
    return f"SST_{binding.client_package.upper()}_{prop}_{resource_id}"


def bind_environment(resource: Bindable) -> dict[str, Union[str, Token]]:
    """Environment variables contributed by a bound resource."""
    binding = resource.get_function_binding()
    if binding is None:
        return {}
    return {
        _env_key(binding, resource.node.id, prop): variable.environment
        for prop, variable in binding.variables.items()
    }


def bind_permissions(resource: Bindable) -> dict[str, list[Any]]:
    """IAM action -> resources contributed by a bound resource."""
    binding = resource.get_function_binding()
    if binding is None:
        return {}
    return dict(binding.permissions)
