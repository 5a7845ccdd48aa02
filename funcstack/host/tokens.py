"""Deploy-time values.

A Token stands in for a value that is only known once the owning unit is
deployed (e.g. the ARN of a layer version created in the same app).
"""

from typing import Any


class Token:
    """An unresolved value rendered as an intrinsic in the template."""

    def __init__(self, intrinsic: dict[str, Any], label: str = ""):
        self.intrinsic = intrinsic
        self.label = label

    def resolve(self) -> dict[str, Any]:
        return self.intrinsic

    def __repr__(self) -> str:
        return f"Token({self.label or self.intrinsic})"


def is_unresolved(value: Any) -> bool:
    """Check whether a value is a Token rather than a literal."""
    return isinstance(value, Token)


def resolve_value(value: Any) -> Any:
    """Render nested values for the template, replacing tokens with intrinsics."""
    if isinstance(value, Token):
        return value.resolve()
    if hasattr(value, "to_template_value"):
        return resolve_value(value.to_template_value())
    if isinstance(value, dict):
        return {k: resolve_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [resolve_value(v) for v in value]
    return value
