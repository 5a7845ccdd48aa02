"""Merge function props with inherited defaults.

Per-field policy:
- scalars (handler, runtime, memory_size, ...): override wins if set
- environment: shallow merge, override keys win; omitted when empty
- layers, bind: base entries then override entries; omitted when empty
- permissions: ALL_PERMISSIONS on either side wins; otherwise concatenated
  like layers
"""

from typing import Any, Iterable, Optional

from funcstack.functions.schemas import AllPermissions, ALL_PERMISSIONS, FunctionProps

_LIST_FIELDS = ("layers", "bind")
_SPECIAL_FIELDS = ("environment", "permissions") + _LIST_FIELDS


def _concat(base: Optional[list[Any]], override: Optional[list[Any]]) -> Optional[list[Any]]:
    merged = [*(base or []), *(override or [])]
    return merged or None


def merge_props(
    base: Optional[FunctionProps] = None,
    override: Optional[FunctionProps] = None,
) -> FunctionProps:
    """Merge ``override`` on top of ``base``. Neither input is modified."""
    base = base or FunctionProps()
    override = override or FunctionProps()

    fields: dict[str, Any] = {}
    for name in FunctionProps.model_fields:
        if name in _SPECIAL_FIELDS:
            continue
        value = getattr(override, name)
        fields[name] = value if value is not None else getattr(base, name)

    environment = {**(base.environment or {}), **(override.environment or {})}
    fields["environment"] = environment or None

    for name in _LIST_FIELDS:
        fields[name] = _concat(getattr(base, name), getattr(override, name))

    if isinstance(base.permissions, AllPermissions) or isinstance(
        override.permissions, AllPermissions
    ):
        fields["permissions"] = ALL_PERMISSIONS
    else:
        fields["permissions"] = _concat(base.permissions, override.permissions)

    return FunctionProps(**fields)


def apply_defaults(
    defaults: Iterable[FunctionProps],
    props: Optional[FunctionProps] = None,
) -> FunctionProps:
    """Apply a unit's defaults to ``props``.

    Defaults are listed in the order they were added. Later defaults take
    priority over earlier ones and ``props`` takes priority over all of them.
    """
    merged = props or FunctionProps()
    for default in reversed(list(defaults)):
        merged = merge_props(default, merged)
    return merged
