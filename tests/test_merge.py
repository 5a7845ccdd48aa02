from __future__ import annotations

from funcstack.functions.merge import apply_defaults, merge_props
from funcstack.functions.schemas import ALL_PERMISSIONS, AllPermissions, FunctionProps


def test_scenario_handler_props_merged_with_defaults():
    props = FunctionProps(handler="a.b", runtime="nodejs18.x")
    default = FunctionProps(memory_size=2048, permissions=["*"])

    merged = merge_props(default, props)

    assert merged.handler == "a.b"
    assert merged.runtime == "nodejs18.x"
    assert merged.memory_size == 2048
    assert merged.permissions is ALL_PERMISSIONS
    assert merged.environment is None
    assert merged.layers is None
    assert merged.bind is None


def test_environment_contains_both_sides_override_wins():
    a = FunctionProps(environment={"A": "1", "SHARED": "base"})
    b = FunctionProps(environment={"B": "2", "SHARED": "override"})

    merged = merge_props(a, b)

    assert merged.environment == {"A": "1", "B": "2", "SHARED": "override"}


def test_absent_environment_on_both_sides_yields_no_field():
    merged = merge_props(FunctionProps(handler="x"), FunctionProps(timeout=5))
    assert merged.environment is None


def test_layers_and_bind_concatenate_base_first():
    a = FunctionProps(layers=["arn:a"], bind=["bucket"])
    b = FunctionProps(layers=["arn:b", "arn:c"])

    merged = merge_props(a, b)

    assert merged.layers == ["arn:a", "arn:b", "arn:c"]
    assert merged.bind == ["bucket"]


def test_empty_lists_are_omitted():
    merged = merge_props(FunctionProps(layers=[]), FunctionProps(layers=[], permissions=[]))
    assert merged.layers is None
    assert merged.permissions is None


def test_scalar_override_wins_and_base_survives():
    base = FunctionProps(handler="base.main", timeout=30, tracing="disabled")
    override = FunctionProps(handler="override.main")

    merged = merge_props(base, override)

    assert merged.handler == "override.main"
    assert merged.timeout == 30
    assert merged.tracing == "disabled"


def test_permission_lists_concatenate():
    merged = merge_props(FunctionProps(permissions=["s3"]), FunctionProps(permissions=["sns"]))
    assert merged.permissions == ["s3", "sns"]


def test_sentinel_on_either_side_wins():
    explicit = FunctionProps(permissions=["s3"])
    everything = FunctionProps(permissions="*")

    assert isinstance(merge_props(everything, explicit).permissions, AllPermissions)
    assert isinstance(merge_props(explicit, everything).permissions, AllPermissions)


def test_sentinel_grouping_both_ways_gives_sentinel():
    # Permission merging is left as-is; both groupings propagate the sentinel
    a = FunctionProps(permissions=["s3"])
    b = FunctionProps(permissions="*")
    c = FunctionProps(permissions=["sns"])

    left = merge_props(merge_props(a, b), c)
    right = merge_props(a, merge_props(b, c))

    assert left.permissions is ALL_PERMISSIONS
    assert right.permissions is ALL_PERMISSIONS


def test_merge_does_not_modify_inputs():
    base = FunctionProps(environment={"A": "1"}, layers=["arn:a"])
    override = FunctionProps(environment={"B": "2"}, layers=["arn:b"])

    merge_props(base, override)

    assert base.environment == {"A": "1"}
    assert base.layers == ["arn:a"]
    assert override.layers == ["arn:b"]


def test_apply_defaults_later_default_wins_and_props_win_over_all():
    first = FunctionProps(memory_size=256, timeout=5, environment={"ORDER": "first", "A": "1"})
    second = FunctionProps(memory_size=512, environment={"ORDER": "second"})
    props = FunctionProps(handler="src/main.handler", environment={"B": "2"}, timeout=20)

    merged = apply_defaults([first, second], props)

    assert merged.memory_size == 512
    assert merged.timeout == 20
    assert merged.handler == "src/main.handler"
    assert merged.environment == {"ORDER": "second", "A": "1", "B": "2"}


def test_apply_defaults_concatenates_outermost_first():
    first = FunctionProps(layers=["arn:first"])
    second = FunctionProps(layers=["arn:second"])
    props = FunctionProps(layers=["arn:own"])

    merged = apply_defaults([first, second], props)

    assert merged.layers == ["arn:first", "arn:second", "arn:own"]


def test_apply_defaults_without_defaults_returns_props():
    props = FunctionProps(handler="src/main.handler")
    assert apply_defaults([], props) == props
