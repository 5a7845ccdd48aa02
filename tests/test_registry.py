from __future__ import annotations

from funcstack.functions.registry import FunctionRegistry
from funcstack.functions.schemas import FunctionProps


def test_register_lookup_and_all():
    registry = FunctionRegistry()
    props = FunctionProps(handler="src/a.main")

    registry.register("c8abc", props)

    assert registry.lookup("c8abc") is props
    assert registry.lookup("missing") is None
    assert registry.all() == {"c8abc": props}
    assert registry.count() == 1


def test_last_write_wins():
    registry = FunctionRegistry()
    registry.register("c8abc", FunctionProps(handler="src/a.main"))
    registry.register("c8abc", FunctionProps(handler="src/b.main"))

    assert registry.lookup("c8abc").handler == "src/b.main"
    assert registry.count() == 1


def test_all_returns_a_copy():
    registry = FunctionRegistry()
    registry.register("c8abc", FunctionProps(handler="src/a.main"))

    registry.all().clear()

    assert registry.count() == 1


def test_summaries_render_permissions():
    registry = FunctionRegistry()
    registry.register("all", FunctionProps(handler="src/a.main", permissions="*"))
    registry.register("some", FunctionProps(handler="src/b.main", permissions=["s3"]))

    summaries = {s.address: s for s in registry.list_summaries()}

    assert summaries["all"].permissions == "*"
    assert summaries["some"].permissions == ["s3"]


def test_clear():
    registry = FunctionRegistry()
    registry.register("c8abc", FunctionProps(handler="src/a.main"))
    registry.clear()
    assert registry.all() == {}
