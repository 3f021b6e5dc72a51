"""Tests for Element, component factories, and keyed children."""

import pytest

from fuel import Element, component, keyed


def _noop(on_update, tree):
    return None


Noop = component(_noop)


class TestComponent:
    def test_builds_element(self):
        props = {"a": 1}
        el = Noop(props)
        assert isinstance(el, Element)
        assert el.behavior is _noop
        assert el.props is props
        assert dict(el.children) == {}
        assert el.key is None

    def test_children_and_key(self):
        child = Noop()
        el = Noop(None, [child], key="root")
        assert dict(el.children) == {0: child}
        assert el.key == "root"

    def test_factory_keeps_behavior_name(self):
        assert Noop.__name__ == "_noop"
        assert Noop.behavior is _noop

    def test_immutable(self):
        el = Noop({"a": 1})
        with pytest.raises(AttributeError, match="immutable"):
            el.props = {}
        with pytest.raises(TypeError):
            el.children[0] = Noop()

    def test_repr(self):
        assert "Element(_noop" in repr(Noop(None, key="k"))


class TestKeyed:
    def test_none_is_empty(self):
        assert keyed(None) == {}

    def test_single_element(self):
        el = Noop()
        assert keyed(el) == {0: el}
        named = Noop(key="x")
        assert keyed(named) == {"x": named}

    def test_positional(self):
        a, b = Noop(), Noop()
        assert keyed([a, b]) == {0: a, 1: b}

    def test_explicit_keys_mixed_with_positions(self):
        a, b, c = Noop(), Noop(key="b"), Noop()
        result = keyed([a, b, c])
        assert result == {0: a, "b": b, 2: c}
        assert list(result) == [0, "b", 2]

    def test_none_holes_keep_positions(self):
        """A conditionally omitted sibling does not shift later keys."""
        b = Noop()
        assert keyed([None, b]) == {1: b}

    def test_mapping(self):
        a, b = Noop(), Noop()
        assert keyed({"first": a, "gone": None, "second": b}) == {"first": a, "second": b}

    def test_duplicate_key(self):
        with pytest.raises(ValueError, match="Duplicate"):
            keyed([Noop(key="x"), Noop(key="x")])

    def test_rejects_non_elements(self):
        with pytest.raises(TypeError, match="not an Element"):
            keyed(["text"])
