"""Elements — immutable descriptions of desired resource state.

An element pairs a behavior with the props it should be applied with and
the keyed children below it. Elements are cheap: build a fresh tree for
every apply() and throw it away afterwards.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable, Hashable


class Element:
    """Desired state of one resource for a single apply() pass."""

    __slots__ = ("behavior", "props", "children", "key")

    def __init__(
        self,
        behavior: Callable,
        props: Any = None,
        children: Any = None,
        key: Hashable | None = None,
    ) -> None:
        object.__setattr__(self, "behavior", behavior)
        object.__setattr__(self, "props", props)
        object.__setattr__(self, "children", MappingProxyType(keyed(children)))
        object.__setattr__(self, "key", key)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Element is immutable (tried to set {name!r})")

    def __repr__(self) -> str:
        name = getattr(self.behavior, "__name__", repr(self.behavior))
        key = f", key={self.key!r}" if self.key is not None else ""
        return f"Element({name}, props={self.props!r}, children={len(self.children)}{key})"


def keyed(children: Any) -> dict[Hashable, Element]:
    """Normalize children into an insertion-ordered key -> Element dict.

    Lists are keyed by position unless an element carries an explicit key.
    None entries are dropped but keep their positional slot, so a
    conditionally rendered sibling does not shift the keys after it.
    """
    if children is None:
        return {}
    if isinstance(children, Element):
        return {0 if children.key is None else children.key: children}
    if isinstance(children, Mapping):
        result = {}
        for key, child in children.items():
            if child is None:
                continue
            _check_element(key, child)
            result[key] = child
        return result

    result = {}
    for index, child in enumerate(children):
        if child is None:
            continue
        _check_element(index, child)
        key = index if child.key is None else child.key
        if key in result:
            raise ValueError(f"Duplicate child key {key!r}")
        result[key] = child
    return result


def _check_element(key: Hashable, child: Any) -> None:
    if not isinstance(child, Element):
        raise TypeError(f"Child {key!r} is not an Element: {child!r}")


def component(behavior: Callable) -> Callable[..., Element]:
    """Bind a behavior to an element factory.

    Usage:
        def label(on_update, tree):
            widget = Label()
            on_update(lambda props, old: widget.update(props["text"]))
            return widget.remove

        Label_ = component(label)
        Label_({"text": "hi"})                # positional child
        Label_({"text": "hi"}, key="title")   # explicit key
    """

    @functools.wraps(behavior)
    def factory(props: Any = None, children: Any = None, *, key: Hashable | None = None) -> Element:
        return Element(behavior, props, children, key)

    factory.behavior = behavior
    return factory
