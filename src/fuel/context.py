"""Contexts — identity-keyed channels for passing values down the tree.

A Context is only ever a lookup key. Values live in the providing
resource's TreeContext; the Context itself just carries the default that
is returned when no ancestor provides anything.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from fuel.element import component

T = TypeVar("T")


class Context(Generic[T]):
    """A channel with a default value. Compared and hashed by identity."""

    __slots__ = ("default", "name")

    def __init__(self, default: T, name: str = "Context") -> None:
        self.default = default
        self.name = name

    def __repr__(self) -> str:
        return f"Context({self.name}, default={self.default!r})"


def create_context(default: T = None, *, name: str = "Context") -> Context[T]:
    """Create a new, distinct context. Two calls never share a channel."""
    return Context(default, name)


def provider(context: Context[T]):
    """Factory for a resource that provides its props as the value of context.

    Usage:
        Theme = create_context("light")
        ThemeProvider = provider(Theme)

        handle.apply([ThemeProvider("dark", [Button({"label": "ok"})])])
    """

    def provide(on_update, tree):
        def push(value, _old):
            tree.set_context(context, value)

        on_update(push)
        return lambda: tree.unset_context(context)

    provide.__name__ = provide.__qualname__ = f"provide_{context.name}"
    return component(provide)
