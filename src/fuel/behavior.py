"""Behavior construction — turning a behavior function into live operations.

A behavior is a plain callable:

    def behavior(on_update, tree) -> cleanup | None

It registers at most one update callback through on_update. That callback
receives (new_props, old_props) and may return a cleanup, which runs right
before the next invocation and once more on destroy.
"""

from __future__ import annotations

from typing import Any, Callable

from fuel.errors import ProtocolError

Cleanup = Callable[[], None] | None


class ResourceOperations:
    """What the reconciler can do with a constructed resource."""

    __slots__ = ("update", "destroy")

    def __init__(self, update: Callable[[Any], None] | None, destroy: Callable[[], None]) -> None:
        self.update = update
        self.destroy = destroy


def construct_resource_operations(behavior: Callable, initial_props: Any, tree) -> ResourceOperations:
    """Run behavior once and capture its update and destroy operations."""
    update = None
    props = initial_props
    last_cleanup: Cleanup = None

    def on_update(callback: Callable[[Any, Any], Cleanup]) -> None:
        nonlocal update, last_cleanup
        if update is not None:
            raise ProtocolError(f"{_name(behavior)} called on_update more than once")

        def run(new_props: Any) -> None:
            nonlocal props, last_cleanup
            if last_cleanup is not None:
                cleanup, last_cleanup = last_cleanup, None
                cleanup()
            old_props, props = props, new_props
            last_cleanup = callback(new_props, old_props)

        update = run
        last_cleanup = callback(props, None)

    cleanup = behavior(on_update, tree)

    def destroy() -> None:
        nonlocal last_cleanup
        if last_cleanup is not None:
            last, last_cleanup = last_cleanup, None
            last()
        if cleanup is not None:
            cleanup()

    return ResourceOperations(update, destroy)


def _name(behavior: Callable) -> str:
    return getattr(behavior, "__name__", repr(behavior))
