"""Hooks — local state for component functions, kept in call-order slots.

hooked(render) turns a function props -> elements into a component. While
render runs, the component's hook state is the active one (tracked with a
contextvar) and every use_* call claims the next slot.

The same hooks must be called in the same order on every render. A
mismatch raises HookOrderError rather than reading another hook's slot.

State and context changes never re-render synchronously. The first change
defers one re-render on the scheduler provided through SCHEDULER; further
changes before it runs are absorbed into it.

Usage:
    @hooked
    def Counter(props):
        count, set_count = use_state(props["start"])
        use_effect(lambda: print("count is", count), [count])
        return Label({"text": str(count)})

    root = handle()
    root.apply([Counter({"start": 1})])
"""

from __future__ import annotations

import contextvars
import functools
import logging
from typing import Any, Callable, TypeVar

from fuel.context import Context
from fuel.element import Element, component
from fuel.errors import HookOrderError, ProtocolError
from fuel.scheduler import SCHEDULER

logger = logging.getLogger("fuel.hooks")

T = TypeVar("T")

# The component whose render is currently running.
_current: contextvars.ContextVar[_Hooks | None] = contextvars.ContextVar("current_hooks", default=None)


class _StateSlot:
    __slots__ = ("value", "setter")
    kind = "use_state"

    def __init__(self, value: Any) -> None:
        self.value = value
        self.setter = None


class _EffectSlot:
    __slots__ = ("dependencies", "cleanup")
    kind = "use_effect"

    def __init__(self) -> None:
        self.dependencies = None
        self.cleanup = None


class _MemoSlot:
    __slots__ = ("value",)
    kind = "use_memo"

    def __init__(self, value: Any) -> None:
        self.value = value


class _ContextBox:
    __slots__ = ("value", "syncing")

    def __init__(self, value: Any) -> None:
        self.value = value
        self.syncing = False


class _Hooks:
    """Hook slots and re-render bookkeeping for one hooked resource."""

    __slots__ = ("render_fn", "tree", "children", "slots", "cursor", "props", "rendered", "pending", "destroyed")

    def __init__(self, render_fn: Callable, tree) -> None:
        self.render_fn = render_fn
        self.tree = tree
        self.children = tree.handle()
        self.slots: list = []
        self.cursor = 0
        self.props = None
        self.rendered = False
        self.pending = False
        self.destroyed = False

    def slot(self, kind: type, create: Callable[[], Any]) -> tuple[Any, bool]:
        """Claim the next slot. Returns (slot, created)."""
        index = self.cursor
        self.cursor += 1
        if index < len(self.slots):
            slot = self.slots[index]
            if type(slot) is not kind:
                raise HookOrderError(
                    f"Hook slot {index} of {self.name} holds {slot.kind} but {kind.kind} was called; "
                    "hooks must be called in the same order on every render"
                )
            return slot, False
        if self.rendered:
            raise HookOrderError(
                f"Hook slot {index} of {self.name} ({kind.kind}) was not called on the first render; "
                "hooks cannot be called conditionally"
            )
        slot = create()
        self.slots.append(slot)
        return slot, True

    @property
    def name(self) -> str:
        return getattr(self.render_fn, "__name__", repr(self.render_fn))

    def render(self) -> None:
        self.cursor = 0
        token = _current.set(self)
        try:
            elements = self.render_fn(self.props)
        finally:
            _current.reset(token)
        if self.cursor != len(self.slots):
            raise HookOrderError(
                f"{self.name} called {self.cursor} hooks but its previous render called {len(self.slots)}"
            )
        self.rendered = True
        self.children.apply(elements)

    def schedule(self) -> None:
        """Defer one re-render. Changes before it runs share it."""
        if self.destroyed or self.pending:
            return
        self.pending = True
        logger.debug("Scheduling re-render of %s", self.name)
        self.tree.get_context(SCHEDULER).defer(self._flush)

    def _flush(self) -> None:
        self.pending = False
        if self.destroyed:
            logger.debug("Skipping re-render of destroyed %s", self.name)
            return
        self.render()

    def destroy(self) -> None:
        self.destroyed = True
        for slot in self.slots:
            if isinstance(slot, _EffectSlot) and slot.cleanup is not None:
                cleanup, slot.cleanup = slot.cleanup, None
                cleanup()
        self.children.apply(None)


def _active(hook: str) -> _Hooks:
    hooks = _current.get()
    if hooks is None:
        raise ProtocolError(f"{hook}() can only be called while a hooked component renders")
    return hooks


def hooked(render: Callable[[Any], Any]) -> Callable[..., Element]:
    """Decorator: turn render(props) -> elements into an element factory."""

    def behavior(on_update, tree):
        hooks = _Hooks(render, tree)

        def update(props, _old_props):
            hooks.props = props
            hooks.render()

        on_update(update)
        return hooks.destroy

    functools.update_wrapper(behavior, render)
    return component(behavior)


def use_state(initial: T) -> tuple[T, Callable[[Any], None]]:
    """Return (value, set_value). set_value takes a value or a function of the current value.

    The setter is the same object on every render.
    """
    hooks = _active("use_state")
    slot, created = hooks.slot(_StateSlot, lambda: _StateSlot(initial))
    if created:

        def set_value(value: Any) -> None:
            if callable(value):
                value = value(slot.value)
            slot.value = value
            hooks.schedule()

        slot.setter = set_value
    return slot.value, slot.setter


def use_effect(callback: Callable[[], Any], dependencies: list | tuple | None = None) -> None:
    """Run callback on the first render and whenever a dependency changes.

    Dependencies are compared by identity, position by position. Passing
    None runs the effect on every render. callback may return a cleanup,
    which runs before the next invocation and when the component is destroyed.
    """
    hooks = _active("use_effect")
    slot, created = hooks.slot(_EffectSlot, _EffectSlot)
    if not created and not _changed(slot.dependencies, dependencies):
        return
    if slot.cleanup is not None:
        cleanup, slot.cleanup = slot.cleanup, None
        cleanup()
    slot.cleanup = callback()
    slot.dependencies = dependencies


def _changed(old: list | tuple | None, new: list | tuple | None) -> bool:
    if old is None or new is None:
        return True
    if old is new:
        return False
    if len(old) != len(new):
        return True
    return any(a is not b for a, b in zip(old, new))


def use_memo(callback: Callable[[], T]) -> T:
    """Compute callback() on the first render and return that same value forever.

    There is no dependency list: the value is never recomputed. Use it as a
    lazily initialized cell that survives re-renders.
    """
    hooks = _active("use_memo")
    slot, _ = hooks.slot(_MemoSlot, lambda: _MemoSlot(callback()))
    return slot.value


def use_context(context: Context[T]) -> T:
    """Read context and re-render when the provided value changes."""
    hooks = _active("use_context")
    box = use_memo(lambda: _ContextBox(hooks.tree.get_context(context)))

    def receive(value: Any) -> None:
        box.value = value
        if not box.syncing:
            hooks.schedule()

    def subscribe():
        box.value = hooks.tree.get_context(context)
        box.syncing = True
        try:
            return hooks.tree.subscribe_context(context, receive)
        finally:
            box.syncing = False

    use_effect(subscribe, [context])
    return box.value
