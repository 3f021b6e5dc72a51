"""Textual integration for fuel. Opt-in — requires textual.

Hooked components under root(app, ...) re-render on the app's message
loop instead of the default scheduler.

// [LAW:locality-or-seam] Textual coupling isolated in this module — the reconciler stays agnostic.
// [LAW:no-shared-mutable-globals] _paused_apps and _parked have a single owner (this module),
//   explicit API (pause/is_safe), documented invariant (id present <-> inside pause context).
"""

import threading
from contextlib import contextmanager

from textual.app import App

from fuel.context import provider
from fuel.scheduler import SCHEDULER

# Module-owned pause state — keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()
# Re-renders deferred while an app was paused, replayed in order on resume.
_parked: dict[int, list] = {}

_ProvideScheduler = provider(SCHEDULER)


@contextmanager
def pause(app: App):
    """Hold deferred re-renders while widgets are being replaced."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)
        for task in _parked.pop(key, []):
            app.call_next(task)


def is_safe(app: App) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


class AppScheduler:
    """Scheduler that runs deferred re-renders on a Textual app's loop.

    Calls from other threads are marshaled with call_from_thread.
    """

    __slots__ = ("_app", "_main")

    def __init__(self, app: App) -> None:
        self._app = app
        self._main = threading.get_ident()

    def defer(self, task) -> None:
        if threading.get_ident() != self._main:
            self._app.call_from_thread(self._enqueue, task)
        else:
            self._enqueue(task)

    def _enqueue(self, task) -> None:
        key = id(self._app)
        if key in _paused_apps:
            _parked.setdefault(key, []).append(task)
        else:
            self._app.call_next(task)

    def __repr__(self) -> str:
        return f"AppScheduler({type(self._app).__name__})"


def root(app: App, children):
    """Element that routes re-renders of everything in children to app's loop.

    Usage:
        class Demo(App):
            def on_mount(self):
                self.tree = handle()
                self.tree.apply(root(self, [Counter({"start": 0})]))
    """
    return _ProvideScheduler(AppScheduler(app), children)
