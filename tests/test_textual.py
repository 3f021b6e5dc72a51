"""Tests for fuel.textual — Textual integration layer."""

import threading

import pytest

from fuel import handle, hooked, use_state
from fuel import textual as ftx


class _MockApp:
    """Minimal mock matching the Textual App interface ftx needs."""

    def __init__(self, *, is_running=True):
        self.is_running = is_running
        self.next_calls = []
        self._call_from_thread_log = []

    def call_next(self, callback, *args):
        self.next_calls.append(callback)

    def call_from_thread(self, fn, *args):
        self._call_from_thread_log.append((fn, args))
        fn(*args)

    def run_next(self):
        calls, self.next_calls = self.next_calls, []
        for callback in calls:
            callback()
        return len(calls)


class TestAppScheduler:
    def test_defers_with_call_next(self):
        app = _MockApp()
        log = []
        scheduler = ftx.AppScheduler(app)
        scheduler.defer(lambda: log.append(1))
        assert log == []
        assert app.run_next() == 1
        assert log == [1]

    def test_thread_marshal(self):
        """Defers from a background thread go through call_from_thread."""
        app = _MockApp()
        scheduler = ftx.AppScheduler(app)
        task = lambda: None  # noqa: E731

        t = threading.Thread(target=scheduler.defer, args=(task,))
        t.start()
        t.join()

        assert len(app._call_from_thread_log) == 1
        assert app.next_calls == [task]

    def test_parks_while_paused(self):
        app = _MockApp()
        scheduler = ftx.AppScheduler(app)
        log = []
        with ftx.pause(app):
            scheduler.defer(lambda: log.append("a"))
            scheduler.defer(lambda: log.append("b"))
            assert app.next_calls == []
        assert len(app.next_calls) == 2
        app.run_next()
        assert log == ["a", "b"]


class TestRoot:
    def test_rerenders_on_app_loop(self):
        app = _MockApp()
        renders, setters = [], []

        @hooked
        def Counter(props):
            count, set_count = use_state(0)
            renders.append(count)
            setters.append(set_count)

        tree = handle()
        tree.apply(ftx.root(app, [Counter()]))
        setters[0](1)
        assert renders == [0]
        assert app.run_next() == 1
        assert renders == [0, 1]
        tree.apply([])


class TestPause:
    def test_is_safe(self):
        assert ftx.is_safe(_MockApp())
        assert not ftx.is_safe(_MockApp(is_running=False))

    def test_pause_restores_on_exception(self):
        app = _MockApp()
        assert ftx.is_safe(app)

        with pytest.raises(RuntimeError):
            with ftx.pause(app):
                assert not ftx.is_safe(app)
                raise RuntimeError("oops")

        # Restored despite exception
        assert ftx.is_safe(app)

    def test_pause_does_not_mutate_app(self):
        """// [LAW:no-shared-mutable-globals] pause state lives in the module, not on the app."""
        app = _MockApp()
        attrs_before = set(vars(app))
        with ftx.pause(app):
            attrs_during = set(vars(app))
        assert attrs_before == attrs_during == set(vars(app))

    def test_multiple_apps_independent(self):
        """Pausing one app does not affect another."""
        app_a = _MockApp()
        app_b = _MockApp()
        with ftx.pause(app_a):
            assert not ftx.is_safe(app_a)
            assert ftx.is_safe(app_b)
