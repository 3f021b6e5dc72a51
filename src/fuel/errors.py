"""Errors raised when the engine's calling protocol is violated.

User errors raised inside behaviors and render functions are never wrapped:
they propagate unmodified to whoever called apply() or ticked the scheduler.
"""


class ProtocolError(RuntimeError):
    """A programmer error that aborts the current operation."""


class HookOrderError(ProtocolError):
    """Hooks were called in a different order or number than on a previous render."""
