"""fuel: declarative reconciliation of resource trees, with context and hooks."""

from importlib.metadata import version as _version

__version__ = _version("fuel")

from fuel.errors import ProtocolError, HookOrderError
from fuel.element import Element, component, keyed
from fuel.context import Context, create_context, provider
from fuel.behavior import ResourceOperations, construct_resource_operations
from fuel._tree import TreeContext, TreeOperations
from fuel.reconciler import Resource, Handle, apply, handle
from fuel.scheduler import Scheduler, SCHEDULER, default_scheduler, tick, get_pending_count
from fuel.hooks import hooked, use_state, use_effect, use_memo, use_context
# textual NOT auto-imported — opt-in only

__all__ = [
    "ProtocolError",
    "HookOrderError",
    "Element",
    "component",
    "keyed",
    "Context",
    "create_context",
    "provider",
    "ResourceOperations",
    "construct_resource_operations",
    "TreeContext",
    "TreeOperations",
    "Resource",
    "Handle",
    "apply",
    "handle",
    "Scheduler",
    "SCHEDULER",
    "default_scheduler",
    "tick",
    "get_pending_count",
    "hooked",
    "use_state",
    "use_effect",
    "use_memo",
    "use_context",
]
