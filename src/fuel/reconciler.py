"""Reconciler — converge a keyed collection of live resources to a tree of elements.

For every key:
- missing from the target: destroy the resource (children first), drop the key;
- same behavior, new props object: call the updater, if one was registered;
- same behavior, identical props object: do nothing;
- different behavior: unset provided contexts, destroy, construct a new
  resource that adopts the old one's children;
- no resource yet: construct.

Then recurse into that resource's children before moving to the next key.

Errors raised by behaviors are not caught. The tree is left as far as the
pass got; recovering is up to the caller.
"""

from __future__ import annotations

import logging
import weakref
from typing import Any, Callable, Hashable, Mapping

from fuel._tree import TreeContext, TreeOperations, unset
from fuel.behavior import ResourceOperations, construct_resource_operations
from fuel.element import Element, keyed
from fuel.errors import ProtocolError

logger = logging.getLogger("fuel.reconciler")


class Resource:
    """The live counterpart of an element."""

    __slots__ = ("behavior", "props", "operations", "tree", "destroyed")

    def __init__(self, behavior: Callable, props: Any, tree: TreeContext) -> None:
        self.behavior = behavior
        self.props = props
        self.tree = tree
        self.operations: ResourceOperations | None = None
        self.destroyed = False

    def __repr__(self) -> str:
        name = getattr(self.behavior, "__name__", repr(self.behavior))
        state = "destroyed" if self.destroyed else "live"
        return f"Resource({name}, {state})"


def apply(existing: dict[Hashable, Resource], elements: Any, parent: TreeContext | None = None) -> None:
    """Mutate existing in place until it matches elements.

    elements may be anything keyed() accepts: an Element, a list, a
    key -> Element mapping, or None.
    """
    targets = keyed(elements)
    _remove_missing(existing, targets)

    for key, element in targets.items():
        resource = existing.get(key)
        if resource is not None:
            _remove_missing(resource.tree.children, element.children)

        if resource is not None and resource.behavior is element.behavior:
            if resource.props is not element.props:
                if resource.operations.update is not None:
                    resource.operations.update(element.props)
                resource.props = element.props
        else:
            children = None
            if resource is not None:
                logger.debug("Replacing %r at key %r with %s", resource, key, _name(element.behavior))
                del existing[key]
                _retire(resource)
                children = resource.tree.children
            resource = _construct(element, parent, children)
            existing[key] = resource

        apply(resource.tree.children, element.children, resource.tree)


def _remove_missing(existing: dict[Hashable, Resource], targets: Mapping[Hashable, Element]) -> None:
    for key in [k for k in existing if k not in targets]:
        destroy(existing.pop(key))


def _construct(element: Element, parent: TreeContext | None, children: dict | None) -> Resource:
    tree = TreeContext(parent, children)
    for child in tree.children.values():
        child.tree.parent = tree
    resource = Resource(element.behavior, element.props, tree)
    logger.debug("Creating %s", _name(element.behavior))
    resource.operations = construct_resource_operations(element.behavior, element.props, TreeOperations(tree))
    return resource


def _retire(resource: Resource) -> None:
    """Destroy resource itself but leave its children for a replacement to adopt."""
    for context in list(resource.tree.providing):
        unset(resource.tree, context)
    resource.operations.destroy()
    _forget(resource)


def destroy(resource: Resource) -> None:
    """Destroy resource and all its descendants, depth first."""
    children = resource.tree.children
    for key in list(children):
        destroy(children.pop(key))
    logger.debug("Destroying %r", resource)
    resource.operations.destroy()
    _forget(resource)


def _forget(resource: Resource) -> None:
    resource.tree.subscriptions.clear()
    resource.tree.providing.clear()
    resource.destroyed = True


def _name(behavior: Callable) -> str:
    return getattr(behavior, "__name__", repr(behavior))


class Handle:
    """Owns one resource forest and exposes apply() as the entry point.

    Usage:
        root = handle()
        root.apply([Counter({"start": 1})])
        root.apply([])  # tear everything down
    """

    __slots__ = ("resources", "_parent", "_applying")

    def __init__(self, parent: TreeContext | None = None) -> None:
        self.resources: dict[Hashable, Resource] = {}
        self._parent = weakref.ref(parent) if parent is not None else None
        self._applying = False

    def apply(self, elements: Any) -> None:
        if self._applying:
            raise ProtocolError("Handle.apply() called re-entrantly on the same handle")
        parent = self._parent() if self._parent is not None else None
        self._applying = True
        try:
            apply(self.resources, elements, parent)
        finally:
            self._applying = False

    def __repr__(self) -> str:
        return f"Handle({len(self.resources)} roots)"


def handle() -> Handle:
    """Create a fresh, empty root handle."""
    return Handle()
