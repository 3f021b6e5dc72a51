"""Tree bookkeeping and context propagation.

Every resource owns one TreeContext. Parents are held through weakrefs so
that parent and child collections never keep each other alive.

Shadowing: a resource that provides a context blocks pushes of that
context into its subtree. It still hears about ancestor changes on its own
subscription, because a provider resolves its own reads from its ancestors.
"""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any, Callable, Hashable, Iterator

from fuel.errors import ProtocolError

if TYPE_CHECKING:
    from fuel.context import Context
    from fuel.reconciler import Handle, Resource


class TreeContext:
    """Per-resource links: parent, children, provided and subscribed contexts."""

    __slots__ = ("_parent", "children", "providing", "subscriptions", "nested", "__weakref__")

    def __init__(self, parent: TreeContext | None = None, children: dict | None = None) -> None:
        self._parent = weakref.ref(parent) if parent is not None else None
        self.children: dict[Hashable, Resource] = children if children is not None else {}
        self.providing: dict[Context, Any] = {}
        self.subscriptions: dict[Context, Callable[[Any], None]] = {}
        # Handles rooted under this resource (hook output), reached by propagation.
        self.nested: list[Handle] = []

    @property
    def parent(self) -> TreeContext | None:
        return self._parent() if self._parent is not None else None

    @parent.setter
    def parent(self, value: TreeContext | None) -> None:
        self._parent = weakref.ref(value) if value is not None else None

    def child_resources(self) -> Iterator[Resource]:
        """All resources directly below this one, reconciled children first."""
        yield from list(self.children.values())
        for handle in list(self.nested):
            yield from list(handle.resources.values())


def resolve(tree: TreeContext, context: Context) -> Any:
    """Nearest ancestor's provided value, else the context default."""
    node = tree.parent
    while node is not None:
        if context in node.providing:
            return node.providing[context]
        node = node.parent
    return context.default


def push(tree: TreeContext, context: Context, value: Any) -> None:
    """Deliver value to every subscriber below tree, stopping at shadow boundaries."""
    for child in tree.child_resources():
        callback = child.tree.subscriptions.get(context)
        if callback is not None:
            callback(value)
        if context not in child.tree.providing:
            push(child.tree, context, value)


def unset(tree: TreeContext, context: Context) -> None:
    """Stop providing context and restore descendants to the fallback value."""
    if context not in tree.providing:
        return
    del tree.providing[context]
    push(tree, context, resolve(tree, context))


class TreeOperations:
    """Capability object handed to a behavior, closed over its TreeContext."""

    __slots__ = ("_tree",)

    def __init__(self, tree: TreeContext) -> None:
        self._tree = tree

    def get_context(self, context: Context) -> Any:
        return resolve(self._tree, context)

    def subscribe_context(self, context: Context, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Deliver the current value now (if not None) and every propagated change after.

        Returns a function that removes the subscription.
        """
        subscriptions = self._tree.subscriptions
        if context in subscriptions:
            raise ProtocolError(f"Already subscribed to {context!r}; unsubscribe first")

        value = resolve(self._tree, context)
        if value is not None:
            callback(value)
        subscriptions[context] = callback

        def unsubscribe() -> None:
            if subscriptions.get(context) is callback:
                del subscriptions[context]

        return unsubscribe

    def set_context(self, context: Context, value: Any) -> None:
        """Provide value to all descendants, shadowing any ancestor provider."""
        self._tree.providing[context] = value
        push(self._tree, context, value)

    def unset_context(self, context: Context) -> None:
        unset(self._tree, context)

    def handle(self) -> Handle:
        """A Handle whose root resources live beneath this resource.

        Context provided above this resource reaches them, and pushes
        propagate into them as if they were ordinary children.
        """
        from fuel.reconciler import Handle

        nested = Handle(parent=self._tree)
        self._tree.nested.append(nested)
        return nested
