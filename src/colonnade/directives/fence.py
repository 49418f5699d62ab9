"""Fence lengths for directives.

A container directive's fence must be longer than the fence of every
container directive nested inside it, or the inner closing fence would
close the outer directive. Nesting is counted through any wrapper (a block
quote between two containers still counts as nesting).
"""

from __future__ import annotations

from colonnade.nodes import ContainerDirective, LeafDirective, Node


def _container_depth(node: Node) -> int:
    """Deepest chain of container directives strictly below ``node``."""
    deepest = 0
    for child in getattr(node, "children", None) or ():
        depth = _container_depth(child) + (1 if isinstance(child, ContainerDirective) else 0)
        deepest = max(deepest, depth)
    return deepest


def fence_length(node: Node) -> int:
    """Number of colons that open (and close) ``node``.

    Containers get 3 plus their container nesting depth, leaf
    directives 2 and text directives 1.

    Example:
        >>> inner = ContainerDirective(name="b")
        >>> fence_length(ContainerDirective(name="a", children=(inner,)))
        4

    """
    if isinstance(node, ContainerDirective):
        return 3 + _container_depth(node)
    if isinstance(node, LeafDirective):
        return 2
    return 1


def fence(node: Node) -> str:
    """The colon sequence for ``node``."""
    return ":" * fence_length(node)


__all__ = ["fence", "fence_length"]
