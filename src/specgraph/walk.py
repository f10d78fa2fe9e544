"""Cycle-safe depth-first traversal of a document graph."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import fields, is_dataclass
from typing import Any

from specgraph.refs import RefOrValueLike, clear_resolved_external_ref

logger = logging.getLogger(__name__)

type Visit = Callable[[Any, int, str], bool | None]

_LEAVES = (str, bytes, bytearray, int, float, bool)


class GraphWalker:
    """Walks structs, sequences and mappings reachable from a root.

    ``visit(node, level, label)`` is called every time a non-primitive node
    is reached, once per incoming edge, with the level of that edge (the
    root is level 0). Each node's children are expanded only the first
    time the node is reached during one ``walk()``, so cyclic graphs
    terminate after visiting every distinct node once. A visit returning
    ``False`` keeps the walker out of that node on this arrival.

    Labels are field names and mapping keys, for diagnostics only.
    """

    def __init__(self, visit: Visit) -> None:
        self._visit = visit
        self._visited: set[int] = set()
        self.expanded = 0

    def walk(self, root: Any, label: str = "#") -> None:
        """Traverse from ``root`` with a fresh visited set."""
        self._visited = set()
        self.expanded = 0
        self._walk(root, 0, label)

    def _walk(self, node: Any, level: int, label: str) -> None:
        # Absent optionals and primitives are leaves
        if node is None or isinstance(node, _LEAVES):
            return

        if self._visit(node, level, label) is False:
            return

        key = id(node)
        if key in self._visited:
            return
        self._visited.add(key)
        self.expanded += 1

        logger.debug("%3d: %s'%s' (%s)", level, " " * level, label, type(node).__name__)

        if is_dataclass(node) and not isinstance(node, type):
            for f in fields(node):
                self._walk(getattr(node, f.name), level + 1, f.name)
        elif isinstance(node, Mapping):
            for k, v in node.items():
                self._walk(v, level + 1, str(k))
        elif isinstance(node, list | tuple | set | frozenset):
            for item in node:
                self._walk(item, level + 1, label)


def clear_resolved_external_refs(root: Any) -> int:
    """Reset every resolved external pointer under ``root`` to pointer-only.

    Run this before resolving a previously resolved document again, so the
    loader starts from pointers instead of stale values.

    Returns:
        Number of pointers reset

    """
    reset = 0

    def visit(node: Any, level: int, label: str) -> None:
        nonlocal reset
        if isinstance(node, RefOrValueLike) and clear_resolved_external_ref(node):
            logger.debug("Reset external ref %s at '%s'", node.get_ref(), label)
            reset += 1

    GraphWalker(visit).walk(root)
    logger.info("Reset %d resolved external refs", reset)
    return reset
