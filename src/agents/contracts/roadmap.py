"""Bounded-depth helpers for roadmap trees.

All walks are iterative with an explicit depth counter, so a model response
that nests deeper than expected never drives Python recursion. Helpers accept
either raw JSON dicts or `RoadmapNode` instances.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Set, Tuple


def _children(node: Any) -> List[Any]:
    if isinstance(node, dict):
        children = node.get("children")
    else:
        children = getattr(node, "children", None)
    return children if isinstance(children, list) else []


def _node_id(node: Any) -> Any:
    if isinstance(node, dict):
        return node.get("id")
    return getattr(node, "id", None)


def iter_nodes(root: Any) -> Iterator[Tuple[Any, int]]:
    """Yield `(node, depth)` pairs in pre-order; the root has depth 1."""
    stack: List[Tuple[Any, int]] = [(root, 1)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        for child in reversed(_children(node)):
            stack.append((child, depth + 1))


def roadmap_depth(root: Any) -> int:
    return max((depth for _, depth in iter_nodes(root)), default=0)


def duplicate_node_ids(root: Any) -> Set[str]:
    seen: Set[str] = set()
    duplicates: Set[str] = set()
    for node, _ in iter_nodes(root):
        node_id = _node_id(node)
        if node_id is None:
            continue
        if node_id in seen:
            duplicates.add(str(node_id))
        seen.add(node_id)
    return duplicates


def prune_roadmap_payload(raw: Any, max_depth: int) -> Any:
    """Return a copy of a raw roadmap dict with levels below `max_depth` cut.

    Truncation is deterministic: every node at `max_depth` becomes a leaf and
    everything beneath it is dropped. Non-dict input and trees already
    within the bound are returned untouched.
    """
    if max_depth < 1:
        raise ValueError("max_depth must be >= 1")
    if not isinstance(raw, dict) or roadmap_depth(raw) <= max_depth:
        return raw

    root: Dict[str, Any] = dict(raw)
    stack: List[Tuple[Dict[str, Any], int]] = [(root, 1)]
    while stack:
        node, depth = stack.pop()
        children = node.get("children")
        if not isinstance(children, list):
            continue
        if depth >= max_depth:
            node["children"] = []
            continue
        copied = [dict(child) if isinstance(child, dict) else child for child in children]
        node["children"] = copied
        stack.extend((child, depth + 1) for child in copied if isinstance(child, dict))
    return root


__all__ = ["duplicate_node_ids", "iter_nodes", "prune_roadmap_payload", "roadmap_depth"]
