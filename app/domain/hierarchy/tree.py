"""Single-parent forest: build, navigate (expand/collapse), search, flatten.

All functions are pure. A forest is a tuple of root TreeNode objects; every
transformation returns a new forest and never mutates its input, so a forest
can be shared between concurrent requests without locking.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, replace
from operator import attrgetter
from typing import Any

DEFAULT_SEARCH_FIELDS: tuple[str, ...] = ("name", "short_code", "description")


@dataclass(frozen=True)
class TreeNode:
    """One node of a forest.

    Attributes:
        id: Node identifier (unique within the forest).
        parent_id: Parent reference as given in the input record. Kept even when
            the parent was missing and the node was promoted to a root.
        item: The original record (DTO, dict, ...), carried through untouched.
        children: Child nodes in input order.
        expanded: Navigation state, co-located with the node.
    """

    id: str
    parent_id: str | None
    item: Any
    children: tuple[TreeNode, ...] = ()
    expanded: bool = False

    @property
    def has_children(self) -> bool:
        return bool(self.children)


Forest = tuple[TreeNode, ...]


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def build_tree(
    records: Iterable[Any],
    *,
    id_of: Callable[[Any], str] = attrgetter("id"),
    parent_of: Callable[[Any], str | None] = attrgetter("parent_id"),
) -> Forest:
    """Build a forest from a flat list of records carrying an optional parent reference.

    A record whose parent is absent, or references an id not present in the
    input, becomes a root. Sibling order follows input order. Root nodes start
    expanded; every other node starts collapsed. Duplicate ids keep the first
    record.

    Attachment is a single pass over parent references and nodes are then
    materialized from the roots down with an explicit stack, so neither deep
    chains nor malformed cycles can exhaust the call stack. Nodes caught in a
    cycle have no path to a root and are left out of the forest.
    """
    records_by_id: dict[str, Any] = {}
    order: list[str] = []
    for record in records:
        node_id = id_of(record)
        if node_id in records_by_id:
            continue
        records_by_id[node_id] = record
        order.append(node_id)

    root_ids: list[str] = []
    child_ids: dict[str, list[str]] = {node_id: [] for node_id in order}
    for node_id in order:
        parent_id = parent_of(records_by_id[node_id])
        if parent_id is None or parent_id not in records_by_id or parent_id == node_id:
            root_ids.append(node_id)
        else:
            child_ids[parent_id].append(node_id)

    root_set = set(root_ids)
    preorder: list[str] = []
    pending = list(reversed(root_ids))
    while pending:
        node_id = pending.pop()
        preorder.append(node_id)
        pending.extend(reversed(child_ids[node_id]))

    # Reverse preorder visits every descendant before its ancestor.
    built: dict[str, TreeNode] = {}
    for node_id in reversed(preorder):
        record = records_by_id[node_id]
        built[node_id] = TreeNode(
            id=node_id,
            parent_id=parent_of(record),
            item=record,
            children=tuple(built[cid] for cid in child_ids[node_id]),
            expanded=node_id in root_set,
        )
    return tuple(built[rid] for rid in root_ids)


def flatten_tree(forest: Sequence[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node depth-first, parents before children."""
    pending = list(reversed(forest))
    while pending:
        node = pending.pop()
        yield node
        pending.extend(reversed(node.children))


def _rebuild(
    forest: Sequence[TreeNode],
    make: Callable[[TreeNode, Forest], TreeNode | None],
) -> Forest:
    """Rebuild a forest bottom-up with an explicit stack.

    make receives each node with its already rebuilt children and returns the
    replacement node, or None to drop it. Depth is bounded by memory only.
    """
    top: list[TreeNode] = []
    stack: list[tuple[TreeNode, Iterator[TreeNode], list[TreeNode]]] = []
    siblings: Iterator[TreeNode] = iter(forest)
    rebuilt = top
    while True:
        node = next(siblings, None)
        if node is not None:
            stack.append((node, siblings, rebuilt))
            siblings, rebuilt = iter(node.children), []
            continue
        if not stack:
            return tuple(top)
        parent, siblings, parent_rebuilt = stack.pop()
        made = make(parent, tuple(rebuilt))
        if made is not None:
            parent_rebuilt.append(made)
        rebuilt = parent_rebuilt


def find_node(forest: Sequence[TreeNode], node_id: str) -> TreeNode | None:
    """Return the node with node_id, or None."""
    for node in flatten_tree(forest):
        if node.id == node_id:
            return node
    return None


def count_nodes(forest: Sequence[TreeNode]) -> int:
    return sum(1 for _ in flatten_tree(forest))


def toggle_node(forest: Sequence[TreeNode], node_id: str) -> Forest:
    """Return a new forest with the expanded flag of node_id flipped.

    Every subtree is visited; an unknown node_id yields an equal forest.
    """
    return _rebuild(
        forest,
        lambda node, children: replace(
            node,
            expanded=not node.expanded if node.id == node_id else node.expanded,
            children=children,
        ),
    )


def apply_toggles(forest: Sequence[TreeNode], node_ids: Iterable[str]) -> Forest:
    """Replay a sequence of toggles in order (client navigation history)."""
    result = tuple(forest)
    for node_id in node_ids:
        result = toggle_node(result, node_id)
    return result


def _set_expanded(forest: Sequence[TreeNode], expanded: bool) -> Forest:
    return _rebuild(
        forest, lambda node, children: replace(node, expanded=expanded, children=children)
    )


def expand_all(forest: Sequence[TreeNode]) -> Forest:
    return _set_expanded(forest, True)


def collapse_all(forest: Sequence[TreeNode]) -> Forest:
    return _set_expanded(forest, False)


def _matches(node: TreeNode, needle: str, fields: Sequence[str]) -> bool:
    for name in fields:
        value = _field(node.item, name)
        if value and needle in str(value).lower():
            return True
    return False


def filter_tree(
    forest: Sequence[TreeNode],
    query: str | None,
    *,
    fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
) -> Forest:
    """Keep only root-to-match paths for a case-insensitive substring query.

    A node survives if it matches directly or any descendant matches. A
    surviving node with surviving children is forced expanded so the match is
    visible; a matching leaf keeps its own expanded flag. An empty query
    returns the input forest unchanged.
    """
    if not query or not query.strip():
        return forest if isinstance(forest, tuple) else tuple(forest)
    needle = query.strip().lower()

    def keep(node: TreeNode, children: Forest) -> TreeNode | None:
        if not children and not _matches(node, needle, fields):
            return None
        return replace(node, children=children, expanded=True if children else node.expanded)

    return _rebuild(forest, keep)


def ancestor_ids(parent_of: Mapping[str, str | None], node_id: str) -> list[str]:
    """Return the ancestor chain of node_id, nearest first.

    Stops at a root, before a dangling reference (an id missing from
    parent_of), or when a malformed cycle revisits a node.
    """
    chain: list[str] = []
    seen = {node_id}
    current = parent_of.get(node_id)
    while current is not None and current in parent_of and current not in seen:
        chain.append(current)
        seen.add(current)
        current = parent_of.get(current)
    return chain


def depth_of(parent_of: Mapping[str, str | None], node_id: str) -> int:
    """1 for roots, parent depth + 1 otherwise (hierarchy_level)."""
    return len(ancestor_ids(parent_of, node_id)) + 1
