"""Hierarchy engine: single-parent forests and the category parent-edge protocol."""

from app.domain.hierarchy.relationships import (
    AddPlan,
    AttachmentState,
    DeletePlan,
    ParentEdge,
    ParentEdgeSet,
    PromotePlan,
)
from app.domain.hierarchy.tree import (
    DEFAULT_SEARCH_FIELDS,
    Forest,
    TreeNode,
    ancestor_ids,
    apply_toggles,
    build_tree,
    collapse_all,
    count_nodes,
    depth_of,
    expand_all,
    filter_tree,
    find_node,
    flatten_tree,
    toggle_node,
)

__all__ = [
    "AddPlan",
    "AttachmentState",
    "DeletePlan",
    "ParentEdge",
    "ParentEdgeSet",
    "PromotePlan",
    "DEFAULT_SEARCH_FIELDS",
    "Forest",
    "TreeNode",
    "ancestor_ids",
    "apply_toggles",
    "build_tree",
    "collapse_all",
    "count_nodes",
    "depth_of",
    "expand_all",
    "filter_tree",
    "find_node",
    "flatten_tree",
    "toggle_node",
]
