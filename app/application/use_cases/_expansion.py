"""Bulk expand/collapse shared by the org unit and category tree views."""

from app.domain.exceptions import ValidationException
from app.domain.hierarchy import Forest, collapse_all, expand_all


def expansion_from_flags(expand_all_nodes: bool, collapse_all_nodes: bool) -> bool | None:
    """Map the two query flags to get_tree's expand argument (None keeps the default)."""
    if expand_all_nodes and collapse_all_nodes:
        raise ValidationException(
            "expand_all and collapse_all cannot be combined", field="expand_all"
        )
    if expand_all_nodes:
        return True
    if collapse_all_nodes:
        return False
    return None


def apply_expansion(forest: Forest, expand: bool | None) -> Forest:
    if expand is None:
        return forest
    return expand_all(forest) if expand else collapse_all(forest)
