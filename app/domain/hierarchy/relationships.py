"""Parent edge set of one category and the add / promote / delete protocol.

ParentEdgeSet is the in-memory projection of a single child's incoming
edges. Each plan_* method validates a mutation against the hierarchy
invariants and returns a plan describing the writes to perform; nothing is
written here. The plans are applied by the application service inside one
transaction, so a rejected mutation never leaves partial state.

Invariants:
    - no two edges share (parent, child);
    - a category is never its own ancestor;
    - at most one edge per child is primary, and an attached child has one.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from app.domain.exceptions import (
    CycleDetectedException,
    DuplicateRelationshipException,
    LastParentRelationshipException,
    RelationshipConflictException,
    SelfReferenceException,
)


class ParentEdge(Protocol):
    """Shape of a stored parent -> child relationship."""

    id: str
    parent_category_id: str
    child_category_id: str
    is_primary: bool
    created_at: datetime


class AttachmentState(str, Enum):
    """Whether a category currently has parent relationships."""

    UNATTACHED = "unattached"
    ATTACHED = "attached"


@dataclass(frozen=True)
class AddPlan:
    parent_id: str
    child_id: str
    is_primary: bool


@dataclass(frozen=True)
class PromotePlan:
    """Demote (if any) then promote, as one transaction."""

    child_id: str
    promote_id: str
    demote_id: str | None
    is_noop: bool = False


@dataclass(frozen=True)
class DeletePlan:
    child_id: str
    relationship_id: str
    parent_id: str
    was_primary: bool
    remaining_count: int
    promote_id: str | None = None

    @property
    def leaves_no_primary(self) -> bool:
        """True when the deleted edge was primary and nothing takes its place."""
        return self.was_primary and self.promote_id is None


class ParentEdgeSet:
    """Incoming edges of a single child category."""

    def __init__(self, child_id: str, edges: Iterable[ParentEdge]) -> None:
        self.child_id = child_id
        self._edges: list[ParentEdge] = []
        for edge in edges:
            if edge.child_category_id != child_id:
                raise ValueError(
                    f"Edge {edge.id} belongs to child {edge.child_category_id}, not {child_id}"
                )
            self._edges.append(edge)

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self):
        return iter(self._edges)

    @property
    def edges(self) -> Sequence[ParentEdge]:
        return tuple(self._edges)

    @property
    def state(self) -> AttachmentState:
        return AttachmentState.ATTACHED if self._edges else AttachmentState.UNATTACHED

    @property
    def parent_ids(self) -> frozenset[str]:
        return frozenset(e.parent_category_id for e in self._edges)

    @property
    def primary(self) -> ParentEdge | None:
        primaries = [e for e in self._edges if e.is_primary]
        return primaries[0] if primaries else None

    @property
    def primary_count(self) -> int:
        return sum(1 for e in self._edges if e.is_primary)

    def get(self, relationship_id: str) -> ParentEdge | None:
        for edge in self._edges:
            if edge.id == relationship_id:
                return edge
        return None

    def _require(self, relationship_id: str) -> ParentEdge:
        edge = self.get(relationship_id)
        if edge is None:
            raise RelationshipConflictException(
                f"Relationship {relationship_id} is no longer a parent of {self.child_id}; refetch and retry",
                child_id=self.child_id,
                relationship_id=relationship_id,
            )
        return edge

    def plan_add(self, parent_id: str, ancestors_of_parent: Iterable[str]) -> AddPlan:
        """Validate a new parent edge.

        Args:
            parent_id: Proposed parent category.
            ancestors_of_parent: Every category reachable from parent_id by
                following parent edges transitively.

        Raises:
            SelfReferenceException, DuplicateRelationshipException,
            CycleDetectedException.
        """
        if parent_id == self.child_id:
            raise SelfReferenceException(self.child_id)
        if parent_id in self.parent_ids:
            raise DuplicateRelationshipException(parent_id, self.child_id)
        if self.child_id in set(ancestors_of_parent):
            raise CycleDetectedException(parent_id, self.child_id)
        # First edge establishes the placement, so it is primary.
        return AddPlan(
            parent_id=parent_id,
            child_id=self.child_id,
            is_primary=self.state is AttachmentState.UNATTACHED,
        )

    def plan_promote(self, relationship_id: str) -> PromotePlan:
        target = self._require(relationship_id)
        if target.is_primary:
            return PromotePlan(
                child_id=self.child_id,
                promote_id=target.id,
                demote_id=None,
                is_noop=True,
            )
        current = self.primary
        return PromotePlan(
            child_id=self.child_id,
            promote_id=target.id,
            demote_id=current.id if current is not None else None,
        )

    def plan_delete(self, relationship_id: str, *, auto_promote: bool = False) -> DeletePlan:
        """Validate removal of one edge.

        The only edge of an attached child cannot be removed. When the primary
        edge is removed and auto_promote is False the child is left without a
        primary and the caller must promote one explicitly; with auto_promote
        the oldest remaining edge is chosen.
        """
        target = self._require(relationship_id)
        if len(self._edges) <= 1:
            raise LastParentRelationshipException(target.id, self.child_id)
        remaining = [e for e in self._edges if e.id != target.id]
        promote_id = None
        if target.is_primary and auto_promote:
            oldest = min(remaining, key=lambda e: (e.created_at, e.id))
            promote_id = oldest.id
        return DeletePlan(
            child_id=self.child_id,
            relationship_id=target.id,
            parent_id=target.parent_category_id,
            was_primary=target.is_primary,
            remaining_count=len(remaining),
            promote_id=promote_id,
        )
