"""Unit tests for the parent edge protocol (ParentEdgeSet plans)."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest

from app.domain.exceptions import (
    CycleDetectedException,
    DuplicateRelationshipException,
    LastParentRelationshipException,
    RelationshipConflictException,
    SelfReferenceException,
)
from app.domain.hierarchy import AttachmentState, ParentEdgeSet

_T0 = datetime(2024, 1, 1, tzinfo=UTC)
_seq = count()


@dataclass
class Edge:
    parent_category_id: str
    child_category_id: str
    is_primary: bool
    id: str = field(default_factory=lambda: f"rel-{next(_seq)}")
    created_at: datetime = field(default_factory=lambda: _T0 + timedelta(seconds=next(_seq)))


class EdgeStore:
    """Applies plans to an in-memory edge list, the way the repository would."""

    def __init__(self) -> None:
        self.edges: list[Edge] = []

    def edge_set(self, child: str) -> ParentEdgeSet:
        return ParentEdgeSet(child, [e for e in self.edges if e.child_category_id == child])

    def ancestors(self, node: str) -> set[str]:
        found: set[str] = set()
        frontier = [node]
        while frontier:
            current = frontier.pop()
            for e in self.edges:
                if e.child_category_id == current and e.parent_category_id not in found:
                    found.add(e.parent_category_id)
                    frontier.append(e.parent_category_id)
        return found

    def add(self, parent: str, child: str) -> Edge:
        plan = self.edge_set(child).plan_add(parent, self.ancestors(parent))
        edge = Edge(plan.parent_id, plan.child_id, plan.is_primary)
        self.edges.append(edge)
        return edge

    def promote(self, edge: Edge) -> None:
        plan = self.edge_set(edge.child_category_id).plan_promote(edge.id)
        for e in self.edges:
            if e.id == plan.demote_id:
                e.is_primary = False
            if e.id == plan.promote_id:
                e.is_primary = True

    def delete(self, edge: Edge, *, auto_promote: bool = False):
        plan = self.edge_set(edge.child_category_id).plan_delete(
            edge.id, auto_promote=auto_promote
        )
        self.edges = [e for e in self.edges if e.id != plan.relationship_id]
        for e in self.edges:
            if e.id == plan.promote_id:
                e.is_primary = True
        return plan

    def primaries(self, child: str) -> list[Edge]:
        return [e for e in self.edge_set(child) if e.is_primary]


def test_pare_feu_scenario() -> None:
    store = EdgeStore()
    assert store.edge_set("pare-feu").state is AttachmentState.UNATTACHED

    infra = store.add("infrastructure", "pare-feu")
    assert infra.is_primary is True
    assert store.edge_set("pare-feu").state is AttachmentState.ATTACHED

    secu = store.add("securite-reseau", "pare-feu")
    assert secu.is_primary is False
    assert store.primaries("pare-feu") == [infra]

    store.promote(secu)
    assert secu.is_primary is True
    assert infra.is_primary is False

    plan = store.delete(infra)
    assert plan.was_primary is False
    assert plan.remaining_count == 1
    assert store.primaries("pare-feu") == [secu]

    with pytest.raises(LastParentRelationshipException):
        store.delete(secu)
    assert len(store.edge_set("pare-feu")) == 1


def test_first_parent_is_primary_then_others_are_not() -> None:
    store = EdgeStore()
    first = store.add("a", "x")
    second = store.add("b", "x")
    third = store.add("c", "x")
    assert [first.is_primary, second.is_primary, third.is_primary] == [True, False, False]


def test_self_reference_rejected() -> None:
    with pytest.raises(SelfReferenceException) as exc_info:
        EdgeStore().add("x", "x")
    assert exc_info.value.error_code == "SELF_REFERENCE"


def test_duplicate_relationship_rejected() -> None:
    store = EdgeStore()
    store.add("a", "x")
    with pytest.raises(DuplicateRelationshipException):
        store.add("a", "x")
    assert len(store.edge_set("x")) == 1


def test_direct_cycle_rejected() -> None:
    store = EdgeStore()
    store.add("a", "b")
    with pytest.raises(CycleDetectedException):
        store.add("b", "a")


def test_transitive_cycle_rejected() -> None:
    store = EdgeStore()
    store.add("a", "b")
    store.add("b", "c")
    with pytest.raises(CycleDetectedException):
        store.add("c", "a")


def test_diamond_is_allowed() -> None:
    store = EdgeStore()
    store.add("root", "left")
    store.add("root", "right")
    store.add("left", "leaf")
    store.add("right", "leaf")
    assert len(store.edge_set("leaf")) == 2
    assert len(store.primaries("leaf")) == 1


def test_promote_primary_is_noop() -> None:
    store = EdgeStore()
    edge = store.add("a", "x")
    plan = store.edge_set("x").plan_promote(edge.id)
    assert plan.is_noop is True
    assert plan.demote_id is None


def test_promote_unknown_relationship_is_conflict() -> None:
    store = EdgeStore()
    store.add("a", "x")
    with pytest.raises(RelationshipConflictException) as exc_info:
        store.edge_set("x").plan_promote("stale-id")
    assert exc_info.value.error_code == "RELATIONSHIP_CONFLICT"


def test_delete_either_of_two_leaves_one() -> None:
    for pick in (0, 1):
        store = EdgeStore()
        edges = [store.add("a", "x"), store.add("b", "x")]
        store.delete(edges[pick])
        assert len(store.edge_set("x")) == 1


def test_delete_primary_without_auto_promote_leaves_no_primary() -> None:
    store = EdgeStore()
    primary = store.add("a", "x")
    store.add("b", "x")
    plan = store.delete(primary)
    assert plan.was_primary is True
    assert plan.leaves_no_primary is True
    assert store.primaries("x") == []


def test_delete_primary_with_auto_promote_picks_oldest() -> None:
    store = EdgeStore()
    primary = store.add("a", "x")
    older = store.add("b", "x")
    store.add("c", "x")
    plan = store.delete(primary, auto_promote=True)
    assert plan.promote_id == older.id
    assert plan.leaves_no_primary is False
    assert store.primaries("x") == [older]


def test_edge_of_another_child_rejected() -> None:
    with pytest.raises(ValueError):
        ParentEdgeSet("x", [Edge("a", "y", True)])
