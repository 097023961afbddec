"""Unit tests for the single-parent forest: build, toggle, search, ancestry."""

from dataclasses import dataclass

from app.domain.hierarchy import (
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


@dataclass(frozen=True)
class Unit:
    id: str
    name: str
    parent_id: str | None = None
    short_code: str | None = None
    description: str | None = None


def _units() -> list[Unit]:
    return [
        Unit("dg", "Direction Générale", short_code="DG"),
        Unit("rh", "Ressources Humaines", parent_id="dg", short_code="RH"),
        Unit("si", "Systèmes d'Information", parent_id="dg", short_code="SI"),
        Unit("infra", "Infrastructure", parent_id="si", description="Réseaux et serveurs"),
        Unit("fin", "Finance"),
    ]


class TestBuildTree:
    def test_roots_and_children_in_input_order(self) -> None:
        forest = build_tree(_units())
        assert [n.id for n in forest] == ["dg", "fin"]
        dg = forest[0]
        assert [c.id for c in dg.children] == ["rh", "si"]
        assert [c.id for c in dg.children[1].children] == ["infra"]

    def test_roots_start_expanded_others_collapsed(self) -> None:
        forest = build_tree(_units())
        assert all(n.expanded for n in forest)
        assert not any(n.expanded for n in flatten_tree(forest) if n.parent_id)

    def test_flatten_recovers_every_parent_link(self) -> None:
        units = _units()
        forest = build_tree(units)
        assert {(n.id, n.parent_id) for n in flatten_tree(forest)} == {
            (u.id, u.parent_id) for u in units
        }
        assert count_nodes(forest) == len(units)

    def test_missing_parent_becomes_root(self) -> None:
        forest = build_tree([Unit("a", "A", parent_id="ghost"), Unit("b", "B", parent_id="a")])
        assert [n.id for n in forest] == ["a"]
        assert forest[0].parent_id == "ghost"
        assert forest[0].children[0].id == "b"

    def test_empty_input(self) -> None:
        assert build_tree([]) == ()

    def test_cycle_does_not_recurse(self) -> None:
        forest = build_tree(
            [Unit("a", "A", parent_id="b"), Unit("b", "B", parent_id="a"), Unit("c", "C")]
        )
        assert [n.id for n in forest] == ["c"]

    def test_duplicate_ids_keep_first(self) -> None:
        forest = build_tree([Unit("a", "First"), Unit("a", "Second")])
        assert len(forest) == 1
        assert forest[0].item.name == "First"

    def test_dict_records_with_custom_accessors(self) -> None:
        forest = build_tree(
            [{"key": "x", "up": None}, {"key": "y", "up": "x"}],
            id_of=lambda r: r["key"],
            parent_of=lambda r: r["up"],
        )
        assert forest[0].children[0].id == "y"


class TestNavigation:
    def test_toggle_flips_only_target(self) -> None:
        forest = build_tree(_units())
        toggled = toggle_node(forest, "si")
        assert find_node(toggled, "si").expanded is True
        assert find_node(toggled, "rh").expanded is False
        assert find_node(forest, "si").expanded is False

    def test_toggle_twice_is_identity(self) -> None:
        forest = build_tree(_units())
        assert toggle_node(toggle_node(forest, "infra"), "infra") == forest

    def test_toggle_unknown_id_is_noop(self) -> None:
        forest = build_tree(_units())
        assert toggle_node(forest, "nope") == forest

    def test_apply_toggles_replays_in_order(self) -> None:
        forest = build_tree(_units())
        result = apply_toggles(forest, ["si", "dg", "si"])
        assert find_node(result, "dg").expanded is False
        assert find_node(result, "si").expanded is False

    def test_expand_and_collapse_all(self) -> None:
        forest = build_tree(_units())
        assert all(n.expanded for n in flatten_tree(expand_all(forest)))
        assert not any(n.expanded for n in flatten_tree(collapse_all(forest)))


class TestFilterTree:
    def test_empty_query_returns_forest(self) -> None:
        forest = build_tree(_units())
        assert filter_tree(forest, "") is forest
        assert filter_tree(forest, None) is forest
        assert filter_tree(forest, "   ") is forest

    def test_keeps_path_to_match_and_expands_ancestors(self) -> None:
        forest = build_tree(_units())
        result = filter_tree(forest, "réseaux")
        assert [n.id for n in flatten_tree(result)] == ["dg", "si", "infra"]
        assert find_node(result, "dg").expanded is True
        assert find_node(result, "si").expanded is True

    def test_case_insensitive_on_short_code(self) -> None:
        result = filter_tree(build_tree(_units()), "rh")
        assert [n.id for n in flatten_tree(result)] == ["dg", "rh"]

    def test_matching_ancestor_keeps_only_matching_branches(self) -> None:
        result = filter_tree(build_tree(_units()), "direction")
        assert [n.id for n in flatten_tree(result)] == ["dg"]
        assert result[0].children == ()

    def test_no_match_yields_empty_forest(self) -> None:
        assert filter_tree(build_tree(_units()), "zzz") == ()

    def test_custom_fields(self) -> None:
        result = filter_tree(build_tree(_units()), "dg", fields=("name",))
        assert result == ()


class TestDeepChains:
    """A valid chain far deeper than the interpreter recursion limit."""

    DEPTH = 5000

    def _chain(self) -> list[Unit]:
        return [
            Unit(f"u{i}", f"Unit {i}", parent_id=f"u{i - 1}" if i else None)
            for i in range(self.DEPTH)
        ]

    def test_build_and_flatten(self) -> None:
        forest = build_tree(self._chain())
        assert [n.id for n in forest] == ["u0"]
        flat = list(flatten_tree(forest))
        assert len(flat) == self.DEPTH
        assert flat[-1].id == f"u{self.DEPTH - 1}"
        assert flat[-1].parent_id == f"u{self.DEPTH - 2}"

    def test_toggle_expand_collapse(self) -> None:
        forest = build_tree(self._chain())
        last = f"u{self.DEPTH - 1}"
        assert find_node(toggle_node(forest, last), last).expanded is True
        assert all(n.expanded for n in flatten_tree(expand_all(forest)))
        assert not any(n.expanded for n in flatten_tree(collapse_all(forest)))

    def test_filter_keeps_full_path_to_deepest_match(self) -> None:
        forest = build_tree(self._chain())
        result = filter_tree(forest, f"unit {self.DEPTH - 1}")
        assert count_nodes(result) == self.DEPTH
        assert find_node(result, "u0").expanded is True


class TestAncestry:
    def test_ancestor_chain_nearest_first(self) -> None:
        parent_of = {u.id: u.parent_id for u in _units()}
        assert ancestor_ids(parent_of, "infra") == ["si", "dg"]
        assert ancestor_ids(parent_of, "dg") == []

    def test_depth_of(self) -> None:
        parent_of = {u.id: u.parent_id for u in _units()}
        assert depth_of(parent_of, "dg") == 1
        assert depth_of(parent_of, "infra") == 3

    def test_ancestor_chain_stops_on_cycle(self) -> None:
        assert ancestor_ids({"a": "b", "b": "a"}, "a") == ["b"]
