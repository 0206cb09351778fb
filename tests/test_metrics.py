"""Tests for scrumboard.metrics: bottlenecks, matrix, member summaries."""

from __future__ import annotations

import copy
import random

import pytest

from scrumboard.metrics import (
    get_all_member_summaries,
    get_bottleneck_nodes,
    get_collaboration_load,
    get_collaboration_matrix,
    get_member_summary,
    intensity_band,
    percent,
    radar_scores,
    round_half_up,
)
from tests._factory import make_item


def _random_week(seed: int) -> list[dict]:
    rng = random.Random(seed)
    names = [f"P{i}" for i in range(8)]
    domains = ["FE", "BE", "QA"]
    items = []
    for _ in range(20):
        owner = rng.choice(names)
        collaborators = []
        for _ in range(rng.randint(0, 3)):
            kinds = rng.sample(["pair", "pre", "post"], rng.randint(1, 2))
            collaborators.append({"name": rng.choice(names + ["Ghost"]), "relations": kinds})
        items.append(make_item(owner, rng.choice(domains), collaborators, module=rng.choice(["a", "b", None])))
    return items


class TestHelpers:
    def test_round_half_up(self) -> None:
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(66.666) == 67

    def test_percent_guards_zero(self) -> None:
        assert percent(3, 0) == 0
        assert percent(1, 3) == 33

    @pytest.mark.parametrize(
        "intensity,band",
        [(100, "critical"), (80, "critical"), (79, "warning"), (50, "warning"),
         (49, "caution"), (20, "caution"), (19, "normal"), (0, "normal")],
    )
    def test_intensity_band_edges(self, intensity: int, band: str) -> None:
        assert intensity_band(intensity) == band


class TestBottlenecks:
    def test_team_week(self, team_items: list[dict]) -> None:
        nodes = get_bottleneck_nodes(team_items)
        assert [n["name"] for n in nodes] == ["Bob", "Dave", "Alice", "Carol"]

        bob = nodes[0]
        assert bob["inbound_count"] == 3
        assert bob["outbound_count"] == 1
        assert bob["intensity"] == 100
        assert bob["band"] == "critical"
        assert bob["waiters"] == ["Alice", "Carol"]
        assert bob["blocking"] == ["Dave"]

        dave = nodes[1]
        assert dave["domain"] == "unknown"
        assert dave["intensity"] == 33
        assert dave["band"] == "caution"
        assert dave["waiters"] == ["Bob"]

        alice = nodes[2]
        assert alice["inbound_count"] == 0
        assert alice["outbound_count"] == 2
        assert alice["intensity"] == 0
        assert alice["blocking"] == ["Bob"]

    def test_direction_of_a_single_pre(self) -> None:
        """A declaring pre on B: B is waited on, A is waiting."""
        nodes = {n["name"]: n for n in get_bottleneck_nodes(
            [make_item("A", "FE", [{"name": "B", "relation": "pre"}])]
        )}
        assert nodes["B"]["inbound_count"] == 1
        assert nodes["B"]["intensity"] == 100
        assert nodes["A"]["outbound_count"] == 1
        assert nodes["A"]["intensity"] == 0

    def test_pair_and_post_do_not_create_bottlenecks(self) -> None:
        items = [
            make_item("A", "FE", [{"name": "B", "relation": "pair"}]),
            make_item("B", "BE", [{"name": "A", "relation": "post"}]),
        ]
        assert get_bottleneck_nodes(items) == []

    def test_self_pre_is_ignored(self) -> None:
        assert get_bottleneck_nodes([make_item("A", "FE", [{"name": "A", "relation": "pre"}])]) == []

    def test_empty_week(self) -> None:
        assert get_bottleneck_nodes([]) == []

    @pytest.mark.parametrize("seed", range(5))
    def test_intensity_bounds(self, seed: int) -> None:
        nodes = get_bottleneck_nodes(_random_week(seed))
        for n in nodes:
            assert 0 <= n["intensity"] <= 100
            assert n["inbound_count"] + n["outbound_count"] > 0
        if any(n["inbound_count"] for n in nodes):
            top = max(n["inbound_count"] for n in nodes)
            assert all(n["intensity"] == 100 for n in nodes if n["inbound_count"] == top)


class TestMatrix:
    def test_full_grid_in_first_appearance_order(self, team_items: list[dict]) -> None:
        cells = get_collaboration_matrix(team_items)
        assert [(c["source_domain"], c["target_domain"]) for c in cells] == [
            ("FE", "FE"), ("FE", "BE"), ("BE", "FE"), ("BE", "BE"),
        ]

    def test_counts(self, team_items: list[dict]) -> None:
        cells = {(c["source_domain"], c["target_domain"]): c for c in get_collaboration_matrix(team_items)}
        fe_be = cells[("FE", "BE")]
        assert (fe_be["pair_count"], fe_be["pre_count"], fe_be["total_count"]) == (1, 3, 4)
        assert cells[("FE", "FE")]["pair_count"] == 1
        assert cells[("BE", "FE")]["total_count"] == 0
        assert cells[("BE", "BE")]["total_count"] == 0

    @pytest.mark.parametrize("relation_filter,expected", [("pair", 1), ("pre", 3), ("both", 4)])
    def test_filter_changes_total_only(self, team_items, relation_filter, expected) -> None:
        cells = {
            (c["source_domain"], c["target_domain"]): c
            for c in get_collaboration_matrix(team_items, relation_filter)
        }
        assert cells[("FE", "BE")]["total_count"] == expected
        assert cells[("FE", "BE")]["pre_count"] == 3

    def test_post_never_counts_toward_total(self) -> None:
        items = [make_item("A", "FE", [{"name": "B", "relation": "post"}]), make_item("B", "BE")]
        cells = {(c["source_domain"], c["target_domain"]): c for c in get_collaboration_matrix(items)}
        assert cells[("FE", "BE")]["post_count"] == 1
        assert cells[("FE", "BE")]["total_count"] == 0

    def test_source_domain_follows_the_declaring_item(self) -> None:
        items = [
            make_item("Alice", "FE"),
            make_item("Alice", "BE", [{"name": "Bob", "relation": "pair"}]),
            make_item("Bob", "BE"),
        ]
        cells = {(c["source_domain"], c["target_domain"]): c for c in get_collaboration_matrix(items)}
        assert cells[("BE", "BE")]["pair_count"] == 1
        assert cells[("FE", "BE")]["total_count"] == 0

    def test_bad_filter_raises(self, team_items: list[dict]) -> None:
        with pytest.raises(ValueError, match="relation_filter"):
            get_collaboration_matrix(team_items, "post")

    def test_empty_week(self) -> None:
        assert get_collaboration_matrix([]) == []


class TestMemberSummary:
    def test_alice(self, team_items: list[dict]) -> None:
        s = get_member_summary(team_items, "Alice")
        assert (s["pair_count"], s["pre_count"], s["pre_inbound"], s["post_count"]) == (1, 2, 0, 0)
        assert s["total_collaborations"] == 3
        assert s["cross_domain_score"] == 67
        assert s["cross_module_score"] == 67
        assert [(c["name"], c["count"]) for c in s["collaborators"]] == [("Bob", 2), ("Carol", 1)]
        assert s["collaborators"][0]["relations"] == {"pair": 0, "pre": 2, "post": 0}

    def test_bob(self, team_items: list[dict]) -> None:
        s = get_member_summary(team_items, "Bob")
        assert (s["pair_count"], s["pre_count"], s["pre_inbound"]) == (1, 1, 3)
        assert s["total_collaborations"] == 5
        assert s["cross_domain_score"] == 80
        assert s["cross_module_score"] == 100

    def test_carol_counts_pair_on_either_side(self, team_items: list[dict]) -> None:
        s = get_member_summary(team_items, "Carol")
        assert s["pair_count"] == 2
        assert s["pre_count"] == 1
        assert s["cross_domain_score"] == 67

    def test_collaborator_without_items(self, team_items: list[dict]) -> None:
        s = get_member_summary(team_items, "Dave")
        assert s["owns_items"] is False
        assert s["domain"] == "unknown"
        assert s["pre_inbound"] == 1
        assert s["cross_domain_score"] == 0
        assert s["cross_module_score"] == 0

    def test_naming_yourself_is_not_a_collaborator(self) -> None:
        items = [make_item("A", "FE", [
            {"name": "A", "relation": "pair"},
            {"name": "A", "relation": "pair"},
            {"name": "B", "relation": "pre"},
        ]), make_item("B", "BE")]
        s = get_member_summary(items, "A")
        assert [c["name"] for c in s["collaborators"]] == ["B"]

    def test_absent_member_is_all_zero(self, team_items: list[dict]) -> None:
        s = get_member_summary(team_items, "Nobody")
        assert s["total_collaborations"] == 0
        assert s["collaborators"] == []

    def test_only_owners_are_summarised(self, team_items: list[dict]) -> None:
        assert list(get_all_member_summaries(team_items)) == ["Alice", "Bob", "Carol"]

    @pytest.mark.parametrize("seed", range(10))
    def test_agrees_with_bottlenecks(self, seed: int) -> None:
        items = _random_week(seed)
        summaries = get_all_member_summaries(items)
        for node in get_bottleneck_nodes(items):
            s = summaries.get(node["name"]) or get_member_summary(items, node["name"])
            assert s["pre_inbound"] == node["inbound_count"]
            assert s["pre_count"] == node["outbound_count"]

    def test_team_week_agrees_with_bottlenecks(self, team_items: list[dict]) -> None:
        for node in get_bottleneck_nodes(team_items):
            s = get_member_summary(team_items, node["name"])
            assert (s["pre_inbound"], s["pre_count"]) == (node["inbound_count"], node["outbound_count"])

    def test_repeatable_and_pure(self, team_items: list[dict]) -> None:
        before = copy.deepcopy(team_items)
        first = get_member_summary(team_items, "Bob")
        assert get_member_summary(team_items, "Bob") == first
        assert team_items == before


class TestRadarAndLoad:
    def test_radar_normalises_counts_against_owners(self, team_items: list[dict]) -> None:
        assert radar_scores(team_items, "Alice") == {
            "pair":         50,
            "pre_out":      100,
            "pre_in":       0,
            "cross_domain": 67,
            "cross_module": 67,
        }

    def test_radar_on_empty_week(self) -> None:
        assert set(radar_scores([], "A").values()) == {0}

    def test_load_order(self, team_items: list[dict]) -> None:
        rows = get_collaboration_load(team_items)
        assert [(r["name"], r["total_load"]) for r in rows] == [("Bob", 5), ("Alice", 3), ("Carol", 3)]
