"""Tests for the dialog graph and the shipped call flow."""

import pytest

from call_scripts.conversation.graph import DialogGraph, DialogGraphError, Phase
from call_scripts.prompts.call_flow import FLOW_NODES, OPENERS, PHASES, sized_gatekeeper_line
from call_scripts.schemas.dialog_schema import OPENER_TARGET
from tests.conftest import make_graph, make_node


class TestGraphConstruction:
    def test_duplicate_ids_rejected(self):
        with pytest.raises(DialogGraphError, match="Duplicate"):
            DialogGraph([make_node("start"), make_node("start")])

    def test_missing_start_rejected(self):
        with pytest.raises(DialogGraphError, match="Start node"):
            DialogGraph([make_node("a")], start="start")

    def test_dangling_edge_reported_not_raised(self):
        graph = make_graph(make_node("a", "", ("Go", "nowhere")))
        assert [(node_id, r.next) for node_id, r in graph.dangling_edges()] == [("a", "nowhere")]

    def test_opener_target_is_not_dangling(self):
        graph = make_graph(make_node("a", "", ("Yes", OPENER_TARGET)))
        assert graph.dangling_edges() == []

    def test_lookup(self):
        graph = make_graph(make_node("a"))
        assert "a" in graph
        assert graph.get("missing") is None
        assert graph.node_or_start("missing").id == "start"
        assert len(graph) == 2


class TestPhaseLookup:
    def _graph(self):
        return DialogGraph(
            [
                make_node("start", stage="Ready"),
                make_node("intro", stage="Opening - Quick Intro"),
                make_node("gatekeeper_intro", stage="Front Desk"),
                make_node("ask", stage="Discovery - Situation"),
            ],
            phases=[Phase("Opening", "Opening", "intro"), Phase("Situation", "Discovery - Situation", "ask")],
        )

    def test_stage_pattern_match(self):
        graph = self._graph()
        assert graph.phase_for("intro") == "Opening"
        assert graph.phase_for("ask") == "Situation"

    def test_gatekeeper_nodes_count_as_opening(self):
        assert self._graph().phase_for("gatekeeper_intro") == "Opening"

    def test_no_phase(self):
        graph = self._graph()
        assert graph.phase_for("start") == ""
        assert graph.phase_for("missing") == ""

    def test_phase_by_name(self):
        graph = self._graph()
        assert graph.phase("Situation").entry_point == "ask"
        assert graph.phase("Nope") is None


class TestShippedFlow:
    def test_no_dangling_edges(self, call_flow):
        assert call_flow.dangling_edges() == []

    def test_every_node_reachable(self, call_flow):
        assert call_flow.unreachable_nodes(extra_roots=[o.state for o in OPENERS]) == set()

    def test_phase_entry_points_exist(self, call_flow):
        assert len(PHASES) == 11
        for phase in PHASES:
            assert phase.entry_point in call_flow
            assert call_flow.phase_for(phase.entry_point) == phase.name

    def test_opener_states_exist(self, call_flow):
        assert [o.key for o in OPENERS][0] == "pattern_interrupt_opening"
        for opener in OPENERS:
            assert opener.state in call_flow

    def test_start_dials_into_prep(self, call_flow):
        start = call_flow.get("start")
        assert [(r.label, r.next) for r in start.responses] == [("Dial", "pre_call_qualification")]

    def test_hook_follows_selected_opener(self, call_flow):
        assert any(r.next == OPENER_TARGET for r in call_flow.get("hook").responses)

    def test_situation_discovery_asks_for_amount(self, call_flow):
        prompt = call_flow.get("situation_discovery").amount_prompt
        assert prompt.next == "situation_monthly_spend"
        assert prompt.skip_label == "Don't know offhand"

    def test_every_node_has_a_way_out(self):
        assert all(not node.is_terminal for node in FLOW_NODES)


class TestSizedGatekeeperLine:
    @pytest.mark.parametrize(
        "employees,expected",
        [
            (0, "Yeah, your power bills."),
            (19, "Yeah, your power bills."),
            (20, "Yeah, your electricity bills."),
            (199, "Yeah, your electricity bills."),
            (200, "Yeah, your electric service."),
        ],
    )
    def test_wording_by_size(self, employees, expected):
        assert sized_gatekeeper_line(employees) == expected
