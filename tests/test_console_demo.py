"""End-to-end walks through the shipped script via the console demo."""

import pytest

from console_demo import ConsoleSession


class TestScenarios:
    @pytest.mark.parametrize(
        "scenario,final_node",
        [
            ("decision_maker", "meeting_scheduled"),
            ("gatekeeper", "situation_rate_check"),
            ("unknown_caller", "call_success"),
        ],
    )
    def test_scenario_reaches_end(self, scenario, final_node, capsys):
        session = ConsoleSession()
        session.run_scenario(scenario)
        assert session.navigator.current == final_node
        assert "Path:" in capsys.readouterr().out

    def test_decision_maker_sees_savings(self, capsys):
        session = ConsoleSession()
        session.run_scenario("decision_maker")
        out = capsys.readouterr().out
        assert "Jane" in out
        assert "$60,000" in out
        assert "$15,000" in out

    def test_gatekeeper_switches_opener(self):
        session = ConsoleSession()
        session.run_scenario("gatekeeper")
        assert session.navigator.opener.key == "opener_social_proof"
        visited = [entry.current for entry in session.navigator.history]
        assert "opener_social_proof" in visited

    def test_unknown_scenario(self, capsys):
        ConsoleSession().run_scenario("nope")
        assert "Unknown scenario" in capsys.readouterr().out


class TestCommands:
    def test_quit(self):
        assert ConsoleSession().handle("q") is False

    def test_numbered_response_and_back(self):
        session = ConsoleSession()
        session.handle("1")
        assert session.navigator.current == "pre_call_qualification"
        session.handle("b")
        assert session.navigator.current == "start"

    def test_phase_jump_and_amount(self):
        session = ConsoleSession()
        session.handle("p Situation")
        session.handle("$ 2,500")
        assert session.navigator.monthly_spend == 2500

    def test_pick_contact_sets_override(self, capsys):
        session = ConsoleSession()
        session.handle("find priya")
        assert "c-300" in capsys.readouterr().out
        session.handle("pick c-300")
        assert session.search.override_contact_id() == "c-300"
