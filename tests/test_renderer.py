"""Tests for template token building and substitution."""

import math
from datetime import datetime

import pytest

from call_scripts.conversation.renderer import (
    build_token_values,
    day_part,
    escape_html,
    format_currency,
    infer_monthly_spend,
    replace_legacy_placeholders,
    substitute_tokens,
)
from call_scripts.schemas.call_schema import ResolvedContext
from call_scripts.schemas.dialog_schema import ComputedText, DialogNode, HistoryEntry, NavigationState
from tests.conftest import FIXED_NOW, make_node


def _render(renderer, text, state=None):
    return renderer.render(make_node("n", text), state or NavigationState(current="n"))


class TestFormatCurrency:
    def test_whole_dollars(self):
        assert format_currency(12500) == "$12,500"

    def test_cents(self):
        assert format_currency(1234.5) == "$1,234.50"

    @pytest.mark.parametrize("value", [0, None, math.nan, -10])
    def test_unknown_amount_phrase(self, value):
        assert format_currency(value) == "an estimated amount"

    def test_sub_cent_is_unknown(self):
        assert format_currency(0.004) == "an estimated amount"

    def test_one_cent_shown(self):
        assert format_currency(0.01) == "$0.01"


class TestDayPart:
    @pytest.mark.parametrize(
        "hour,expected",
        [
            (4, "Hello"),
            (5, "Good morning"),
            (11, "Good morning"),
            (12, "Good afternoon"),
            (16, "Good afternoon"),
            (17, "Good evening"),
            (20, "Good evening"),
            (21, "Hello"),
            (0, "Hello"),
        ],
    )
    def test_hour_buckets(self, hour, expected):
        assert day_part(datetime(2026, 3, 2, hour, 59)) == expected


class TestInferMonthlySpend:
    def _state(self, label, node="situation_discovery", entered=None):
        return NavigationState(
            current="situation_monthly_spend",
            history=[HistoryEntry(node, label)],
            monthly_spend=entered,
        )

    def test_entered_value_wins(self):
        assert infer_monthly_spend(self._state("$20K+", entered=5000)) == 5000

    def test_amount_parsed_from_label(self):
        assert infer_monthly_spend(self._state("Spending $5,000 monthly")) == 5000

    def test_thousands_shorthand_is_not_an_amount(self):
        assert infer_monthly_spend(self._state("Spending $1.5K monthly")) == 0

    def test_first_plain_amount_after_shorthand(self):
        assert infer_monthly_spend(self._state("Was $1.5K, now $1,600 monthly")) == 1600

    def test_amount_at_end_of_sentence(self):
        assert infer_monthly_spend(self._state("Spending $5,000.")) == 5000

    @pytest.mark.parametrize(
        "label,expected",
        [("$1K - $5K", 3000), ("$5K - $20K", 12500), ("$5K – $20K", 12500), ("$20K+", 30000)],
    )
    def test_range_midpoints(self, label, expected):
        assert infer_monthly_spend(self._state(label)) == expected

    def test_skip_label_is_unknown(self):
        assert infer_monthly_spend(self._state("Don't know offhand")) == 0

    def test_other_nodes_ignored(self):
        assert infer_monthly_spend(self._state("$20K+", node="hook")) == 0

    def test_no_history(self):
        assert infer_monthly_spend(NavigationState(current="start")) == 0


class TestTokenValues:
    def _values(self, monthly_spend=0.0, resolved=None):
        return build_token_values(resolved or ResolvedContext(), "Lewis", monthly_spend, FIXED_NOW)

    def test_savings_at_five_thousand(self):
        values = self._values(5000)
        assert values["monthly_spend"] == "$5,000"
        assert values["annual_spend"] == "$60,000"
        assert values["potential_savings"] == "$15,000"

    def test_savings_round_half_up(self):
        # 1.5 * 12 * 0.25 == 4.5
        assert self._values(1.5)["potential_savings"] == "$5"

    def test_unknown_spend(self):
        values = self._values(0)
        assert values["annual_spend"] == "an estimated amount"
        assert values["potential_savings"] == "an estimated amount"

    def test_empty_context_falls_back(self):
        values = self._values()
        assert values["contact.first_name"] == ""
        assert values["account.city"] == "Texas"
        assert values["day.part"] == "Good morning"
        assert values["agent.first_name"] == "Lewis"


class TestSubstitution:
    def test_case_and_whitespace_tolerant(self):
        assert substitute_tokens("Hi {{ Contact.First_Name }}!", {"contact.first_name": "Jane"}) == "Hi Jane!"

    def test_every_occurrence_replaced(self):
        assert substitute_tokens("{{a}} and {{a}}", {"a": "x"}) == "x and x"

    def test_unknown_token_left_alone(self):
        assert substitute_tokens("{{foo.bar}}", {"a": "x"}) == "{{foo.bar}}"

    def test_values_are_escaped(self):
        html = substitute_tokens("<b>{{account.name}}</b>", {"account.name": "Tom & Jerry's <Diner>"})
        assert html == "<b>Tom &amp; Jerry&#039;s &lt;Diner&gt;</b>"

    def test_backslashes_in_values_are_literal(self):
        assert substitute_tokens("{{a}}", {"a": r"C:\new"}) == r"C:\new"

    def test_escape_html_quotes(self):
        assert escape_html('"x"') == "&quot;x&quot;"


class TestLegacyPlaceholders:
    def test_badges_and_bare_markers(self):
        values = {"contact.first_name": "Jane", "agent.first_name": "Lewis", "account.name": "Acme"}
        html = replace_legacy_placeholders(
            '<span class="name-badge">(contact name)</span>, (your name) at (Company Name)', values
        )
        assert html == "Jane, Lewis at Acme"

    def test_unavailable_values_blank(self):
        assert replace_legacy_placeholders("Hi (contact name).", {}) == "Hi ."


class TestTemplateRenderer:
    def test_live_call_render(self, widget, renderer):
        widget.connect("+1 (972) 555-1234")
        html = _render(
            renderer,
            "{{day.part}}, {{contact.first_name}} at {{account.name}} in {{account.city}}. "
            "{{account.supplier}} ends {{account.contract_end}}. Call {{contact.phone}}.",
        )
        assert html == (
            "Good morning, Jane at Acme Industries in Dallas. "
            "Reliant ends 03/05/2026. Call (972) 555-1234."
        )

    def test_render_is_idempotent(self, widget, renderer):
        widget.connect("+1 (972) 555-1234")
        state = NavigationState(current="n", monthly_spend=5000)
        first = _render(renderer, "{{contact.full_name}} {{potential_savings}}", state)
        assert first == _render(renderer, "{{contact.full_name}} {{potential_savings}}", state)
        assert first == "Jane Doe $15,000"

    def test_legacy_markers_in_render(self, widget, renderer):
        widget.connect("555-0000", name="Sam Rivera", company="Rivera Bakery")
        assert _render(renderer, "Hi (contact name), this is (your name).") == "Hi Sam, this is Lewis."

    def test_computed_text_gets_live_data(self, widget, renderer):
        widget.connect("+1 (972) 555-1234")
        node = DialogNode(
            id="n",
            stage="Test",
            text=ComputedText(lambda resolved: f"{{{{contact.first_name}}}}: {resolved.account.employees}"),
        )
        assert renderer.render(node, NavigationState(current="n")) == "Jane: 140"

    def test_failing_computed_text_renders_empty(self, renderer):
        node = DialogNode(id="n", stage="Test", text=ComputedText(lambda resolved: 1 / 0))
        assert renderer.render(node, NavigationState(current="n")) == ""

    def test_gatekeeper_line_sized_by_employees(self, widget, renderer, call_flow):
        widget.connect("+1 214 555 0199")
        node = call_flow.get("gatekeeper_electricity_confusion")
        html = renderer.render(node, NavigationState(current=node.id))
        assert html == "Yeah, your electricity bills. Who handles those there?"
