"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_schema_package_reexports(self):
        from call_scripts.schemas import OPENER_TARGET, Contact, DialogNode, ResolvedContext

        assert OPENER_TARGET == "@opener"
        assert Contact().first_name == ""
        assert ResolvedContext().account.employees == 0
        assert DialogNode is not None


class TestConversationImports:
    def test_conversation_package_reexports(self):
        from call_scripts.conversation import (
            ContactSearch,
            DialogGraph,
            DialogNavigator,
            EntityResolver,
            TemplateRenderer,
        )

        assert all([ContactSearch, DialogGraph, DialogNavigator, EntityResolver, TemplateRenderer])


class TestEntryPoints:
    def test_console_demo_imports(self):
        from console_demo import ConsoleSession, html_to_text

        assert html_to_text("a<br>b &amp; <em>c</em>") == "a\nb & c"
        assert "gatekeeper" in ConsoleSession.SCENARIOS

    def test_flow_check_passes(self):
        from main import _run_flow_check

        assert _run_flow_check() == 0
