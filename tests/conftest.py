"""Shared test fixtures and helpers."""

from datetime import datetime

import pytest

from call_scripts.conversation.contact_search import ContactSearch
from call_scripts.conversation.graph import DialogGraph
from call_scripts.conversation.navigator import DialogNavigator
from call_scripts.conversation.renderer import TemplateRenderer
from call_scripts.conversation.resolver import EntityResolver, LiveDataSources
from call_scripts.prompts.call_flow import OPENERS, build_call_flow
from call_scripts.schemas.dialog_schema import DialogNode, Response, StaticText
from call_scripts.tools.crm_cache import InMemoryCrmCache
from call_scripts.tools.telephony import PhoneWidget

FIXED_NOW = datetime(2026, 3, 2, 9, 30)


@pytest.fixture
def crm_cache():
    return InMemoryCrmCache.with_sample_data()


@pytest.fixture
def widget():
    return PhoneWidget()


@pytest.fixture
def contact_search():
    return ContactSearch()


@pytest.fixture
def resolver(crm_cache, widget, contact_search):
    return EntityResolver(
        LiveDataSources(
            people=crm_cache.get_people,
            accounts=crm_cache.get_accounts,
            call_context=widget.get_context,
            override_contact_id=contact_search.override_contact_id,
            agent_first_name=lambda: "Lewis",
        )
    )


@pytest.fixture
def renderer(resolver):
    return TemplateRenderer(resolver, clock=lambda: FIXED_NOW)


@pytest.fixture
def call_flow():
    return build_call_flow()


@pytest.fixture
def navigator(call_flow, renderer):
    return DialogNavigator(call_flow, renderer, openers=OPENERS)


def make_node(node_id: str, text: str = "", *responses: tuple[str, str], stage: str = "Test") -> DialogNode:
    """Helper to create a static-text DialogNode."""
    return DialogNode(
        id=node_id,
        stage=stage,
        text=StaticText(text or node_id),
        responses=tuple(Response(label, nxt) for label, nxt in responses),
    )


def make_graph(*nodes: DialogNode, start: str = "start") -> DialogGraph:
    """Helper to build a small graph, adding a bare start node if missing."""
    if not any(node.id == start for node in nodes):
        nodes = (make_node(start), *nodes)
    return DialogGraph(nodes, start=start)
