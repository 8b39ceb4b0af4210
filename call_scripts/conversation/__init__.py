from call_scripts.conversation.contact_search import ContactSearch, suggest_contacts
from call_scripts.conversation.graph import DialogGraph, DialogGraphError, Phase
from call_scripts.conversation.navigator import DialogNavigator, Opener
from call_scripts.conversation.renderer import TemplateRenderer
from call_scripts.conversation.resolver import EntityResolver, LiveDataSources, resolve_live_data

__all__ = [
    "ContactSearch",
    "suggest_contacts",
    "DialogGraph",
    "DialogGraphError",
    "Phase",
    "DialogNavigator",
    "Opener",
    "TemplateRenderer",
    "EntityResolver",
    "LiveDataSources",
    "resolve_live_data",
]
