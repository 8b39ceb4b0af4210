from call_scripts.schemas.call_schema import CallContext, ResolvedContext
from call_scripts.schemas.crm_schema import (
    Account,
    Contact,
    canonicalize_account,
    canonicalize_contact,
)
from call_scripts.schemas.dialog_schema import (
    OPENER_TARGET,
    AmountPrompt,
    ComputedText,
    DialogNode,
    HistoryEntry,
    NavigationState,
    RenderedStep,
    Response,
    StaticText,
)

__all__ = [
    "Account",
    "Contact",
    "CallContext",
    "ResolvedContext",
    "canonicalize_account",
    "canonicalize_contact",
    "OPENER_TARGET",
    "AmountPrompt",
    "ComputedText",
    "DialogNode",
    "HistoryEntry",
    "NavigationState",
    "RenderedStep",
    "Response",
    "StaticText",
]
