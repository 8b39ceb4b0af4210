"""Dialog graph and navigation state types."""

from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from call_scripts.schemas.call_schema import ResolvedContext

# Response target that follows whichever opener the operator has selected.
OPENER_TARGET = "@opener"


@dataclass(frozen=True)
class Response:
    """A labelled edge to another node."""

    label: str
    next: str


@dataclass(frozen=True)
class StaticText:
    """Template string stored verbatim in the flow."""

    text: str


@dataclass(frozen=True)
class ComputedText:
    """Template computed from live-resolved data right before substitution."""

    compute: Callable[[ResolvedContext], str]


NodeText = Union[StaticText, ComputedText]


@dataclass(frozen=True)
class AmountPrompt:
    """Marks a node that asks for the monthly spend figure.

    ``next`` is taken both when an amount is entered and when the operator
    answers with ``skip_label``.
    """

    next: str
    skip_label: str = "Don't know offhand"


@dataclass(frozen=True)
class DialogNode:
    """A single script step."""

    id: str
    stage: str
    text: NodeText
    responses: tuple[Response, ...] = ()
    amount_prompt: Optional[AmountPrompt] = None

    @property
    def is_terminal(self) -> bool:
        return not self.responses and self.amount_prompt is None


@dataclass(frozen=True)
class HistoryEntry:
    """Where the operator came from and what they clicked."""

    current: str
    response_label: str = ""


@dataclass
class NavigationState:
    """Mutable per-session position in the script."""

    current: str
    history: list[HistoryEntry] = field(default_factory=list)
    monthly_spend: Optional[float] = None


@dataclass(frozen=True)
class RenderedStep:
    """What the display and button collaborators need for one node."""

    node_id: str
    stage: str
    phase: str
    html: str
    responses: tuple[Response, ...]
    amount_prompt: Optional[AmountPrompt]
    can_go_back: bool
