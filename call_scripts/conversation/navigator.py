"""
Dialog navigator: the operator's position in the call script.

States are node ids of an immutable ``DialogGraph``. Transitions are
driven by response clicks and never fail loudly: a click on a response
whose target does not exist is a silent no-op, so broken content can
never strand the operator mid-call.

Usage:
    nav = DialogNavigator(graph, renderer, openers=OPENERS)
    step = nav.render()
    nav.choose(step.responses[0])
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Callable, Optional

from call_scripts.conversation.graph import DialogGraph
from call_scripts.conversation.renderer import TemplateRenderer, format_currency, is_known_amount
from call_scripts.logging_context import get_session_logger
from call_scripts.schemas.dialog_schema import (
    OPENER_TARGET,
    HistoryEntry,
    NavigationState,
    RenderedStep,
    Response,
)

logger = get_session_logger(__name__)


@dataclass(frozen=True)
class Opener:
    """One of the interchangeable opening lines."""

    key: str
    label: str
    state: str
    description: str = ""


class DialogNavigator:
    """
    Finite state machine over the dialog graph.

    Holds only the small mutable ``NavigationState`` plus the operator's
    opener choice. Every successful transition is immediately followed by
    a render, which re-resolves live data from scratch.
    """

    def __init__(
        self,
        graph: DialogGraph,
        renderer: TemplateRenderer,
        openers: Iterable[Opener] = (),
        opener_key: Optional[str] = None,
        on_render: Optional[Callable[[RenderedStep], None]] = None,
        on_opener_change: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.graph = graph
        self.renderer = renderer
        self.state = NavigationState(current=graph.start)
        self.on_render = on_render
        self.on_opener_change = on_opener_change
        self._openers: dict[str, Opener] = {o.key: o for o in openers}
        self._opener: Optional[Opener] = self._openers.get(opener_key or "") or next(
            iter(self._openers.values()), None
        )
        self.last_step: Optional[RenderedStep] = None

    @property
    def current(self) -> str:
        return self.state.current

    @property
    def history(self) -> list[HistoryEntry]:
        return list(self.state.history)

    @property
    def monthly_spend(self) -> Optional[float]:
        return self.state.monthly_spend

    @property
    def opener(self) -> Optional[Opener]:
        return self._opener

    @property
    def openers(self) -> list[Opener]:
        """Current opener first, then the alternatives."""
        rest = [o for o in self._openers.values() if o is not self._opener]
        return ([self._opener] if self._opener else []) + rest

    @property
    def current_phase(self) -> str:
        return self.graph.phase_for(self.state.current)

    def resolve_target(self, next_id: str) -> str:
        """Map the opener placeholder to the selected opener's node."""
        if next_id == OPENER_TARGET:
            return self._opener.state if self._opener else ""
        return next_id

    def responses(self) -> tuple[Response, ...]:
        """Legal next transitions from the current node, opener targets resolved."""
        node = self.graph.node_or_start(self.state.current)
        return tuple(Response(r.label, self.resolve_target(r.next)) for r in node.responses)

    def go(self, next_id: Optional[str], label: str = "") -> bool:
        """Move to ``next_id`` if it names a node; otherwise do nothing."""
        target = self.resolve_target(next_id or "")
        if not target or target not in self.graph:
            logger.debug("Ignoring transition to unknown node %r", next_id)
            return False
        self.state.history.append(HistoryEntry(current=self.state.current, response_label=label or ""))
        logger.debug("Transition: %s -> %s (%s)", self.state.current, target, label)
        self.state.current = target
        self.render()
        return True

    def choose(self, response: Response) -> bool:
        """Handle a response-button click."""
        return self.go(response.next, response.label)

    def back(self) -> bool:
        """Return to the node recorded by the latest history entry."""
        if not self.state.history:
            return False
        previous = self.state.history.pop()
        self.state.current = previous.current
        self.render()
        return True

    def restart(self) -> None:
        """Back to the start with empty history; the opener choice is kept."""
        self.state = NavigationState(current=self.graph.start)
        logger.debug("Session restarted")
        self.render()

    def jump_to_phase(self, name: str) -> bool:
        phase = self.graph.phase(name)
        if phase is None:
            return False
        return self.go(phase.entry_point)

    def submit_monthly_spend(self, amount: Any) -> bool:
        """Record the figure entered at an amount prompt and continue."""
        prompt = self.graph.node_or_start(self.state.current).amount_prompt
        if prompt is None:
            return False
        try:
            value = float(amount)
        except (TypeError, ValueError):
            return False
        if not is_known_amount(value):
            return False

        previous = self.state.monthly_spend
        self.state.monthly_spend = value
        if not self.go(prompt.next, f"Spending {format_currency(value)} monthly"):
            self.state.monthly_spend = previous
            return False
        return True

    def skip_monthly_spend(self) -> bool:
        """Operator answered the amount prompt with "don't know"."""
        prompt = self.graph.node_or_start(self.state.current).amount_prompt
        if prompt is None:
            return False
        previous = self.state.monthly_spend
        self.state.monthly_spend = None
        if not self.go(prompt.next, prompt.skip_label):
            self.state.monthly_spend = previous
            return False
        return True

    def _in_opening(self) -> bool:
        node = self.graph.node_or_start(self.state.current)
        opener_states = {o.state for o in self._openers.values()}
        return node.id in opener_states or any(r.next == OPENER_TARGET for r in node.responses)

    def select_opener(self, key: str) -> bool:
        """Make ``key`` the current opener; jump to it when in the opening."""
        opener = self._openers.get(key)
        if opener is None or opener is self._opener:
            return False
        self._opener = opener
        logger.info("Opener switched to '%s'", opener.key)
        if self.on_opener_change is not None:
            try:
                self.on_opener_change(opener.key)
            except Exception:
                logger.warning("Could not persist opener selection", exc_info=True)
        if self._in_opening():
            self.go(opener.state, f"Switched to {opener.label} opener")
        else:
            self.render()
        return True

    def render(self) -> RenderedStep:
        """Materialize the current node for the display collaborators."""
        node = self.graph.node_or_start(self.state.current)
        step = RenderedStep(
            node_id=node.id,
            stage=node.stage,
            phase=self.graph.phase_for(node.id),
            html=self.renderer.render(node, self.state),
            responses=self.responses(),
            amount_prompt=node.amount_prompt,
            can_go_back=bool(self.state.history),
        )
        self.last_step = step
        if self.on_render is not None:
            try:
                self.on_render(step)
            except Exception:
                logger.warning("Display collaborator failed for node '%s'", node.id, exc_info=True)
        return step
