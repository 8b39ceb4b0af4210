"""
Immutable dialog graph.

Built once at startup from the flow definition. Nothing here mutates after
construction; per-session position lives in ``NavigationState``.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from call_scripts.schemas.dialog_schema import OPENER_TARGET, DialogNode, Response

logger = logging.getLogger(__name__)


class DialogGraphError(Exception):
    """Raised when a flow definition cannot form a graph (startup only)."""


@dataclass(frozen=True)
class Phase:
    """A named group of stages with a jump-in entry point."""

    name: str
    stage_pattern: str
    entry_point: str


class DialogGraph:
    """Read-only mapping of node id -> ``DialogNode``."""

    def __init__(
        self,
        nodes: Iterable[DialogNode],
        start: str = "start",
        phases: Iterable[Phase] = (),
    ) -> None:
        table: dict[str, DialogNode] = {}
        for node in nodes:
            if node.id in table:
                raise DialogGraphError(f"Duplicate node id: '{node.id}'")
            table[node.id] = node
        if start not in table:
            raise DialogGraphError(f"Start node '{start}' is not defined")

        self._nodes: Mapping[str, DialogNode] = MappingProxyType(table)
        self.start = start
        self.phases: tuple[Phase, ...] = tuple(phases)

        dangling = self.dangling_edges()
        if dangling:
            logger.warning("Flow has %d response(s) with unknown targets", len(dangling))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[DialogNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, node_id: Optional[str]) -> Optional[DialogNode]:
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def node_or_start(self, node_id: Optional[str]) -> DialogNode:
        return self.get(node_id) or self._nodes[self.start]

    def dangling_edges(self) -> list[tuple[str, Response]]:
        """Responses whose target is not a node (opener targets resolve at runtime)."""
        return [
            (node.id, response)
            for node in self._nodes.values()
            for response in node.responses
            if response.next != OPENER_TARGET and response.next not in self._nodes
        ]

    def unreachable_nodes(self, extra_roots: Iterable[str] = ()) -> set[str]:
        """Nodes no path reaches from the start, phase entries, or ``extra_roots``."""
        roots = [self.start, *(phase.entry_point for phase in self.phases), *extra_roots]
        seen: set[str] = set()
        stack = [root for root in roots if root in self._nodes]
        while stack:
            node_id = stack.pop()
            if node_id in seen:
                continue
            seen.add(node_id)
            node = self._nodes[node_id]
            targets = [r.next for r in node.responses]
            if node.amount_prompt is not None:
                targets.append(node.amount_prompt.next)
            stack.extend(t for t in targets if t in self._nodes and t not in seen)
        return set(self._nodes) - seen

    def phase_for(self, node_id: str) -> str:
        """Phase name for a node; gatekeeper steps count as the opening."""
        node = self.get(node_id)
        if node is None:
            return ""
        if node_id.startswith("gatekeeper_"):
            return "Opening"
        for phase in self.phases:
            if phase.stage_pattern in node.stage:
                return phase.name
        if node.stage == "Opening" or "Gatekeeper" in node.stage:
            return "Opening"
        return ""

    def phase(self, name: str) -> Optional[Phase]:
        return next((p for p in self.phases if p.name == name), None)
