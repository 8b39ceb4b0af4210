"""
Call-script engine entry point.

Usage:
    Console mode: python main.py console [--scenario gatekeeper]
    Flow check:   python main.py check
"""

import logging
import sys

from call_scripts.config import settings

logger = logging.getLogger(__name__)


def _run_flow_check() -> int:
    """Build the shipped flow and report broken edges or orphaned nodes."""
    from call_scripts.prompts.call_flow import OPENERS, build_call_flow

    graph = build_call_flow(settings.script.start_node)
    dangling = graph.dangling_edges()
    unreachable = graph.unreachable_nodes(extra_roots=[o.state for o in OPENERS])
    for node_id, response in dangling:
        logger.error("Node '%s': response '%s' -> unknown '%s'", node_id, response.label, response.next)
    for node_id in sorted(unreachable):
        logger.warning("Node '%s' is unreachable", node_id)
    logger.info("Flow has %d nodes across %d phases", len(graph), len(graph.phases))
    return 1 if dangling else 0


def _run_console_mode() -> None:
    """Start the offline console demo."""
    from console_demo import main as console_main

    sys.argv = [sys.argv[0], *sys.argv[2:]]
    console_main()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "check":
        sys.exit(_run_flow_check())
    _run_console_mode()
