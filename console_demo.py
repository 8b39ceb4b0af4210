"""
Offline console demo: walks the call script in the terminal.

Uses the real resolver, renderer and navigator against the sample CRM
cache and a mock phone widget. No CRM, no softphone, no network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario gatekeeper
    python console_demo.py --scenario unknown_caller
"""

import argparse
import html
import re
import uuid
from typing import Optional

from call_scripts.config import settings
from call_scripts.conversation.contact_search import ContactSearch, suggest_contacts
from call_scripts.conversation.navigator import DialogNavigator
from call_scripts.conversation.renderer import TemplateRenderer
from call_scripts.conversation.resolver import EntityResolver, LiveDataSources
from call_scripts.logging_context import set_session_id
from call_scripts.prompts.call_flow import OPENERS, build_call_flow
from call_scripts.schemas.dialog_schema import RenderedStep
from call_scripts.tools.crm_cache import InMemoryCrmCache
from call_scripts.tools.telephony import PhoneWidget

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_AMOUNT_RE = re.compile(r"^\$\s*([\d,]+(?:\.\d+)?)$")

HELP = (
    "Commands: <number> pick a response | b back | r restart | $ <amount> enter "
    "monthly spend | s skip amount | p <phase> jump | o <opener key> switch opener | "
    "find <text> search contacts | pick <id> use contact | q quit"
)


def html_to_text(markup: str) -> str:
    """Terminal-friendly text for rendered node HTML."""
    return html.unescape(_TAG_RE.sub("", _BREAK_RE.sub("\n", markup))).strip()


class ConsoleSession:
    """One operator session over the sample data."""

    # Pre-scripted scenarios for --scenario flag: widget setup, then inputs
    SCENARIOS: dict[str, dict] = {
        "decision_maker": {
            "call": {"number": "+1 972-555-1234", "name": "Jane Doe", "company": "Acme"},
            "steps": ["Dial", "Ready - I have answers", "Call connected", "Yes, speaking", "Yeah, go ahead",
                      "Yeah, that's me", "$ 5000", "Yes, that matters", "Know the rate",
                      "Costs are too high", "That would be significant",
                      "All of the above", "Makes sense, what's next?",
                      "Yes, that's right", "Booked a time"],
        },
        "gatekeeper": {
            "call": {"number": "(214) 555-0199", "name": "", "company": "BrightPath Logistics"},
            "steps": ["Dial", "Ready - I have answers", "Call connected", "Gatekeeper", "Power bills?",
                      "That's [name]", "o opener_social_proof", "They transfer you",
                      "Connected to decision maker", "Tell me more", "That sounds fair",
                      "$5K - $20K", "Yes, that matters"],
        },
        "unknown_caller": {
            "call": {"number": "555-0000", "name": "Sam Rivera", "company": "Rivera Bakery"},
            "steps": ["Dial", "Ready - I have answers", "Call connected", "o opener_transparent", "Not interested",
                      "Just not a priority", "Not interested", "End Call"],
        },
    }

    MAX_INPUT_LENGTH = 200

    def __init__(self, opener_key: Optional[str] = None) -> None:
        self.cache = InMemoryCrmCache.with_sample_data()
        self.widget = PhoneWidget()
        self.search = ContactSearch()
        self.resolver = EntityResolver(
            LiveDataSources(
                people=self.cache.get_people,
                accounts=self.cache.get_accounts,
                call_context=self.widget.get_context,
                override_contact_id=self.search.override_contact_id,
            )
        )
        self.navigator = DialogNavigator(
            build_call_flow(settings.script.start_node),
            TemplateRenderer(self.resolver),
            openers=OPENERS,
            opener_key=opener_key or settings.script.default_opener,
            on_render=self.show_step,
        )
        set_session_id(f"CS-{uuid.uuid4().hex[:8]}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def show_step(self, step: RenderedStep) -> None:
        print()
        header = f"[{step.phase or step.stage}] {step.node_id}"
        print(f"{YELLOW}{BOLD}{header}{RESET}")
        print(f"{GREEN}{html_to_text(step.html)}{RESET}")
        for index, response in enumerate(step.responses, start=1):
            print(f"  {BLUE}{index}.{RESET} {response.label}")
        if step.amount_prompt is not None:
            print(f"  {BLUE}${RESET} <amount>   {BLUE}s{RESET} {step.amount_prompt.skip_label}")

    def _choose_by_label(self, label: str) -> bool:
        for response in self.navigator.responses():
            if response.label == label:
                return self.navigator.choose(response)
        return False

    def handle(self, text: str) -> bool:
        """Apply one operator input. Returns False when the session should end."""
        command = text.strip()
        lower = command.lower()
        if lower in ("q", "quit", "exit"):
            return False
        if len(command) > self.MAX_INPUT_LENGTH:
            self.system_log("Input too long")
            return True

        if lower == "b":
            if not self.navigator.back():
                self.system_log("Nothing to go back to")
        elif lower == "r":
            self.navigator.restart()
        elif lower == "s":
            if not self.navigator.skip_monthly_spend():
                self.system_log("No amount prompt on this step")
        elif _AMOUNT_RE.match(command):
            amount = _AMOUNT_RE.match(command).group(1).replace(",", "")
            if not self.navigator.submit_monthly_spend(amount):
                self.system_log("Enter a positive amount on an amount prompt")
        elif lower.startswith("p "):
            if not self.navigator.jump_to_phase(command[2:].strip()):
                self.system_log(f"Unknown phase; try one of: {[p.name for p in self.navigator.graph.phases]}")
        elif lower.startswith("o "):
            if not self.navigator.select_opener(command[2:].strip()):
                self.system_log(f"Openers: {[o.key for o in self.navigator.openers]}")
        elif lower.startswith("find"):
            self._find(command[4:])
        elif lower.startswith("pick "):
            self.search.select(command[5:])
            self.navigator.render()
        elif command.isdigit():
            responses = self.navigator.responses()
            index = int(command) - 1
            if 0 <= index < len(responses):
                self.navigator.choose(responses[index])
            else:
                self.system_log("No such response")
        elif not self._choose_by_label(command):
            self.system_log(HELP)
        return True

    def _find(self, query: str) -> None:
        context = self.widget.get_context()
        suggestions = suggest_contacts(
            query,
            self.cache.get_people(),
            resolved=self.resolver.resolve(),
            is_live=context.is_active,
        )
        if not suggestions:
            self.system_log("No matches")
        for suggestion in suggestions:
            contact = suggestion.contact
            self.system_log(
                f"{contact.id}: {suggestion.display_name} ({contact.company or 'no company'}) "
                f"score={suggestion.score}"
            )

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  CALL SCRIPTS - {title}{RESET}")
        print(f"{BOLD}  Opener: {self.navigator.opener.label if self.navigator.opener else '-'}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def _summary(self) -> None:
        trail = [entry.current for entry in self.navigator.history] + [self.navigator.current]
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{DIM}  Path: {' -> '.join(trail)}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        setup = self.SCENARIOS.get(scenario)
        if not setup:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        self.widget.connect(**setup["call"])
        self.navigator.render()
        for step in setup["steps"]:
            print(f"\n{BLUE}[Operator] {RESET}{step}")
            self.handle(step)
        self._summary()

    def run(self, number: str = "", name: str = "", company: str = "") -> None:
        self._banner("Console Demo")
        print(f"{DIM}{HELP}{RESET}")
        if number:
            self.widget.connect(number, name=name, company=company)
        self.navigator.render()

        while True:
            user_input = input(f"\n{BLUE}[Operator] {RESET}").strip()
            if not user_input:
                continue
            if not self.handle(user_input):
                break
        self._summary()


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline call-script console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    parser.add_argument("--opener", default=None, help="Opener key to start with")
    parser.add_argument("--number", default="", help="Live caller number for interactive mode")
    parser.add_argument("--name", default="", help="Caller display name")
    parser.add_argument("--company", default="", help="Caller company")
    args = parser.parse_args()

    session = ConsoleSession(opener_key=args.opener)
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run(args.number, args.name, args.company)


if __name__ == "__main__":
    main()
