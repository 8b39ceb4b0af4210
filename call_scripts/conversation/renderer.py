"""
Template rendering for dialog nodes.

Builds one flat ``{token: value}`` map per render, substitutes every
``{{ token }}`` occurrence (case-insensitive, whitespace-tolerant), then
replaces the legacy ``(contact name)``-style placeholders left in older
content. Interpolated values are HTML-escaped; the template markup itself
is trusted.
"""

import math
import re
from datetime import datetime
from typing import Any, Callable, Optional

from call_scripts.config import AppConfig, settings
from call_scripts.conversation.resolver import EntityResolver
from call_scripts.logging_context import get_session_logger
from call_scripts.schemas.call_schema import ResolvedContext
from call_scripts.schemas.dialog_schema import (
    ComputedText,
    DialogNode,
    NavigationState,
    StaticText,
)
from call_scripts.utils import first_non_empty, normalize_domain, parse_flexible_date, split_name

logger = get_session_logger(__name__)

# A trailing K marks a categorical range label such as "$5K", not an amount.
_DOLLAR_AMOUNT_RE = re.compile(r"\$([\d,]+(?:\.\d+)?)([kK]?)")
_DASH_RE = re.compile(r"[‒–—―-]")
_WHITESPACE_RE = re.compile(r"\s+")

_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)

# (pattern, value key). Wrapped badges are listed before the bare marker.
LEGACY_PLACEHOLDERS: tuple[tuple[str, str], ...] = (
    (r'<span class="badge contact">\(contact name\)</span>', "contact_name"),
    (r'<span class="name-badge">\(contact name\)</span>', "contact_name"),
    (r"\(contact name\)", "contact_name"),
    (r'<span class="name-badge">\(your name\)</span>', "your_name"),
    (r"\(your name\)", "your_name"),
    (r'<span class="badge company">\(company name\)</span>', "company_name"),
    (r"\(company name\)", "company_name"),
)


def escape_html(value: Any) -> str:
    """Escape ``& < > " '`` for safe insertion into markup."""
    text = "" if value is None else str(value)
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def day_part(now: datetime, config: AppConfig = settings) -> str:
    """Greeting for the operator's local hour."""
    greeting = config.greeting
    hour = now.hour
    if greeting.morning_start_hour <= hour < greeting.afternoon_start_hour:
        return greeting.morning
    if greeting.afternoon_start_hour <= hour < greeting.evening_start_hour:
        return greeting.afternoon
    if greeting.evening_start_hour <= hour <= greeting.evening_end_hour:
        return greeting.evening
    return greeting.fallback


def is_known_amount(value: Optional[float]) -> bool:
    """True for finite amounts that show as at least one cent."""
    return value is not None and math.isfinite(value) and round(value, 2) > 0


def format_currency(value: Optional[float], config: AppConfig = settings) -> str:
    """``$12,500`` style amount, or the unknown-amount phrase for 0/None/NaN and sub-cent values.

    Examples:
        >>> format_currency(12500)
        '$12,500'
        >>> format_currency(0)
        'an estimated amount'
    """
    if not is_known_amount(value):
        return config.savings.unknown_amount_text
    if float(value).is_integer():
        return f"${int(value):,}"
    return f"${value:,.2f}"


def _range_key(label: str) -> str:
    return _WHITESPACE_RE.sub("", _DASH_RE.sub("-", label)).upper()


def infer_monthly_spend(state: NavigationState, config: AppConfig = settings) -> float:
    """Monthly spend from the entered figure, else from the discovery answer label."""
    if is_known_amount(state.monthly_spend):
        return float(state.monthly_spend)

    answer = next(
        (entry for entry in state.history if entry.current == config.script.discovery_node),
        None,
    )
    if answer is None:
        return 0.0

    for match in _DOLLAR_AMOUNT_RE.finditer(answer.response_label):
        if match.group(2):
            continue
        try:
            return float(match.group(1).replace(",", ""))
        except ValueError:
            return 0.0

    label_key = _range_key(answer.response_label)
    for range_label, midpoint in config.savings.spend_ranges:
        if _range_key(range_label) in label_key:
            return midpoint
    return 0.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def build_token_values(
    resolved: ResolvedContext,
    agent_first_name: str,
    monthly_spend: float,
    now: datetime,
    config: AppConfig = settings,
) -> dict[str, str]:
    """Flat token map for one render. Values are raw (unescaped) text."""
    call, contact, account = resolved.call, resolved.contact, resolved.account
    call_first, call_last, _ = split_name(call.name)
    contact_first, contact_last, _ = split_name(contact.full_name)

    annual_spend = monthly_spend * 12 if is_known_amount(monthly_spend) else 0.0
    potential_savings = (
        _round_half_up(annual_spend * config.savings.savings_rate) if annual_spend else 0
    )

    return {
        "day.part": day_part(now, config),
        "agent.first_name": agent_first_name,
        "contact.first_name": first_non_empty(contact.first_name, contact_first, call_first),
        "contact.last_name": first_non_empty(contact.last_name, contact_last, call_last),
        "contact.full_name": first_non_empty(contact.full_name, call.name),
        "contact.phone": first_non_empty(
            contact.work_direct_phone, contact.mobile, contact.other_phone,
            contact.phone, call.number,
        ),
        "contact.mobile": contact.mobile,
        "contact.email": contact.email,
        "contact.title": contact.title,
        "account.name": first_non_empty(account.name, contact.company, call.company),
        "account.industry": first_non_empty(account.industry, contact.industry),
        "account.city": first_non_empty(account.city, contact.city, config.script.default_city),
        "account.state": first_non_empty(account.state, contact.state),
        "account.website": first_non_empty(account.website, normalize_domain(contact.email)),
        "account.supplier": first_non_empty(account.supplier, contact.supplier),
        "account.contract_end": parse_flexible_date(
            first_non_empty(account.contract_end, contact.contract_end)
        ),
        "monthly_spend": format_currency(monthly_spend, config),
        "annual_spend": format_currency(annual_spend, config),
        "potential_savings": format_currency(potential_savings, config),
    }


def substitute_tokens(template: str, values: dict[str, str]) -> str:
    """Replace every ``{{ token }}`` occurrence with its escaped value."""
    result = template
    for token, value in values.items():
        pattern = re.compile(r"\{\{\s*" + re.escape(token) + r"\s*\}\}", re.IGNORECASE)
        escaped = escape_html(value)
        result = pattern.sub(lambda _match: escaped, result)
    return result


def replace_legacy_placeholders(html: str, values: dict[str, str]) -> str:
    """Resolve old ``(contact name)`` markers; unavailable values become ``""``."""
    names = {
        "contact_name": first_non_empty(values.get("contact.first_name"), values.get("contact.full_name")),
        "your_name": values.get("agent.first_name", ""),
        "company_name": values.get("account.name", ""),
    }
    result = html
    for pattern, key in LEGACY_PLACEHOLDERS:
        escaped = escape_html(names[key])
        result = re.sub(pattern, lambda _match: escaped, result, flags=re.IGNORECASE)
    return result


class TemplateRenderer:
    """Renders a node's text against freshly resolved live data."""

    def __init__(
        self,
        resolver: EntityResolver,
        clock: Callable[[], datetime] = datetime.now,
        config: AppConfig = settings,
    ) -> None:
        self.resolver = resolver
        self.clock = clock
        self.config = config

    def template_for(self, node: DialogNode, resolved: ResolvedContext) -> str:
        """Literal template string; computed nodes are invoked with the live data."""
        if isinstance(node.text, StaticText):
            return node.text.text
        if isinstance(node.text, ComputedText):
            try:
                return str(node.text.compute(resolved) or "")
            except Exception:
                logger.warning("Computed text for node '%s' failed", node.id, exc_info=True)
                return ""
        return ""

    def render(self, node: DialogNode, state: NavigationState) -> str:
        """HTML for ``node`` with every known token substituted."""
        resolved = self.resolver.resolve()
        template = self.template_for(node, resolved)
        if not template:
            return ""
        values = build_token_values(
            resolved,
            agent_first_name=self.resolver.agent_first_name(),
            monthly_spend=infer_monthly_spend(state, self.config),
            now=self.clock(),
            config=self.config,
        )
        return replace_legacy_placeholders(substitute_tokens(template, values), values)
