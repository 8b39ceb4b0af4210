"""
Manual contact search.

When resolution picks the wrong person, the operator searches the people
cache and selects the right one. The selection becomes the resolution
override read by the ``EntityResolver`` on every render.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional

from call_scripts.logging_context import get_session_logger
from call_scripts.schemas.call_schema import ResolvedContext
from call_scripts.schemas.crm_schema import Contact, canonicalize_contact
from call_scripts.utils import first_non_empty, normalize_company_key, normalize_name

logger = get_session_logger(__name__)

SAME_COMPANY_SCORE = 50
LIVE_CONTACT_SCORE = 25
NAME_SCORE = 30
EMAIL_SCORE = 20
COMPANY_SCORE = 10
PHONE_SCORE = 15


@dataclass(frozen=True)
class Suggestion:
    contact: Contact
    score: int
    display_name: str
    same_company: bool


def _same_company(company: str, account_key: str) -> bool:
    key = normalize_company_key(company)
    return bool(account_key and key) and (
        key == account_key or account_key in key or key in account_key
    )


def _score(contact: Contact, query: str, account_key: str, live_id: str) -> Suggestion:
    name = first_non_empty(contact.full_name, f"{contact.first_name} {contact.last_name}").strip()
    company = contact.company
    same_company = _same_company(company, account_key)

    score = SAME_COMPANY_SCORE if same_company else 0
    if not query:
        if live_id and contact.id == live_id:
            score += LIVE_CONTACT_SCORE
    else:
        if query in name.lower():
            score += NAME_SCORE
        if query in contact.email.lower():
            score += EMAIL_SCORE
        if query in company.lower():
            score += COMPANY_SCORE
        digits = "".join(ch for ch in query if ch.isdigit())
        phone = first_non_empty(
            contact.work_direct_phone, contact.mobile, contact.other_phone, contact.phone
        )
        if digits and digits in "".join(ch for ch in phone if ch.isdigit()):
            score += PHONE_SCORE
    return Suggestion(contact=contact, score=score, display_name=name, same_company=same_company)


def suggest_contacts(
    query: Any,
    people: Iterable[Any],
    resolved: Optional[ResolvedContext] = None,
    is_live: bool = False,
    limit: int = 5,
) -> list[Suggestion]:
    """
    Rank people for the search box.

    With a query, only contacts that match something are returned; off-call,
    exact then prefix name matches win outright. With an empty query, the
    live contact is boosted and the list narrows to the resolved account's
    company when any contact belongs to it.
    """
    q = str(query or "").strip().lower()
    account_key = normalize_company_key(resolved.account.name) if resolved else ""
    live_id = resolved.contact.id if resolved else ""

    scored = [_score(canonicalize_contact(raw), q, account_key, live_id) for raw in people]
    if q:
        scored = [s for s in scored if s.score > 0]
    # sorted() is stable, so equal scores keep cache order
    scored = sorted(scored, key=lambda s: s.score, reverse=True)

    top = scored
    if q and not is_live:
        wanted = normalize_name(q)
        exact = [s for s in scored if normalize_name(s.display_name) == wanted]
        prefix = [s for s in scored if normalize_name(s.display_name).startswith(wanted)]
        top = exact or prefix or scored
    if not q and account_key:
        top = [s for s in scored if s.same_company] or scored

    return top[:limit]


class ContactSearch:
    """Holds the operator's manual pick; usable as the resolver's override source."""

    def __init__(self) -> None:
        self._selected_id: Optional[str] = None

    def select(self, contact_id: Optional[str]) -> None:
        self._selected_id = (contact_id or "").strip() or None
        logger.info("Contact override set to %s", self._selected_id)

    def clear(self) -> None:
        self._selected_id = None
        logger.info("Contact override cleared")

    def override_contact_id(self) -> Optional[str]:
        return self._selected_id
