"""
Entity resolution: match the live caller to CRM Contact/Account records.

Contact precedence (first hit wins):
    override id -> context contact id -> phone -> name -> stub from context
Account precedence:
    context account id -> contact's account link -> company key -> email domain
    -> stub from company strings

Resolution is a pure function of its inputs and is recomputed on every
render; the caches and the phone widget can change between any two clicks.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from call_scripts.config import settings
from call_scripts.logging_context import get_session_logger
from call_scripts.schemas.call_schema import CallContext, ResolvedContext
from call_scripts.schemas.crm_schema import (
    Account,
    Contact,
    canonicalize_account,
    canonicalize_contact,
    record_ids,
)
from call_scripts.utils import (
    as_text,
    first_non_empty,
    normalize_company_key,
    normalize_domain,
    normalize_name,
    normalize_phone,
    normalize_website_host,
    split_name,
)

logger = get_session_logger(__name__)

T = TypeVar("T")

CONTACT_ID_KEYS = ("id", "contactId", "_id")
ACCOUNT_ID_KEYS = ("id", "accountId", "_id")


def find_by_id(records: Iterable[Any], target: Any, keys: tuple[str, ...]) -> Optional[Any]:
    """First raw record carrying ``target`` under any of the id aliases."""
    wanted = as_text(target).strip()
    if not wanted:
        return None
    for record in records:
        if wanted in record_ids(record, keys):
            return record
    return None


def find_contact_by_phone(number: Any, people: Iterable[Any]) -> Optional[Contact]:
    """Contact whose work-direct, mobile, other or generic phone matches."""
    wanted = normalize_phone(number)
    if not wanted:
        return None
    for raw in people:
        contact = canonicalize_contact(raw)
        candidates = (contact.work_direct_phone, contact.mobile, contact.other_phone, contact.phone)
        if any(normalize_phone(candidate) == wanted for candidate in candidates):
            return contact
    return None


def find_contact_by_name(name: Any, people: Iterable[Any]) -> Optional[Contact]:
    """Contact whose first+last or full name equals the caller display name."""
    wanted = normalize_name(name)
    if not wanted:
        return None
    for raw in people:
        contact = canonicalize_contact(raw)
        if (
            normalize_name(f"{contact.first_name} {contact.last_name}") == wanted
            or normalize_name(contact.full_name) == wanted
        ):
            return contact
    return None


def find_account_by_company(company: Any, accounts: Iterable[Any]) -> Optional[Account]:
    """Account whose name key equals or contains (either way) the company key."""
    wanted = normalize_company_key(company)
    if not wanted:
        return None
    for raw in accounts:
        account = canonicalize_account(raw)
        candidate = normalize_company_key(account.name)
        if candidate and (candidate == wanted or wanted in candidate or candidate in wanted):
            return account
    return None


def find_account_by_domain(email: Any, accounts: Iterable[Any]) -> Optional[Account]:
    """Account whose website host is a suffix of the email domain, or vice versa."""
    domain = normalize_domain(email)
    if not domain:
        return None
    for raw in accounts:
        account = canonicalize_account(raw)
        host = normalize_website_host(account.website)
        if host and (domain.endswith(host) or host.endswith(domain)):
            return account
    return None


def _fill_from_call(contact: Contact, call: CallContext) -> Contact:
    """Fill empty name/company fields from what the phone widget shows."""
    updates: dict[str, str] = {}
    if not contact.first_name and call.name:
        first, last, full = split_name(call.name)
        updates["first_name"] = first
        updates["last_name"] = contact.last_name or last
        updates["full_name"] = contact.full_name or full
    if not contact.company and call.company:
        updates["company"] = call.company
    return contact.model_copy(update=updates) if updates else contact


def resolve_contact(
    call: CallContext,
    override_contact_id: Optional[str],
    people: list[Any],
) -> Contact:
    """Best-matching contact; a stub built from the call context if nothing matches."""
    contact: Optional[Contact] = None
    strategy = "stub"

    selected = find_by_id(people, override_contact_id, CONTACT_ID_KEYS)
    if selected is not None:
        contact, strategy = canonicalize_contact(selected), "override"

    if contact is None:
        direct = find_by_id(people, call.contact_id, CONTACT_ID_KEYS)
        if direct is not None:
            contact, strategy = canonicalize_contact(direct), "context_id"

    if contact is None:
        contact = find_contact_by_phone(call.number, people)
        strategy = "phone" if contact else strategy

    if contact is None:
        contact = find_contact_by_name(call.name, people)
        strategy = "name" if contact else strategy

    logger.debug("Contact resolved via %s", strategy)
    return _fill_from_call(contact or Contact(), call)


def resolve_account(call: CallContext, contact: Contact, accounts: list[Any]) -> Account:
    """Best-matching account for the resolved contact, backfilled from it."""
    account: Optional[Account] = None
    strategy = "stub"

    for hint, label in ((call.account_id, "context_id"), (contact.account_id, "contact_link")):
        direct = find_by_id(accounts, hint, ACCOUNT_ID_KEYS)
        if direct is not None:
            account, strategy = canonicalize_account(direct), label
            break

    if account is None:
        account = find_account_by_company(contact.company, accounts)
        strategy = "company" if account else strategy

    if account is None:
        account = find_account_by_domain(contact.email, accounts)
        strategy = "domain" if account else strategy

    logger.debug("Account resolved via %s", strategy)
    return _backfill_account(account or Account(), contact, call)


def _backfill_account(account: Account, contact: Contact, call: CallContext) -> Account:
    """Copy supplier/contract data contact -> account (never back), and ensure a name."""
    updates: dict[str, str] = {}
    if not account.supplier and contact.supplier:
        updates["supplier"] = contact.supplier
    if not account.contract_end and contact.contract_end:
        updates["contract_end"] = contact.contract_end
    if not account.name:
        name = first_non_empty(contact.company, call.company).strip()
        if name:
            updates["name"] = name
    return account.model_copy(update=updates) if updates else account


def resolve_live_data(
    call: Any,
    override_contact_id: Optional[str],
    people: Optional[Iterable[Any]],
    accounts: Optional[Iterable[Any]],
) -> ResolvedContext:
    """Resolve the contact and account for one render."""
    context = CallContext.from_widget(call)
    people_list = list(people or [])
    accounts_list = list(accounts or [])
    contact = resolve_contact(context, override_contact_id, people_list)
    account = resolve_account(context, contact, accounts_list)
    return ResolvedContext(call=context, contact=contact, account=account)


def _no_override() -> Optional[str]:
    return None


def _configured_agent_name() -> str:
    return settings.agent_first_name


@dataclass(frozen=True)
class LiveDataSources:
    """Read-only collaborator accessors, each called fresh per render."""

    people: Callable[[], Iterable[Any]]
    accounts: Callable[[], Iterable[Any]]
    call_context: Callable[[], Any]
    override_contact_id: Callable[[], Optional[str]] = _no_override
    agent_first_name: Callable[[], str] = _configured_agent_name


def read_source(source: Callable[[], T], default: T, label: str) -> T:
    """Call a collaborator accessor; a failing collaborator reads as ``default``."""
    try:
        return source()
    except Exception:
        logger.warning("Collaborator '%s' failed; using empty value", label, exc_info=True)
        return default


class EntityResolver:
    """Resolves the live call against whatever the collaborators hold right now.

    Deliberately not memoized: every ``resolve()`` re-reads every source.
    """

    def __init__(self, sources: LiveDataSources) -> None:
        self.sources = sources

    def resolve(self) -> ResolvedContext:
        return resolve_live_data(
            call=read_source(self.sources.call_context, None, "call_context"),
            override_contact_id=read_source(self.sources.override_contact_id, None, "override"),
            people=read_source(self.sources.people, [], "people"),
            accounts=read_source(self.sources.accounts, [], "accounts"),
        )

    def agent_first_name(self) -> str:
        return as_text(read_source(self.sources.agent_first_name, "", "agent_first_name")).strip()
