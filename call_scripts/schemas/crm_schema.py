"""CRM contact/account models and alias canonicalization.

Upstream records arrive with field names that drifted over the CRM's
history (``workDirectPhone`` vs ``mobile_phone``, ``contractEnd`` vs
``renewal_date`` ...). Each canonical field has an ordered alias list;
the first alias carrying visible text wins.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from call_scripts.utils import as_text, first_non_empty, split_name

CONTACT_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id", "contactId", "_id"),
    "work_direct_phone": ("workDirectPhone",),
    "mobile": ("mobile", "mobile_phone"),
    "other_phone": ("otherPhone",),
    "email": ("email", "work_email", "personal_email"),
    "title": ("title", "jobTitle", "job_title"),
    "company": ("company", "companyName", "accountName", "account_name"),
    "account_id": ("accountId", "account_id", "account", "companyId"),
    "supplier": ("supplier", "currentSupplier", "current_supplier"),
    "contract_end": ("contract_end", "contractEnd", "renewalDate", "renewal_date"),
    "industry": ("industry",),
    "city": ("city", "locationCity", "billingCity"),
    "state": ("state", "region", "billingState"),
}

# Direct work line first, then mobile, other, and any legacy generic field.
CONTACT_PHONE_ALIASES: tuple[str, ...] = (
    "workDirectPhone", "mobile", "otherPhone", "phone", "mobile_phone",
)

ACCOUNT_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id", "accountId", "_id"),
    "name": ("name", "accountName", "companyName"),
    "industry": ("industry",),
    "city": ("city", "billingCity", "locationCity"),
    "state": ("state", "region", "billingState"),
    "website": ("website", "domain"),
    "supplier": (
        "supplier", "currentSupplier", "current_supplier",
        "energySupplier", "electricitySupplier", "supplierName",
    ),
    "contract_end": (
        "contractEnd", "contract_end", "renewalDate", "renewal_date",
        "contractEndDate", "contract_end_date", "contractExpiry",
        "expiration", "expirationDate", "expiresOn",
    ),
}

ACCOUNT_EMPLOYEE_ALIASES: tuple[str, ...] = ("employees", "employeeCount", "numberOfEmployees")


class Contact(BaseModel):
    """Canonical CRM contact. Missing data is always ``""``, never ``None``."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    phone: str = ""
    work_direct_phone: str = ""
    mobile: str = ""
    other_phone: str = ""
    email: str = ""
    title: str = ""
    company: str = ""
    account_id: str = ""
    supplier: str = ""
    contract_end: str = ""
    industry: str = ""
    city: str = ""
    state: str = ""


class Account(BaseModel):
    """Canonical CRM account."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str = ""
    industry: str = ""
    city: str = ""
    state: str = ""
    website: str = ""
    supplier: str = ""
    contract_end: str = ""
    employees: int = 0


def as_record(raw: Any) -> Mapping[str, Any]:
    """View any upstream record as a read-only mapping."""
    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, BaseModel):
        return raw.model_dump()
    return {}


def record_ids(raw: Any, keys: tuple[str, ...]) -> list[str]:
    """All identifier values a record carries under the given alias keys."""
    record = as_record(raw)
    return [as_text(record.get(key)).strip() for key in keys if as_text(record.get(key)).strip()]


def _pick(record: Mapping[str, Any], keys: tuple[str, ...]) -> str:
    return first_non_empty(*(record.get(key) for key in keys)).strip()


def _parse_count(value: Any) -> int:
    try:
        return max(int(float(as_text(value).replace(",", "").strip())), 0)
    except (ValueError, OverflowError):
        return 0


def canonicalize_contact(raw: Any) -> Contact:
    """Resolve every contact field alias into a ``Contact``. Never mutates ``raw``."""
    if isinstance(raw, Contact):
        return raw
    record = as_record(raw)
    fields = {name: _pick(record, keys) for name, keys in CONTACT_ALIASES.items()}

    first = _pick(record, ("firstName", "first_name"))
    last = _pick(record, ("lastName", "last_name"))
    name_guess = first_non_empty(record.get("name"), f"{first} {last}").strip()
    guess_first, guess_last, _ = split_name(name_guess)
    fields["first_name"] = first or guess_first
    fields["last_name"] = last or guess_last
    fields["full_name"] = first_non_empty(
        record.get("fullName"), record.get("full_name"), name_guess
    ).strip()

    preferred = as_text(record.get("preferredPhoneField")).strip()
    phone_keys = ((preferred,) if preferred else ()) + CONTACT_PHONE_ALIASES
    fields["phone"] = _pick(record, phone_keys)

    return Contact(**fields)


def canonicalize_account(raw: Any) -> Account:
    """Resolve every account field alias into an ``Account``. Never mutates ``raw``."""
    if isinstance(raw, Account):
        return raw
    record = as_record(raw)
    fields: dict[str, Any] = {name: _pick(record, keys) for name, keys in ACCOUNT_ALIASES.items()}
    fields["employees"] = _parse_count(_pick(record, ACCOUNT_EMPLOYEE_ALIASES))
    return Account(**fields)
