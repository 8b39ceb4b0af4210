"""Live-call context supplied by the telephony widget on every render."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from call_scripts.schemas.crm_schema import Account, Contact, as_record
from call_scripts.utils import as_text, first_non_empty


def _optional_id(value: Any) -> Optional[str]:
    text = as_text(value).strip()
    return text or None


class CallContext(BaseModel):
    """Snapshot of the phone widget state. Never cached across renders."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    company: str = ""
    number: str = ""
    is_active: bool = False
    contact_id: Optional[str] = None
    account_id: Optional[str] = None

    @classmethod
    def from_widget(cls, raw: Any) -> "CallContext":
        """Build a context from the widget's raw mapping (camelCase keys, aliases)."""
        if isinstance(raw, CallContext):
            return raw
        record = as_record(raw)
        return cls(
            name=first_non_empty(record.get("name"), record.get("contactName")).strip(),
            company=first_non_empty(record.get("company"), record.get("accountName")).strip(),
            number=as_text(record.get("number")).strip(),
            is_active=bool(record.get("isActive", record.get("is_active", False))),
            contact_id=_optional_id(record.get("contactId", record.get("contact_id"))),
            account_id=_optional_id(record.get("accountId", record.get("account_id"))),
        )


class ResolvedContext(BaseModel):
    """Best-effort contact/account pair for the live call."""

    model_config = ConfigDict(frozen=True)

    call: CallContext = Field(default_factory=CallContext)
    contact: Contact = Field(default_factory=Contact)
    account: Account = Field(default_factory=Account)
