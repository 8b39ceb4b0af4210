"""Shared normalization utilities used across the call-script engine.

Every function here is total: bad or missing input degrades to an empty
string (or the unchanged input) instead of raising.
"""

import re
from datetime import date, datetime
from typing import Any, Optional

_NON_DIGIT_RE = re.compile(r"\D")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_LEGAL_SUFFIX_RE = re.compile(r"\b(?:llc|inc|co|corp|ltd)\b")
_SCHEME_RE = re.compile(r"^https?://")

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_SLASH_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_FALLBACK_DATE_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%m-%d-%Y", "%Y/%m/%d")


def as_text(value: Any) -> str:
    """Coerce any upstream value to a string; ``None`` becomes ``""``."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def first_non_empty(*values: Any) -> str:
    """Return the first value with visible text, or ``""``.

    Examples:
        >>> first_non_empty(None, "  ", "Acme", "Other")
        'Acme'
    """
    for value in values:
        text = as_text(value)
        if text.strip():
            return text
    return ""


def normalize_phone(value: Any) -> str:
    """Keep the last 10 digits of a phone number.

    Examples:
        >>> normalize_phone("+1 (972) 555-1234")
        '9725551234'
        >>> normalize_phone(None)
        ''
    """
    return _NON_DIGIT_RE.sub("", as_text(value))[-10:]


def normalize_name(value: Any) -> str:
    """Lowercase, drop punctuation and collapse whitespace.

    Examples:
        >>> normalize_name("  Jane   O'Doe ")
        'jane o doe'
    """
    cleaned = _NON_ALNUM_RE.sub(" ", as_text(value).lower())
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def normalize_company_key(value: Any) -> str:
    """Name key with legal-entity suffixes (llc, inc, co, corp, ltd) removed.

    Examples:
        >>> normalize_company_key("Acme Industries, LLC")
        'acme industries'
        >>> normalize_company_key("Acme Inc.")
        'acme'
    """
    key = _LEGAL_SUFFIX_RE.sub(" ", normalize_name(value))
    return _WHITESPACE_RE.sub(" ", key).strip()


def normalize_domain(email: Any) -> str:
    """Lowercased host part of an email address, ``""`` when malformed.

    Examples:
        >>> normalize_domain("Jane@Acme.COM")
        'acme.com'
    """
    parts = as_text(email).strip().split("@")
    if len(parts) < 2:
        return ""
    return parts[1].strip().lower()


def normalize_website_host(url: Any) -> str:
    """Bare host of a website or domain field (no scheme, ``www.`` or path)."""
    host = _SCHEME_RE.sub("", as_text(url).strip().lower())
    if host.startswith("www."):
        host = host[4:]
    return host.split("/")[0]


def split_name(full: Any) -> tuple[str, str, str]:
    """Split a display name into ``(first, last, full)``."""
    text = as_text(full).strip()
    if not text:
        return "", "", ""
    parts = text.split()
    return parts[0], " ".join(parts[1:]), text


def _format_mdy(value: date) -> str:
    return f"{value.month:02d}/{value.day:02d}/{value.year:04d}"


def _parse_date_components(text: str) -> Optional[date]:
    """Parse date-only strings by their components so no timezone shift applies."""
    iso = _ISO_DATE_RE.match(text)
    slash = _SLASH_DATE_RE.match(text)
    try:
        if iso:
            return date(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))
        if slash:
            return date(int(slash.group(3)), int(slash.group(1)), int(slash.group(2)))
    except ValueError:
        return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_flexible_date(value: Any) -> str:
    """Format a contract date as ``MM/DD/YYYY``.

    Unparsable input is returned unchanged rather than raising.

    Examples:
        >>> parse_flexible_date("2026-03-05")
        '03/05/2026'
        >>> parse_flexible_date("3/5/2026")
        '03/05/2026'
        >>> parse_flexible_date("not-a-date")
        'not-a-date'
    """
    if isinstance(value, date):
        return _format_mdy(value)
    raw = as_text(value)
    text = raw.strip()
    if not text:
        return ""
    parsed = _parse_date_components(text)
    if parsed is None:
        return raw
    return _format_mdy(parsed)
