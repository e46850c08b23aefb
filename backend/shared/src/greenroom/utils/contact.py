"""Contact and identity helpers shared by every order form.

Email shape checks, phone normalization and calendar-age arithmetic.
"""

import datetime as dt
import re

MINIMUM_AGE = 21

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_STRIP_RE = re.compile(r"[^\d+]")
_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def is_valid_email(value: str | None) -> bool:
    """Check that an email has a single ``@`` and a dotted domain.

    Args:
        value: Raw email string

    Returns:
        True if the address is well-formed
    """
    if not value:
        return False
    return bool(_EMAIL_RE.match(value.strip()))


def normalize_phone(value: str | None) -> str:
    """Normalize a phone number to E.164-ish form.

    Keeps digits and a leading ``+``. Bare 10-digit numbers are assumed to be
    North American and get a ``+1`` prefix.

    Args:
        value: Raw phone string as typed by the customer

    Returns:
        Normalized number, or an empty string if nothing usable remains
    """
    if not value:
        return ""
    cleaned = _PHONE_STRIP_RE.sub("", value.strip())
    if not cleaned:
        return ""
    if cleaned.startswith("+"):
        # Only the leading plus survives
        return "+" + cleaned[1:].replace("+", "")
    digits = cleaned.replace("+", "")
    if len(digits) == 10:
        return f"+1{digits}"
    return digits


def parse_date(value: str | dt.date | None) -> dt.date | None:
    """Parse an ISO ``YYYY-MM-DD`` date (or ``YYYY-MM-DDThh:mm...``) without raising.

    Returns:
        The date, or None for empty or unparseable input
    """
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    if not text:
        return None
    date_part, separator, time_part = text.partition("T")
    if not _ISO_DATE_RE.fullmatch(date_part) or (separator and not time_part):
        return None
    try:
        if separator:
            return dt.datetime.fromisoformat(text).date()
        return dt.date.fromisoformat(date_part)
    except ValueError:
        return None


def calculate_age(dob: dt.date, today: dt.date | None = None) -> int:
    """Whole calendar years between ``dob`` and ``today``.

    The year difference is decremented when the birthday has not yet
    happened this year, i.e. ``(today.month, today.day) < (dob.month, dob.day)``.
    """
    today = today or dt.date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def is_of_age(
    dob: str | dt.date | None,
    today: dt.date | None = None,
    minimum: int = MINIMUM_AGE,
) -> bool:
    """Check that a date of birth parses and yields at least ``minimum`` years."""
    parsed = parse_date(dob)
    if parsed is None:
        return False
    return calculate_age(parsed, today) >= minimum
