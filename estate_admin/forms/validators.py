"""
Field checks shared by the forms.

Each check returns an error message or None so forms can collect
field-scoped errors instead of stopping at the first failure.
"""

import re
from datetime import date
from typing import Any, Iterable, Optional

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
CONTACT_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]{2,}$")
PHONE_PATTERN = re.compile(r"^\d{10}$")
AADHAR_PATTERN = re.compile(r"^\d{12}$")
PAN_PATTERN = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")

MIN_ADDRESS_LENGTH = 5
MIN_PASSWORD_LENGTH = 6


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def check_email(value: Optional[str], strict: bool = True) -> Optional[str]:
    if is_blank(value):
        return None
    pattern = EMAIL_PATTERN if strict else CONTACT_EMAIL_PATTERN
    if not pattern.match(value.strip()):
        return "Please enter a valid email address"
    return None


def check_phone(value: Optional[str]) -> Optional[str]:
    if is_blank(value):
        return None
    digits = re.sub(r"[\s-]", "", str(value))
    if not PHONE_PATTERN.match(digits):
        return "Phone number must be exactly 10 digits"
    return None


def check_aadhar(value: Optional[str]) -> Optional[str]:
    if is_blank(value):
        return None
    if not AADHAR_PATTERN.match(str(value).replace(" ", "")):
        return "Aadhar number must be exactly 12 digits"
    return None


def check_pan(value: Optional[str]) -> Optional[str]:
    if is_blank(value):
        return None
    if not PAN_PATTERN.match(str(value).strip().upper()):
        return "PAN must be in the format AAAAA9999A"
    return None


def check_address(value: Optional[str]) -> Optional[str]:
    if is_blank(value):
        return None
    if len(value.strip()) < MIN_ADDRESS_LENGTH:
        return f"Address must be at least {MIN_ADDRESS_LENGTH} characters"
    return None


def check_password(value: Optional[str]) -> Optional[str]:
    if is_blank(value):
        return None
    if len(value) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value.split("T")[0])
        except ValueError:
            return None
    return None


def check_date_order(start: Any, end: Any, message: str = "End date cannot be before start date") -> Optional[str]:
    start_date, end_date = _as_date(start), _as_date(end)
    if start_date and end_date and end_date < start_date:
        return message
    return None


def check_percentage(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "Share percentage must be a number"
    if not 0 <= number <= 100:
        return "Share percentage must be between 0 and 100"
    return None


def check_share_total(shares: Iterable[Any]) -> Optional[str]:
    total = 0.0
    for share in shares:
        try:
            total += float(share or 0)
        except (TypeError, ValueError):
            continue
    if total > 100:
        return "Joint owner shares cannot exceed 100%"
    return None


def check_unit_counts(total: Any, available: Any) -> Optional[str]:
    try:
        if total is not None and available is not None and int(available) > int(total):
            return "Available units cannot exceed total units"
    except (TypeError, ValueError):
        return "Unit counts must be whole numbers"
    return None
