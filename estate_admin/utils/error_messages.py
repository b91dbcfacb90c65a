"""
Error message helpers.

Server error bodies look like {detail?, message?}. Duplicate-value errors come
back as free text ("Agent with this PAN already exists"), so mapping them to a
form field is a best-effort substring match on wording the server controls.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import ValidationError

from estate_admin.core.exceptions import AppException, ApiError, FormValidationError, UnreachableError

GENERIC_ERROR = "An error occurred"

# Key for errors that belong to the whole form
FORM_ERROR = "__all__"

DUPLICATE_MARKERS = ("already exists", "already registered", "already in use", "duplicate")

# Checked in order; "pan" must not match inside "company"
DUPLICATE_FIELD_PATTERNS = (
    ("aadhar_number", ("aadhar", "aadhaar")),
    ("pan_number", ("pan number", "pan ", " pan", "pan_number")),
    ("rera_id", ("rera",)),
    ("email", ("email", "e-mail")),
    ("phone", ("phone", "mobile")),
)

DUPLICATE_FIELD_HINTS = {
    "aadhar_number": "This Aadhar number is already registered",
    "pan_number": "This PAN number is already registered",
    "rera_id": "This RERA ID is already registered",
    "email": "This email address is already in use",
    "phone": "This phone number is already in use",
}


def extract_detail(body: Any, default: str = GENERIC_ERROR) -> str:
    """detail -> message -> generic fallback"""
    if isinstance(body, dict):
        for key in ("detail", "message"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
            # FastAPI style validation errors: [{"msg": ...}]
            if key == "detail" and isinstance(value, list) and value:
                first = value[0]
                if isinstance(first, dict) and first.get("msg"):
                    return str(first["msg"])
    return default


def duplicate_field_hint(detail: Optional[str]) -> Optional[str]:
    """Guess which unique field a duplicate-value error refers to"""
    if not detail:
        return None
    text = f" {detail.lower()} "
    if not any(marker in text for marker in DUPLICATE_MARKERS):
        return None
    for field, needles in DUPLICATE_FIELD_PATTERNS:
        if any(needle in text for needle in needles):
            return field
    return None


def pydantic_field_errors(error: ValidationError) -> Dict[str, str]:
    """Flatten a pydantic ValidationError into {field: message}"""
    errors: Dict[str, str] = {}
    for err in error.errors():
        loc = err.get("loc") or ()
        key = str(loc[0]) if loc else FORM_ERROR
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(key, message)
    return errors


@dataclass
class ErrorNotice:
    title: str
    description: str


def describe_error(error: Exception, default: str = GENERIC_ERROR) -> ErrorNotice:
    """Title/description pair for a transient notification"""
    if isinstance(error, FormValidationError):
        first = next(iter(error.field_errors.values()), None)
        return ErrorNotice("Validation Error", first or error.detail)

    if isinstance(error, UnreachableError):
        return ErrorNotice("Connection Error", error.detail)

    if isinstance(error, ApiError):
        status = error.status
        if status == 401:
            return ErrorNotice("Authentication Error", "Your session has expired. Please log in again.")
        if status == 403:
            return ErrorNotice("Permission Denied", error.detail or "You do not have permission to perform this action.")
        if status == 404:
            return ErrorNotice("Not Found", error.detail or "The requested resource was not found.")
        if status == 400:
            return ErrorNotice("Invalid Request", error.detail or "Please check your input and try again.")
        return ErrorNotice(f"Error {status}", error.detail or default)

    if isinstance(error, AppException):
        return ErrorNotice("Error", error.detail or default)

    return ErrorNotice("Unexpected Error", default)
