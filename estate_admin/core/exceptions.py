# ================================
# CUSTOM EXCEPTIONS (core/exceptions.py)
# ================================

from typing import Any, Dict, Optional

UNREACHABLE_DETAIL = "Unable to connect to the server. Please check your connection and try again."

class AppException(Exception):
    """Base exception for console-specific errors"""

    def __init__(self, detail: str, status_code: int = 400, error_code: str = None):
        self.detail = detail
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(detail)

class ApiError(AppException):
    """Server rejected the request (non-2xx with a parseable body)"""

    def __init__(self, status: int, detail: str, payload: Optional[Dict[str, Any]] = None, error_code: str = "SERVER_REJECTED"):
        super().__init__(detail, status, error_code)
        self.payload = payload

    @property
    def status(self) -> int:
        return self.status_code

class UnparseableResponseError(ApiError):
    """Response body could not be parsed as JSON"""

    def __init__(self, status: int):
        super().__init__(
            status,
            f"Server returned {status}: Unable to parse response",
            error_code="UNPARSEABLE_RESPONSE"
        )

class UnreachableError(AppException):
    """Network-level failure, the server was never reached"""

    def __init__(self, detail: str = UNREACHABLE_DETAIL):
        super().__init__(detail, 0, "UNREACHABLE")

    @property
    def status(self) -> int:
        return 0

class AuthenticationError(AppException):
    """Authentication-specific errors"""

    def __init__(self, detail: str = "Authentication required", error_code: str = "AUTH_REQUIRED"):
        super().__init__(detail, 401, error_code)

class FormValidationError(AppException):
    """Local validation failure, no request was sent"""

    def __init__(self, field_errors: Dict[str, str], detail: str = "Validation error", error_code: str = "VALIDATION_ERROR"):
        super().__init__(detail, 422, error_code)
        self.field_errors = dict(field_errors)

class AttachmentRequiredError(FormValidationError):
    """An attachment-bearing entity was submitted without its file"""

    def __init__(self, field: str = "file", detail: str = "Please select a file"):
        super().__init__({field: detail}, detail, "ATTACHMENT_REQUIRED")

class ConfirmationDeclinedError(AppException):
    """Destructive action was not confirmed by the user"""

    def __init__(self, detail: str = "Action cancelled"):
        super().__init__(detail, 409, "CONFIRMATION_DECLINED")

class ActionInProgressError(AppException):
    """The same action is already in flight"""

    def __init__(self, action: str):
        super().__init__(f"Action '{action}' is already in progress", 409, "ACTION_IN_PROGRESS")
        self.action = action

class InvalidSelectionError(AppException):
    """Selected option is not valid for the current parent selection"""

    def __init__(self, detail: str):
        super().__init__(detail, 400, "INVALID_SELECTION")
