# ================================
# ERROR MESSAGE TESTS (test_error_messages.py)
# ================================

import pytest

from estate_admin.core.exceptions import (
    AppException, ApiError, AttachmentRequiredError, UnparseableResponseError, UnreachableError
)
from estate_admin.utils.error_messages import (
    GENERIC_ERROR, describe_error, duplicate_field_hint, extract_detail
)


class TestExtractDetail:

    def test_detail_preferred_over_message(self):
        assert extract_detail({"detail": "Scheme not found", "message": "Failed"}) == "Scheme not found"

    def test_message_used_when_no_detail(self):
        assert extract_detail({"message": "Unit not found"}) == "Unit not found"

    def test_validation_error_list(self):
        body = {"detail": [{"loc": ["body", "email"], "msg": "field required"}]}

        assert extract_detail(body) == "field required"

    @pytest.mark.parametrize("body", [{}, {"detail": ""}, [], "plain text", None])
    def test_generic_fallback(self, body):
        assert extract_detail(body) == GENERIC_ERROR


class TestDuplicateFieldHint:

    @pytest.mark.parametrize("detail, field", [
        ("Agent with this PAN number already exists", "pan_number"),
        ("Aadhar number already registered", "aadhar_number"),
        ("RERA ID already exists", "rera_id"),
        ("Email already in use", "email"),
        ("Duplicate phone number", "phone"),
    ])
    def test_known_fields(self, detail, field):
        assert duplicate_field_hint(detail) == field

    def test_company_is_not_pan(self):
        assert duplicate_field_hint("Company already exists") is None

    def test_non_duplicate_message(self):
        assert duplicate_field_hint("Invalid PAN number") is None
        assert duplicate_field_hint(None) is None


class TestDescribeError:

    @pytest.mark.parametrize("status, title", [
        (401, "Authentication Error"),
        (403, "Permission Denied"),
        (404, "Not Found"),
        (400, "Invalid Request"),
        (500, "Error 500"),
    ])
    def test_titles_by_status(self, status, title):
        assert describe_error(ApiError(status, "Something failed")).title == title

    def test_expired_session_message(self):
        notice = describe_error(ApiError(401, "Token expired"))

        assert "log in again" in notice.description

    def test_unreachable(self):
        notice = describe_error(UnreachableError())

        assert notice.title == "Connection Error"
        assert "Unable to connect" in notice.description
        assert not isinstance(UnreachableError(), ApiError)

    def test_unparseable_body(self):
        notice = describe_error(UnparseableResponseError(502))

        assert notice.title == "Error 502"
        assert notice.description == "Server returned 502: Unable to parse response"

    def test_validation_uses_first_field_error(self):
        notice = describe_error(AttachmentRequiredError())

        assert notice.title == "Validation Error"
        assert notice.description == "Please select a file"

    def test_app_and_unexpected_errors(self):
        assert describe_error(AppException("Session store unavailable")).title == "Error"
        assert describe_error(RuntimeError("boom")) == describe_error(KeyError("x"))
        assert describe_error(RuntimeError("boom")).description == GENERIC_ERROR
