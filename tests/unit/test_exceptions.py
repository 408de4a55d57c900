"""
Unit tests for GoCardlessAPIError classification.
"""

import pytest

from gocardless_bank_data.exceptions import (
    ErrorCode,
    GoCardlessAPIError,
    classify_error,
    read_error_body,
)
from gocardless_bank_data.rate_limit import RateLimitInfo, RateLimitWindow


class TestFromResponse:
    """Tests for building errors from responses."""

    def test_message_from_summary_and_detail(self):
        error = GoCardlessAPIError.from_response(
            400, {"summary": "Invalid date", "detail": "date_from must be before date_to"}
        )

        assert str(error) == "Invalid date: date_from must be before date_to"
        assert error.message == str(error)
        assert error.status_code == 400
        assert error.code == ErrorCode.VALIDATION_ERROR
        assert error.summary == "Invalid date"
        assert error.detail == "date_from must be before date_to"

    def test_defaults_when_body_empty(self):
        error = GoCardlessAPIError.from_response(500, {})

        assert error.summary == "API Error"
        assert error.detail == "An error occurred"
        assert error.message == "API Error: An error occurred"
        assert error.code == ErrorCode.INTERNAL_SERVER_ERROR

    def test_non_dict_body_treated_as_empty(self):
        error = GoCardlessAPIError.from_response(404, ["unexpected"])

        assert error.code == ErrorCode.NOT_FOUND
        assert error.summary == "API Error"

    def test_carries_rate_limit_and_meta(self):
        rate_limit = RateLimitInfo(general=RateLimitWindow(remaining=0))
        error = GoCardlessAPIError.from_response(
            429, {}, rate_limit=rate_limit, meta={"retry_after": 30}
        )

        assert error.rate_limit is rate_limit
        assert error.meta == {"retry_after": 30}

    def test_code_compares_equal_to_string(self):
        error = GoCardlessAPIError.from_response(404, {"summary": "Account ID not found"})

        assert error.code == "ACCOUNT_NOT_FOUND"
        assert isinstance(error, Exception)

    def test_repr(self):
        error = GoCardlessAPIError.from_response(401, {"summary": "Bad token", "detail": "Expired"})

        assert repr(error) == (
            "GoCardlessAPIError(message='Bad token: Expired', status_code=401, "
            "code='AUTHENTICATION_FAILED')"
        )


class TestClassifyError:
    """Tests for status/summary to ErrorCode mapping."""

    @pytest.mark.parametrize(
        "summary,expected",
        [
            ("Account ID not found", ErrorCode.ACCOUNT_NOT_FOUND),
            ("Transaction not found", ErrorCode.TRANSACTION_NOT_FOUND),
            ("REQUISITION not found", ErrorCode.REQUISITION_NOT_FOUND),
            ("Agreement not found", ErrorCode.AGREEMENT_NOT_FOUND),
            ("Not found.", ErrorCode.NOT_FOUND),
            (None, ErrorCode.NOT_FOUND),
        ],
    )
    def test_not_found_hints(self, summary, expected):
        assert classify_error(404, summary) == expected

    def test_not_found_hint_priority(self):
        assert classify_error(404, "Agreement for account not found") == ErrorCode.ACCOUNT_NOT_FOUND

    def test_forbidden_ip(self):
        assert classify_error(403, "IP address access denied") == ErrorCode.IP_NOT_WHITELISTED

    def test_forbidden(self):
        assert classify_error(403, "Access denied") == ErrorCode.FORBIDDEN

    @pytest.mark.parametrize(
        "status_code,expected",
        [
            (400, ErrorCode.VALIDATION_ERROR),
            (401, ErrorCode.AUTHENTICATION_FAILED),
            (402, ErrorCode.PAYMENT_REQUIRED),
            (409, ErrorCode.CONFLICT),
            (429, ErrorCode.RATE_LIMIT_EXCEEDED),
            (500, ErrorCode.INTERNAL_SERVER_ERROR),
            (502, ErrorCode.BAD_GATEWAY),
            (503, ErrorCode.SERVICE_UNAVAILABLE),
            (504, ErrorCode.GATEWAY_TIMEOUT),
            (418, ErrorCode.UNKNOWN_ERROR),
        ],
    )
    def test_status_codes(self, status_code, expected):
        assert classify_error(status_code, "Account problem") == expected

    def test_same_inputs_same_code(self):
        assert classify_error(404, "Account gone") == classify_error(404, "Account gone")


class TestGetRetryAfter:
    """Tests for retry-after extraction."""

    def test_plural_seconds(self):
        error = GoCardlessAPIError.from_response(429, {"detail": "Please try again in 60 seconds"})
        assert error.get_retry_after() == 60

    def test_singular_second_case_insensitive(self):
        error = GoCardlessAPIError.from_response(429, {"detail": "TRY AGAIN IN 1 SECOND"})
        assert error.get_retry_after() == 1

    def test_no_hint(self):
        error = GoCardlessAPIError.from_response(429, {"detail": "Slow down"})
        assert error.get_retry_after() is None

    def test_wrong_code_family(self):
        error = GoCardlessAPIError.from_response(404, {})
        assert error.get_retry_after() is None

    def test_hint_ignored_for_other_codes(self):
        error = GoCardlessAPIError.from_response(503, {"detail": "Please try again in 60 seconds"})
        assert error.get_retry_after() is None


class TestReadErrorBody:
    """Tests for error body decoding."""

    def test_json_object(self, make_response):
        assert read_error_body(make_response(400, json={"summary": "x"})) == {"summary": "x"}

    def test_invalid_json(self, make_response):
        assert read_error_body(make_response(502, content=b"<html>Bad Gateway</html>")) == {}

    def test_json_array(self, make_response):
        assert read_error_body(make_response(400, json=[1, 2])) == {}
