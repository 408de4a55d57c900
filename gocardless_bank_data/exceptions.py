"""
GoCardless-specific exceptions for error handling.

Every API-level failure (a response with an error status) surfaces as a
GoCardlessAPIError carrying a programmatic ErrorCode. Network failures
(DNS, connection refused, timeouts) are raised as the underlying httpx
exceptions.
"""

import re
from enum import Enum
from typing import Any, Dict, Optional

from gocardless_bank_data.rate_limit import RateLimitInfo

DEFAULT_SUMMARY = "API Error"
DEFAULT_DETAIL = "An error occurred"

# "Please try again in 60 seconds"
RETRY_AFTER_PATTERN = re.compile(r"try again in (\d+) second", re.IGNORECASE)

# Checked in order, first match wins
_NOT_FOUND_HINTS = (
    ("account", "ACCOUNT_NOT_FOUND"),
    ("transaction", "TRANSACTION_NOT_FOUND"),
    ("requisition", "REQUISITION_NOT_FOUND"),
    ("agreement", "AGREEMENT_NOT_FOUND"),
)


class ErrorCode(str, Enum):
    """Error codes for programmatic handling."""
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    TRANSACTION_NOT_FOUND = "TRANSACTION_NOT_FOUND"
    REQUISITION_NOT_FOUND = "REQUISITION_NOT_FOUND"
    AGREEMENT_NOT_FOUND = "AGREEMENT_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"
    IP_NOT_WHITELISTED = "IP_NOT_WHITELISTED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    BAD_GATEWAY = "BAD_GATEWAY"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    GATEWAY_TIMEOUT = "GATEWAY_TIMEOUT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


_STATUS_CODES = {
    429: ErrorCode.RATE_LIMIT_EXCEEDED,
    401: ErrorCode.AUTHENTICATION_FAILED,
    402: ErrorCode.PAYMENT_REQUIRED,
    409: ErrorCode.CONFLICT,
    400: ErrorCode.VALIDATION_ERROR,
    500: ErrorCode.INTERNAL_SERVER_ERROR,
    502: ErrorCode.BAD_GATEWAY,
    503: ErrorCode.SERVICE_UNAVAILABLE,
    504: ErrorCode.GATEWAY_TIMEOUT,
}


def parse_retry_after(detail: Optional[str]) -> Optional[int]:
    """Extract N from "try again in N seconds", or None."""
    if not isinstance(detail, str):
        return None
    match = RETRY_AFTER_PATTERN.search(detail)
    if match:
        return int(match.group(1))
    return None


def classify_error(status_code: int, summary: Optional[str] = None) -> ErrorCode:
    """Map a status code and error summary to an ErrorCode."""
    summary = summary.lower() if isinstance(summary, str) else ""

    if status_code == 404:
        for hint, code in _NOT_FOUND_HINTS:
            if hint in summary:
                return ErrorCode(code)
        return ErrorCode.NOT_FOUND

    if status_code == 403:
        if "ip" in summary:
            return ErrorCode.IP_NOT_WHITELISTED
        return ErrorCode.FORBIDDEN

    return _STATUS_CODES.get(status_code, ErrorCode.UNKNOWN_ERROR)


def _text(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


class GoCardlessAPIError(Exception):
    """Base exception for GoCardless API errors."""

    def __init__(
        self,
        message: str,
        status_code: int,
        code: ErrorCode,
        detail: str,
        summary: str,
        rate_limit: Optional[RateLimitInfo] = None,
        meta: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.detail = detail
        self.summary = summary
        self.rate_limit = rate_limit
        self.meta = meta

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(message={self.message!r}, "
            f"status_code={self.status_code}, code={self.code.value!r})"
        )

    @classmethod
    def from_response(
        cls,
        status_code: int,
        body: Optional[Dict[str, Any]] = None,
        rate_limit: Optional[RateLimitInfo] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> "GoCardlessAPIError":
        """
        Build an error from a failed response.

        Args:
            status_code: HTTP status code
            body: Decoded error body ({summary, detail, status_code}, all optional)
            rate_limit: Rate limit snapshot from the response headers
            meta: Extra context, e.g. {"retry_after": 60}

        Returns:
            GoCardlessAPIError with a classified code
        """
        body = body if isinstance(body, dict) else {}
        summary = _text(body.get("summary"), DEFAULT_SUMMARY)
        detail = _text(body.get("detail"), DEFAULT_DETAIL)

        return cls(
            message=f"{summary}: {detail}",
            status_code=status_code,
            code=classify_error(status_code, body.get("summary")),
            detail=detail,
            summary=summary,
            rate_limit=rate_limit,
            meta=meta,
        )

    def get_retry_after(self) -> Optional[int]:
        """Seconds the API asked us to wait, for rate limit errors only."""
        if self.code != ErrorCode.RATE_LIMIT_EXCEEDED:
            return None
        return parse_retry_after(self.detail)


def read_error_body(response: Any) -> Dict[str, Any]:
    """Decode an error response body, falling back to {} when it is not a JSON object."""
    try:
        body = response.json()
    except Exception:
        return {}
    return body if isinstance(body, dict) else {}
