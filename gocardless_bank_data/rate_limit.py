"""
Rate limit telemetry parsed from GoCardless response headers.

The API reports two independent quotas:
- general: applies to every request
- account success: per access scope, only on successful account
  resource requests (details, balances, transactions)
"""

import re
from dataclasses import dataclass
from typing import Mapping, Optional, Union

import httpx

GENERAL_HEADERS = {
    "limit": "x-ratelimit-limit",
    "remaining": "x-ratelimit-remaining",
    "reset": "x-ratelimit-reset",
}

ACCOUNT_SUCCESS_HEADERS = {
    "limit": "x-ratelimit-account-success-limit",
    "remaining": "x-ratelimit-account-success-remaining",
    "reset": "x-ratelimit-account-success-reset",
}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class RateLimitWindow:
    """Counters for one quota. Fields are None when the header was absent."""
    limit: Optional[int] = None
    remaining: Optional[int] = None
    reset: Optional[int] = None  # seconds left in the current window

    @property
    def is_empty(self) -> bool:
        return self.limit is None and self.remaining is None and self.reset is None


@dataclass(frozen=True)
class RateLimitInfo:
    """Snapshot of the quota headers from a single response."""
    general: Optional[RateLimitWindow] = None
    account_success: Optional[RateLimitWindow] = None


def _parse_int(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))


def _parse_window(headers: httpx.Headers, names: Mapping[str, str]) -> Optional[RateLimitWindow]:
    window = RateLimitWindow(
        **{field: _parse_int(headers.get(header)) for field, header in names.items()}
    )
    return None if window.is_empty else window


def parse_rate_limit_headers(
    headers: Union[httpx.Headers, Mapping[str, str]],
) -> Optional[RateLimitInfo]:
    """
    Extract rate limit counters from response headers.

    Header names are matched case-insensitively. A value that does not
    start with an integer is treated as absent.

    Returns:
        RateLimitInfo, or None when no rate limit header was present
    """
    if not isinstance(headers, httpx.Headers):
        headers = httpx.Headers(headers)

    general = _parse_window(headers, GENERAL_HEADERS)
    account_success = _parse_window(headers, ACCOUNT_SUCCESS_HEADERS)

    if general is None and account_success is None:
        return None

    return RateLimitInfo(general=general, account_success=account_success)
