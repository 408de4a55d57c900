"""
GoCardless Bank Account Data (open banking) API client.

Provides authenticated, retrying access to the Bank Account Data API v2
with automatic token management and rate limit telemetry.
"""

from gocardless_bank_data.backoff import BackoffStrategy, calculate_backoff, sleep
from gocardless_bank_data.client import GoCardlessClient, get_gocardless_client
from gocardless_bank_data.config import (
    ClientConfig,
    RateLimitCallback,
    RequestConfig,
    RequestInterceptor,
    ResponseInterceptor,
    RetryConfig,
)
from gocardless_bank_data.exceptions import ErrorCode, GoCardlessAPIError
from gocardless_bank_data.http_client import HttpClient
from gocardless_bank_data.rate_limit import (
    RateLimitInfo,
    RateLimitWindow,
    parse_rate_limit_headers,
)
from gocardless_bank_data.token_manager import TokenManager

__all__ = [
    # Client
    "GoCardlessClient",
    "get_gocardless_client",
    "HttpClient",
    "TokenManager",
    # Configuration
    "ClientConfig",
    "RetryConfig",
    "RequestConfig",
    "RequestInterceptor",
    "ResponseInterceptor",
    "RateLimitCallback",
    "BackoffStrategy",
    # Exceptions
    "GoCardlessAPIError",
    "ErrorCode",
    # Rate limits
    "RateLimitInfo",
    "RateLimitWindow",
    "parse_rate_limit_headers",
    # Utilities
    "calculate_backoff",
    "sleep",
]
