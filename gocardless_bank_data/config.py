"""
Configuration for the GoCardless Bank Account Data client.

Secrets may be passed explicitly or read from the environment:
- GOCARDLESS_SECRET_ID
- GOCARDLESS_SECRET_KEY
- GOCARDLESS_BASE_URL (optional)

SECURITY: secret_key is never logged or included in repr output.
"""

import os
from dataclasses import dataclass, field, fields
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import httpx

from gocardless_bank_data.backoff import BackoffStrategy
from gocardless_bank_data.rate_limit import RateLimitInfo

DEFAULT_BASE_URL = "https://bankaccountdata.gocardless.com"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0

DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRYABLE_STATUS_CODES = (429,)
DEFAULT_BACKOFF = BackoffStrategy.LINEAR
DEFAULT_INITIAL_DELAY_MS = 1000
DEFAULT_MAX_DELAY_MS = 30000


@dataclass
class RequestConfig:
    """Outgoing request as seen by request interceptors."""
    url: str
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    params: Optional[Dict[str, Any]] = None


RequestInterceptor = Callable[[RequestConfig], Union[RequestConfig, Awaitable[RequestConfig]]]
ResponseInterceptor = Callable[[httpx.Response], Union[httpx.Response, Awaitable[httpx.Response]]]
RateLimitCallback = Callable[[RateLimitInfo], None]


@dataclass
class RetryConfig:
    """Retry policy for API requests. Delays are in milliseconds."""
    max_retries: int = DEFAULT_MAX_RETRIES
    retryable_status_codes: Tuple[int, ...] = DEFAULT_RETRYABLE_STATUS_CODES
    backoff: BackoffStrategy = DEFAULT_BACKOFF
    initial_delay_ms: float = DEFAULT_INITIAL_DELAY_MS
    max_delay_ms: float = DEFAULT_MAX_DELAY_MS
    respect_retry_after: bool = True

    def __post_init__(self) -> None:
        self.backoff = BackoffStrategy(self.backoff)
        self.retryable_status_codes = tuple(self.retryable_status_codes)

        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must be >= 0")
        if self.max_delay_ms < 0:
            raise ValueError("max_delay_ms must be >= 0")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]] = None) -> "RetryConfig":
        """
        Build a RetryConfig from a partial mapping.

        Missing or None values fall back to the defaults.
        """
        data = data or {}
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown retry options: {', '.join(sorted(unknown))}")
        return cls(**{k: v for k, v in data.items() if v is not None})


@dataclass
class ClientConfig:
    """Everything needed to build a GoCardlessClient."""
    secret_id: Optional[str] = None
    secret_key: Optional[str] = field(default=None, repr=False)
    base_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    retry: RetryConfig = field(default_factory=RetryConfig)
    request_interceptors: Sequence[RequestInterceptor] = field(default_factory=list)
    response_interceptors: Sequence[ResponseInterceptor] = field(default_factory=list)
    on_rate_limit: Optional[RateLimitCallback] = None

    def __post_init__(self) -> None:
        self.secret_id = self.secret_id or os.getenv("GOCARDLESS_SECRET_ID")
        self.secret_key = self.secret_key or os.getenv("GOCARDLESS_SECRET_KEY")
        self.base_url = (
            self.base_url or os.getenv("GOCARDLESS_BASE_URL") or DEFAULT_BASE_URL
        ).rstrip("/")

        if isinstance(self.retry, Mapping):
            self.retry = RetryConfig.from_dict(self.retry)
        self.request_interceptors = list(self.request_interceptors)
        self.response_interceptors = list(self.response_interceptors)

        if not self.secret_id or not self.secret_key:
            raise ValueError(
                "GoCardless secrets are required. Set GOCARDLESS_SECRET_ID and "
                "GOCARDLESS_SECRET_KEY environment variables or pass secret_id "
                "and secret_key parameters."
            )
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
