"""
Authenticated HTTP executor for the GoCardless Bank Account Data API.

This client handles:
- Bearer authentication via TokenManager
- Request / response interceptor chains
- Retry with linear or exponential backoff, honoring "try again in N seconds"
- Rate limit header capture
- Conversion of error responses to GoCardlessAPIError

Network failures (httpx.RequestError, including timeouts) are raised
unchanged and never retried.
"""

import inspect
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import httpx

from gocardless_bank_data.backoff import calculate_backoff, sleep
from gocardless_bank_data.config import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    RateLimitCallback,
    RequestConfig,
    RequestInterceptor,
    ResponseInterceptor,
    RetryConfig,
)
from gocardless_bank_data.exceptions import (
    GoCardlessAPIError,
    parse_retry_after,
    read_error_body,
)
from gocardless_bank_data.rate_limit import RateLimitInfo, parse_rate_limit_headers
from gocardless_bank_data.token_manager import TokenManager

logger = logging.getLogger(__name__)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _clean_params(params: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    if not params:
        return None
    return {key: value for key, value in params.items() if value is not None}


class HttpClient:
    """
    Async executor for authenticated GoCardless API calls.

    The last rate limit snapshot is per instance and reflects the most
    recent response, successful or not.
    """

    def __init__(
        self,
        token_manager: TokenManager,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        retry_config: Optional[Union[RetryConfig, Mapping[str, Any]]] = None,
        request_interceptors: Optional[Iterable[RequestInterceptor]] = None,
        response_interceptors: Optional[Iterable[ResponseInterceptor]] = None,
        on_rate_limit: Optional[RateLimitCallback] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
    ):
        """
        Initialize the executor.

        Args:
            token_manager: Source of access tokens
            base_url: API base URL
            timeout: Request timeout in seconds
            retry_config: RetryConfig or partial mapping of its fields
            request_interceptors: Run in order on every outgoing request
            response_interceptors: Run in order on every response
            on_rate_limit: Called with each non-empty rate limit snapshot;
                exceptions it raises are logged, not propagated
            http_client: Shared HTTP client (a private one is created if omitted)
            connect_timeout: Connection timeout in seconds

        timeout and connect_timeout only configure the private client. A
        supplied http_client keeps its own timeouts.
        """
        if isinstance(retry_config, Mapping):
            retry_config = RetryConfig.from_dict(retry_config)

        self.token_manager = token_manager
        self.base_url = base_url.rstrip("/")
        self.retry_config = retry_config or RetryConfig()
        self.request_interceptors: List[RequestInterceptor] = list(request_interceptors or [])
        self.response_interceptors: List[ResponseInterceptor] = list(response_interceptors or [])
        self.on_rate_limit = on_rate_limit
        self._last_rate_limit: Optional[RateLimitInfo] = None

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    async def close(self) -> None:
        """Close the HTTP client if this executor created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._request_with_retry("GET", path, params=params)

    async def post(
        self,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        return await self._request_with_retry("POST", path, body=body, params=params)

    async def put(
        self,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        return await self._request_with_retry("PUT", path, body=body, params=params)

    async def delete(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._request_with_retry("DELETE", path, params=params)

    def get_last_rate_limit_info(self) -> Optional[RateLimitInfo]:
        """Rate limit snapshot from the most recent response, or None."""
        return self._last_rate_limit

    def _process_rate_limit_headers(self, headers: httpx.Headers) -> Optional[RateLimitInfo]:
        rate_limit = parse_rate_limit_headers(headers)
        self._last_rate_limit = rate_limit
        return rate_limit

    def _notify_rate_limit(self, rate_limit: Optional[RateLimitInfo]) -> None:
        if rate_limit is None or self.on_rate_limit is None:
            return
        try:
            self.on_rate_limit(rate_limit)
        except Exception:
            logger.exception("Rate limit callback failed")

    async def _prepare_request(
        self,
        method: str,
        path: str,
        body: Any,
        params: Optional[Mapping[str, Any]],
    ) -> RequestConfig:
        token = await self.token_manager.get_access_token()

        config = RequestConfig(
            url=f"{self.base_url}/{path.lstrip('/')}",
            method=method,
            headers={"Authorization": f"Bearer {token}"},
            body=body,
            params=dict(params) if params else None,
        )

        for interceptor in self.request_interceptors:
            config = await _resolve(interceptor(config))

        return config

    async def _send(self, config: RequestConfig) -> httpx.Response:
        sent = await self._client.request(
            method=config.method,
            url=config.url,
            headers=config.headers,
            json=config.body,
            params=_clean_params(config.params),
        )

        response = sent
        for interceptor in self.response_interceptors:
            response = await _resolve(interceptor(response))

        # Interceptors may return a response built without a request
        if not response.is_success:
            raise httpx.HTTPStatusError(
                f"{response.status_code} error for {config.method} {config.url}",
                request=sent.request,
                response=response,
            )
        return response

    def _to_api_error(self, response: httpx.Response) -> Tuple[GoCardlessAPIError, Optional[int]]:
        body = read_error_body(response)
        rate_limit = self._process_rate_limit_headers(response.headers)

        retry_after = None
        if response.status_code == 429:
            retry_after = parse_retry_after(body.get("detail"))

        error = GoCardlessAPIError.from_response(
            response.status_code,
            body,
            rate_limit=rate_limit,
            meta={"retry_after": retry_after} if retry_after is not None else None,
        )
        self._notify_rate_limit(rate_limit)
        return error, retry_after

    def _retry_delay_ms(self, attempt: int, status_code: int, retry_after: Optional[int]) -> float:
        config = self.retry_config
        if config.respect_retry_after and retry_after is not None and status_code == 429:
            return min(retry_after * 1000, config.max_delay_ms)

        return calculate_backoff(
            attempt + 1,
            config.backoff,
            config.initial_delay_ms,
            config.max_delay_ms,
        )

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    async def _request_with_retry(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Execute a request, retrying retryable error statuses.

        Returns:
            Decoded JSON body

        Raises:
            GoCardlessAPIError: On error responses that are not retried or
                that are still failing after max_retries
            httpx.RequestError: On network failures
        """
        max_retries = self.retry_config.max_retries
        last_error: Optional[GoCardlessAPIError] = None
        attempt = 0

        while attempt <= max_retries:
            config = await self._prepare_request(method, path, body, params)

            try:
                response = await self._send(config)
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                last_error, retry_after = self._to_api_error(e.response)

                if attempt < max_retries and status_code in self.retry_config.retryable_status_codes:
                    delay_ms = self._retry_delay_ms(attempt, status_code, retry_after)
                    logger.warning(
                        "GoCardless API request failed, retrying",
                        extra={
                            "method": method,
                            "endpoint": path,
                            "status_code": status_code,
                            "attempt": attempt + 1,
                            "max_retries": max_retries,
                            "delay_ms": delay_ms,
                        },
                    )
                    await sleep(delay_ms)
                    attempt += 1
                    continue

                logger.error(
                    "GoCardless API error",
                    extra={
                        "method": method,
                        "endpoint": path,
                        "status_code": status_code,
                        "code": last_error.code.value,
                        "attempt": attempt + 1,
                    },
                )
                raise last_error from e

            self._notify_rate_limit(self._process_rate_limit_headers(response.headers))
            return self._decode(response)

        raise last_error
