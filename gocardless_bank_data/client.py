"""
GoCardless Bank Account Data API client.

Documentation: https://developer.gocardless.com/bank-account-data/overview

Usage:
    async with GoCardlessClient(secret_id="...", secret_key="...") as client:
        account = await client.accounts.get("account-id")
        transactions = await client.accounts.transactions(
            "account-id", date_from="2024-01-01", date_to="2024-12-31"
        )

SECURITY: secret_key and tokens must be stored securely and never logged.
"""

import logging
from typing import Any, Optional

import httpx

from gocardless_bank_data.config import ClientConfig
from gocardless_bank_data.http_client import HttpClient
from gocardless_bank_data.rate_limit import RateLimitInfo
from gocardless_bank_data.resources import (
    AccountsResource,
    AgreementsResource,
    InstitutionsResource,
    RequisitionsResource,
)
from gocardless_bank_data.token_manager import TokenManager

logger = logging.getLogger(__name__)


class GoCardlessClient:
    """
    Async client for the GoCardless Bank Account Data API v2.

    Owns one httpx.AsyncClient shared by token handling and API calls,
    unless an http_client is passed in, in which case closing it is
    left to the caller and its own timeouts apply.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        **overrides: Any,
    ):
        """
        Initialize the client.

        Args:
            config: Full client configuration
            http_client: Externally managed HTTP client
            **overrides: ClientConfig fields, used when config is omitted
                (e.g. secret_id=..., retry={"max_retries": 5})
        """
        if config is None:
            config = ClientConfig(**overrides)
        elif overrides:
            raise ValueError("Pass either config or keyword overrides, not both")

        self.config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout, connect=config.connect_timeout),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

        self.token_manager = TokenManager(
            config.secret_id,
            config.secret_key,
            config.base_url,
            http_client=self._client,
        )
        self.http = HttpClient(
            self.token_manager,
            config.base_url,
            timeout=config.timeout,
            retry_config=config.retry,
            request_interceptors=config.request_interceptors,
            response_interceptors=config.response_interceptors,
            on_rate_limit=config.on_rate_limit,
            http_client=self._client,
        )

        self.accounts = AccountsResource(self.http)
        self.agreements = AgreementsResource(self.http)
        self.institutions = InstitutionsResource(self.http)
        self.requisitions = RequisitionsResource(self.http)

        logger.debug(
            "GoCardless client initialized",
            extra={
                "base_url": config.base_url,
                "max_retries": config.retry.max_retries,
            },
        )

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def get_last_rate_limit_info(self) -> Optional[RateLimitInfo]:
        """Rate limit snapshot from the most recent API response."""
        return self.http.get_last_rate_limit_info()

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "GoCardlessClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def get_gocardless_client(
    secret_id: Optional[str] = None,
    secret_key: Optional[str] = None,
    base_url: Optional[str] = None,
) -> GoCardlessClient:
    """
    Factory function to create a GoCardlessClient.

    Args:
        secret_id: Override secret ID (default: GOCARDLESS_SECRET_ID)
        secret_key: Override secret key (default: GOCARDLESS_SECRET_KEY)
        base_url: Override API base URL

    Returns:
        Configured GoCardlessClient instance
    """
    return GoCardlessClient(
        secret_id=secret_id,
        secret_key=secret_key,
        base_url=base_url,
    )
