"""
Access token lifecycle for the GoCardless Bank Account Data API.

Handles:
- Minting a token pair from secret_id / secret_key
- Caching the pair with absolute expiry timestamps
- Refreshing the access token shortly before it expires
- Re-minting once the refresh token itself has expired
- Coalescing concurrent callers onto a single in-flight mint or refresh

SECURITY: secrets and tokens are never logged.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import httpx

from gocardless_bank_data.exceptions import GoCardlessAPIError, read_error_body
from gocardless_bank_data.models import StoredTokens, TokenPair, TokenRefresh
from gocardless_bank_data.rate_limit import parse_rate_limit_headers

logger = logging.getLogger(__name__)

TOKEN_NEW_PATH = "/api/v2/token/new/"
TOKEN_REFRESH_PATH = "/api/v2/token/refresh/"
TOKEN_TIMEOUT_SECONDS = 30.0

# Refresh this long before the access token actually expires
REFRESH_MARGIN = timedelta(seconds=60)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenManager:
    """
    Owns the access/refresh token pair for one set of secrets.

    At most one mint or refresh runs at a time. Callers arriving while
    one is in flight await the same task and receive the same token or
    the same error.
    """

    def __init__(
        self,
        secret_id: str,
        secret_key: str,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize token manager.

        Args:
            secret_id: GoCardless secret ID
            secret_key: GoCardless secret key
            base_url: API base URL
            http_client: Shared HTTP client (a private one is created if omitted)
        """
        if not secret_id:
            raise ValueError("secret_id is required")
        if not secret_key:
            raise ValueError("secret_key is required")

        self._secret_id = secret_id
        self._secret_key = secret_key
        self.base_url = base_url.rstrip("/")

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(TOKEN_TIMEOUT_SECONDS),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

        self._tokens: Optional[StoredTokens] = None
        self._in_flight: Optional[asyncio.Task] = None

    async def close(self) -> None:
        """Close the HTTP client if this manager created it."""
        if self._owns_client:
            await self._client.aclose()

    @property
    def tokens(self) -> Optional[StoredTokens]:
        return self._tokens

    async def get_access_token(self) -> str:
        """
        Return a valid access token, minting or refreshing as needed.

        Raises:
            GoCardlessAPIError: If the token endpoint rejects the request
            httpx.RequestError: On network failures
        """
        if self._tokens is None:
            return await self._generate_token_pair()

        now = _utcnow()

        if now >= self._tokens.refresh_expires_at:
            return await self._generate_token_pair()

        if now >= self._tokens.access_expires_at - REFRESH_MARGIN:
            return await self._refresh_access_token()

        logger.debug("Using cached GoCardless access token")
        return self._tokens.access_token

    def clear(self) -> None:
        """
        Forget stored tokens and any in-flight operation.

        A mint or refresh already on the wire is not cancelled; callers
        already awaiting it still get its result, but it is not stored.
        """
        self._tokens = None
        self._in_flight = None

    async def _generate_token_pair(self) -> str:
        if self._in_flight is not None:
            return await asyncio.shield(self._in_flight)

        self._in_flight = asyncio.ensure_future(self._mint())
        return await asyncio.shield(self._in_flight)

    async def _refresh_access_token(self) -> str:
        if self._in_flight is not None:
            return await asyncio.shield(self._in_flight)

        if self._tokens is None:
            return await self._generate_token_pair()

        self._in_flight = asyncio.ensure_future(self._refresh(self._tokens))
        return await asyncio.shield(self._in_flight)

    async def _mint(self) -> str:
        try:
            data = await self._post(
                TOKEN_NEW_PATH,
                {"secret_id": self._secret_id, "secret_key": self._secret_key},
            )
            pair = TokenPair.from_dict(data)

            if self._owns_in_flight():
                self._tokens = StoredTokens.from_pair(pair, _utcnow())

            logger.info(
                "GoCardless token pair generated",
                extra={
                    "access_expires_seconds": pair.access_expires,
                    "refresh_expires_seconds": pair.refresh_expires,
                },
            )
            return pair.access
        finally:
            self._release_in_flight()

    async def _refresh(self, tokens: StoredTokens) -> str:
        try:
            try:
                data = await self._post(TOKEN_REFRESH_PATH, {"refresh": tokens.refresh_token})
            except GoCardlessAPIError as e:
                if e.status_code != 401:
                    raise
                logger.warning(
                    "GoCardless refresh token rejected, generating new token pair",
                    extra={"status_code": e.status_code, "code": e.code.value},
                )
                # Release before minting: the mint installs its own in-flight task
                self._release_in_flight()
                return await self._generate_token_pair()

            refreshed = TokenRefresh.from_dict(data)

            if self._owns_in_flight():
                self._tokens = tokens.with_access(refreshed, _utcnow())

            logger.info(
                "GoCardless access token refreshed",
                extra={"access_expires_seconds": refreshed.access_expires},
            )
            return refreshed.access
        finally:
            self._release_in_flight()

    def _owns_in_flight(self) -> bool:
        return self._in_flight is not None and self._in_flight is asyncio.current_task()

    def _release_in_flight(self) -> None:
        if self._owns_in_flight():
            self._in_flight = None

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST to a token endpoint, converting error statuses to GoCardlessAPIError."""
        try:
            response = await self._client.post(
                f"{self.base_url}{path}",
                json=payload,
                timeout=TOKEN_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "GoCardless token request failed",
                extra={"status_code": e.response.status_code, "endpoint": path},
            )
            raise GoCardlessAPIError.from_response(
                e.response.status_code,
                read_error_body(e.response),
                rate_limit=parse_rate_limit_headers(e.response.headers),
            ) from e

        return response.json()
