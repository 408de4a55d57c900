"""
Data models for GoCardless token endpoints.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, Dict


@dataclass
class TokenPair:
    """Response from POST /api/v2/token/new/."""
    access: str
    access_expires: float  # seconds
    refresh: str
    refresh_expires: float  # seconds

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPair":
        return cls(
            access=data["access"],
            access_expires=float(data["access_expires"]),
            refresh=data["refresh"],
            refresh_expires=float(data["refresh_expires"]),
        )


@dataclass
class TokenRefresh:
    """Response from POST /api/v2/token/refresh/."""
    access: str
    access_expires: float  # seconds

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenRefresh":
        return cls(
            access=data["access"],
            access_expires=float(data["access_expires"]),
        )


@dataclass(frozen=True)
class StoredTokens:
    """Credential pair with absolute expiry timestamps."""
    access_token: str
    access_expires_at: datetime
    refresh_token: str
    refresh_expires_at: datetime

    @classmethod
    def from_pair(cls, pair: TokenPair, now: datetime) -> "StoredTokens":
        return cls(
            access_token=pair.access,
            access_expires_at=now + timedelta(seconds=pair.access_expires),
            refresh_token=pair.refresh,
            refresh_expires_at=now + timedelta(seconds=pair.refresh_expires),
        )

    def with_access(self, refreshed: TokenRefresh, now: datetime) -> "StoredTokens":
        """Replace the access token, keeping the refresh token and its expiry."""
        return replace(
            self,
            access_token=refreshed.access,
            access_expires_at=now + timedelta(seconds=refreshed.access_expires),
        )
