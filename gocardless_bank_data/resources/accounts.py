"""
Account metadata, balances, details and transactions.
"""

from typing import Any, Dict, Optional

from gocardless_bank_data.http_client import HttpClient


class AccountsResource:
    """Read-only account operations."""

    def __init__(self, http: HttpClient):
        self._http = http

    async def get(self, account_id: str) -> Dict[str, Any]:
        return await self._http.get(f"api/v2/accounts/{account_id}/")

    async def balances(self, account_id: str) -> Dict[str, Any]:
        return await self._http.get(f"api/v2/accounts/{account_id}/balances/")

    async def details(self, account_id: str) -> Dict[str, Any]:
        return await self._http.get(f"api/v2/accounts/{account_id}/details/")

    async def transactions(
        self,
        account_id: str,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get account transactions.

        Args:
            account_id: Account ID
            date_from: ISO date (YYYY-MM-DD), inclusive
            date_to: ISO date (YYYY-MM-DD), inclusive

        Returns:
            {"transactions": {"booked": [...], "pending": [...]}}
        """
        return await self._http.get(
            f"api/v2/accounts/{account_id}/transactions/",
            params={"date_from": date_from, "date_to": date_to},
        )
