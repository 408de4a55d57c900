"""
End-user agreement (EUA) operations.
"""

from typing import Any, Dict, Optional

from gocardless_bank_data.http_client import HttpClient


class AgreementsResource:
    """Create, list, accept and delete end-user agreements."""

    def __init__(self, http: HttpClient):
        self._http = http

    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Dict[str, Any]:
        """List agreements. Pagination is manual via limit/offset."""
        return await self._http.get(
            "api/v2/agreements/enduser/",
            params={"limit": limit, "offset": offset},
        )

    async def get(self, agreement_id: str) -> Dict[str, Any]:
        return await self._http.get(f"api/v2/agreements/enduser/{agreement_id}/")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._http.post("api/v2/agreements/enduser/", data)

    async def delete(self, agreement_id: str) -> None:
        await self._http.delete(f"api/v2/agreements/enduser/{agreement_id}/")

    async def accept(self, agreement_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Accept an agreement on behalf of the end user.

        Args:
            agreement_id: Agreement ID
            data: {"user_agent": ..., "ip_address": ...}
        """
        return await self._http.put(
            f"api/v2/agreements/enduser/{agreement_id}/accept/",
            data,
        )
