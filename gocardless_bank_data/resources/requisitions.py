"""
Requisition operations (bank link sessions).
"""

from typing import Any, Dict, Optional

from gocardless_bank_data.http_client import HttpClient


class RequisitionsResource:
    """Create, list and delete requisitions."""

    def __init__(self, http: HttpClient):
        self._http = http

    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Dict[str, Any]:
        return await self._http.get(
            "api/v2/requisitions/",
            params={"limit": limit, "offset": offset},
        )

    async def get(self, requisition_id: str) -> Dict[str, Any]:
        return await self._http.get(f"api/v2/requisitions/{requisition_id}/")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a requisition.

        Args:
            data: {"redirect": ..., "institution_id": ..., "agreement": ..., ...}

        Returns:
            Requisition including the "link" the end user must visit
        """
        return await self._http.post("api/v2/requisitions/", data)

    async def delete(self, requisition_id: str) -> None:
        await self._http.delete(f"api/v2/requisitions/{requisition_id}/")
