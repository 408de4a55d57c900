"""
Supported banking institutions.
"""

from typing import Any, Dict, List

from gocardless_bank_data.http_client import HttpClient


class InstitutionsResource:

    def __init__(self, http: HttpClient):
        self._http = http

    async def list(self, country: str) -> List[Dict[str, Any]]:
        """List institutions for an ISO 3166 two-letter country code."""
        return await self._http.get("api/v2/institutions/", params={"country": country})

    async def get(self, institution_id: str) -> Dict[str, Any]:
        return await self._http.get(f"api/v2/institutions/{institution_id}/")
