"""
Remote backend client
Thin PostgREST (Supabase REST) wrapper: select with ordering, insert,
update by id and delete by id
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from core.logger import get_logger

logger = get_logger(__name__)

# (column, ascending)
OrderSpec = Sequence[Tuple[str, bool]]


class BackendError(Exception):
    """Backend unreachable or request rejected"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code}: {self.message}"
        return self.message


class RemoteBackend:
    """Client for the hosted database REST endpoint"""

    def __init__(
        self,
        url: Optional[str],
        anon_key: Optional[str],
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = (url or "").strip().rstrip("/")
        self.anon_key = (anon_key or "").strip()
        self.timeout = httpx.Timeout(timeout)
        # Injected by tests (httpx.MockTransport)
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        """Both the project URL and the public key are present"""
        return bool(self.url and self.anon_key)

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.anon_key}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }

    def _table_url(self, table: str) -> str:
        return f"{self.url}/rest/v1/{table}"

    @staticmethod
    def _order_param(order: OrderSpec) -> str:
        return ",".join(
            f"{column}.{'asc' if ascending else 'desc'}" for column, ascending in order
        )

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        if not self.is_configured:
            raise BackendError("Backend is not configured")

        url = self._table_url(table)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method, url, headers=self._headers(), params=params, json=payload
                )
        except httpx.TimeoutException as exc:
            raise BackendError(f"Request to {table} timed out: {exc}") from exc
        except httpx.RequestError as exc:
            raise BackendError(
                f"Network request exception on {table}: {str(exc) or exc.__class__.__name__}"
            ) from exc

        if response.status_code >= 300:
            raise BackendError(response.text[:200], status_code=response.status_code)
        return response

    async def select(self, table: str, order: OrderSpec = ()) -> List[Dict[str, Any]]:
        params = {"select": "*"}
        if order:
            params["order"] = self._order_param(order)

        response = await self._request("GET", table, params=params)
        try:
            data = response.json()
        except ValueError as exc:
            raise BackendError(f"Invalid JSON from {table}: {exc}") from exc

        if not isinstance(data, list):
            raise BackendError(f"Unexpected response shape from {table}")
        return data

    async def insert(self, table: str, row: Dict[str, Any]) -> None:
        await self._request("POST", table, payload=row)

    async def update(self, table: str, record_id: str, values: Dict[str, Any]) -> None:
        await self._request("PATCH", table, params={"id": f"eq.{record_id}"}, payload=values)

    async def delete(self, table: str, record_id: str) -> None:
        await self._request("DELETE", table, params={"id": f"eq.{record_id}"})
