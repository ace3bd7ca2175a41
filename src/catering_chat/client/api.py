"""Async HTTP client for the conversation endpoints."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApiResult:
    """Decoded ``{ok, data | error}`` envelope."""

    ok: bool
    data: Any = None
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> ApiResult:
        try:
            body = response.json()
        except ValueError:
            return cls(ok=False, error_code="SERVER_ERROR")
        if not isinstance(body, dict):
            return cls(ok=False, error_code="SERVER_ERROR")
        if body.get("ok"):
            return cls(ok=True, data=body.get("data"))
        error = body.get("error") or {}
        return cls(ok=False, error_code=error.get("code"), error_message=error.get("message"))


class MarketplaceApi:
    """Thin wrapper over the REST endpoints.

    Transport failures surface as ``httpx.HTTPError``; backend refusals come
    back as ``ApiResult(ok=False)``.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._headers = {"Authorization": f"Bearer {token}"}

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> ApiResult:
        response = await self._client.request(method, url, headers=self._headers, **kwargs)
        result = ApiResult.from_response(response)
        if not result.ok:
            logger.debug("%s %s -> %s %s", method, url, response.status_code, result.error_code)
        return result

    async def list_messages(self, vendor_lead_id: str, *, limit: int = 50, offset: int = 0) -> ApiResult:
        return await self._request(
            "GET",
            "/api/messages",
            params={"vendorLeadId": vendor_lead_id, "limit": limit, "offset": offset},
        )

    async def send_message(self, vendor_lead_id: str, content: str) -> ApiResult:
        return await self._request(
            "POST", "/api/messages", json={"vendorLeadId": vendor_lead_id, "content": content},
        )

    async def mark_read(self, vendor_lead_id: str) -> ApiResult:
        return await self._request(
            "POST", "/api/messages/read", json={"vendorLeadId": vendor_lead_id},
        )

    async def create_quote(
        self,
        vendor_lead_id: str,
        total_price: float,
        *,
        price_per_person: float | None = None,
        message: str | None = None,
        valid_until: datetime | None = None,
    ) -> ApiResult:
        body: dict[str, Any] = {"vendorLeadId": vendor_lead_id, "totalPrice": total_price}
        if price_per_person is not None:
            body["pricePerPerson"] = price_per_person
        if message:
            body["message"] = message
        if valid_until is not None:
            body["validUntil"] = valid_until.isoformat()
        return await self._request("POST", "/api/quotes", json=body)

    async def update_quote_status(self, quote_id: str, status: str) -> ApiResult:
        return await self._request(
            "PATCH", f"/api/quotes/{quote_id}/status", json={"status": status},
        )

    async def counter_offer(
        self,
        quote_id: str,
        total_price: float,
        *,
        price_per_person: float | None = None,
        note: str | None = None,
    ) -> ApiResult:
        body: dict[str, Any] = {"totalPrice": total_price}
        if price_per_person is not None:
            body["pricePerPerson"] = price_per_person
        if note:
            body["note"] = note
        return await self._request("POST", f"/api/quotes/{quote_id}/counter-offer", json=body)
