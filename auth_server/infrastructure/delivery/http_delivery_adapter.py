from __future__ import annotations

import logging
from typing import Optional

import httpx

from auth_server.domain.errors import DeliveryFailed
from auth_server.domain.ports.delivery_port import DeliveryPort

logger = logging.getLogger("auth_server.infrastructure.delivery.http_delivery_adapter")


class HttpDeliveryAdapter(DeliveryPort):
    """Hands verification codes to an HTTP gateway that does the SMS/e-mail."""

    def __init__(
        self,
        base_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/send",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def deliver(self, *, destination: str, code: str, purpose: str) -> None:
        url = f"{self._base_url}{self._send_path}"
        payload = {"destination": destination, "code": code, "purpose": purpose}

        try:
            resp = await self._client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("delivery gateway unreachable", extra={"purpose": purpose})
            raise DeliveryFailed(f"delivery HTTP error: {e}") from e
        if not (200 <= resp.status_code < 300):
            text = resp.text[:200]
            logger.warning(
                "delivery gateway refused code",
                extra={"purpose": purpose, "status": resp.status_code},
            )
            raise DeliveryFailed(
                f"delivery gateway responded {resp.status_code}: {text}"
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
