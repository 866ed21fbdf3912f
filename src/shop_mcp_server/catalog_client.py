"""HTTP client for the upstream product catalog API."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx

from shop_mcp.errors import UpstreamError

logger = logging.getLogger(__name__)


class CatalogClient:
    """Thin async wrapper around the catalog REST endpoints.

    Every call performs exactly one request and either returns the decoded
    JSON body or raises :class:`UpstreamError`. Nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create a client bound to ``base_url``.

        Args:
            base_url: Catalog base address, e.g. ``http://localhost:3000``.
            timeout: Per-request timeout in seconds; ``None`` disables it.
            transport: Optional httpx transport, used to plug in test doubles.
        """
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release pooled connections."""
        await self._http.aclose()

    async def _request(
        self, method: str, path: str, *, body: dict[str, Any] | None = None
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = await self._http.request(method, url, json=body)
        except httpx.HTTPError as exc:
            raise UpstreamError(
                f"Request to {url} failed: {exc}",
                {"reason": "network", "url": url},
            ) from exc

        if not response.is_success:
            raise UpstreamError(
                f"{method} {url} returned HTTP {response.status_code}",
                {"reason": "status", "url": url, "status_code": response.status_code},
            )
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise UpstreamError(
                f"Malformed JSON from {url}: {exc}",
                {"reason": "decode", "url": url},
            ) from exc

    async def list_products(self) -> Any:
        """``GET /products``."""
        return await self._request("GET", "/products")

    async def get_product(self, product_id: str) -> Any:
        """``GET /products/{id}``."""
        return await self._request("GET", f"/products/{quote(product_id, safe='')}")

    async def add_product(self, record: dict[str, Any]) -> Any:
        """``POST /products`` with ``{name, price, description}``."""
        body = {
            "name": record["name"],
            "price": record["price"],
            "description": record["description"],
        }
        return await self._request("POST", "/products", body=body)
