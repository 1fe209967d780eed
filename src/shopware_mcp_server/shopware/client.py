"""
Shopware Admin API Client

Thin asynchronous client for the Shopware Admin API search endpoints used by
the order and product-number tools.

Authentication is injected: the client asks a token provider for a bearer
token before every request and never talks to the OAuth endpoint itself.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol

import httpx

from ..config import settings

logger = logging.getLogger("mcp.shopware")


TokenProvider = Callable[[], Awaitable[str]]


class ShopwareError(RuntimeError):
    """Raised when the Shopware Admin API cannot be reached or answers badly."""


class ShopwareBackend(Protocol):
    """
    The part of the Admin API the tools depend on.
    """

    async def search_products_by_number(self, product_number: str) -> Dict[str, Any]:
        ...

    async def search_orders(self, criteria: Dict[str, Any]) -> Dict[str, Any]:
        ...


async def settings_token_provider() -> str:
    """Return the pre-issued access token from settings."""
    return settings.shopware_access_token.get_secret_value()


class ShopwareClient:
    """
    Admin API client. Stateless apart from its configuration.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Parameters
        ----------
        base_url : Optional[str]
            Admin API root, e.g. "https://shop.example.com/api".
            Defaults to settings.shopware_api_url.

        token_provider : Optional[TokenProvider]
            Coroutine function returning a bearer token.
            Defaults to the static token from settings.

        timeout : Optional[float]
            HTTP timeout per request. Defaults to settings.shopware_timeout.

        transport : Optional[httpx.AsyncBaseTransport]
            Custom transport, mainly for tests.
        """
        self.base_url = (base_url or settings.shopware_api_url).rstrip("/")
        self._token_provider = token_provider or settings_token_provider
        self.timeout = timeout if timeout is not None else settings.shopware_timeout
        self._transport = transport

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.base_url:
            raise ShopwareError("Shopware API URL is not configured.")

        token = await self._token_provider()
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(path, json=payload, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(
                "Shopware request %s failed (%s): %s",
                path,
                type(exc).__name__,
                exc,
            )
            raise ShopwareError(f"Shopware request failed: {type(exc).__name__}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise ShopwareError("Shopware response is not valid JSON.") from exc

        if not isinstance(data, dict):
            raise ShopwareError("Shopware response must be a JSON object.")
        return data

    async def search_products_by_number(self, product_number: str) -> Dict[str, Any]:
        """
        Find product(s) by exact product number (SKU).
        """
        criteria = {
            "filter": [
                {"type": "equals", "field": "productNumber", "value": product_number}
            ],
        }
        return await self._post("/search/product", criteria)

    async def search_orders(self, criteria: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run an order search with a full Shopware criteria object.
        """
        return await self._post("/search/order", criteria)
