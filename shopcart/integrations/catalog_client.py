"""Read-only client for the remote product catalog."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from shopcart.core.constants import CATALOG_TIMEOUT_SECONDS, DEFAULT_CATALOG_URL
from shopcart.core.exceptions import CatalogError, ValidationError
from shopcart.domain.models.product import Product, parse_product

logger = logging.getLogger(__name__)


class CatalogClient:
    """Fetches product records the cart can consume as ``add_item`` input."""

    def __init__(self, base_url: str = DEFAULT_CATALOG_URL, timeout: float = CATALOG_TIMEOUT_SECONDS) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def _request_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Optional[Any]:
        url = f"{self._base_url}{path}"
        logger.info("CatalogClient GET %s", url)
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(url, params=params) as resp:
                    if resp.status == 404:
                        return None
                    if resp.status != 200:
                        raise CatalogError(f"Catalog returned HTTP {resp.status} for {path}")
                    return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise CatalogError(f"Catalog request failed: {exc}") from exc
        except ValueError as exc:
            raise CatalogError(f"Catalog returned invalid JSON for {path}") from exc

    @staticmethod
    def _parse_products(data: Any) -> list[Product]:
        if not isinstance(data, list):
            raise CatalogError("Catalog product listing is not a list")
        products = []
        for raw in data:
            try:
                products.append(parse_product(raw))
            except ValidationError as exc:
                logger.warning("Skipping malformed catalog record: %s", exc.message)
        return products

    async def fetch_products(self, category: str | None = None) -> list[Product]:
        path = f"/products/category/{category}" if category else "/products"
        data = await self._request_json(path)
        if data is None:
            return []
        return self._parse_products(data)

    async def fetch_product(self, product_id: int | str) -> Product | None:
        data = await self._request_json(f"/products/{product_id}")
        if not data:
            return None
        try:
            return parse_product(data)
        except ValidationError as exc:
            logger.warning("Catalog record %s is malformed: %s", product_id, exc.message)
            return None

    async def fetch_categories(self) -> list[str]:
        data = await self._request_json("/products/categories")
        if not isinstance(data, list):
            return []
        return [str(category) for category in data if category]
