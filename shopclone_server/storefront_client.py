"""ShopClone storefront backend API client."""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from .config import Settings
from .exceptions import StorefrontAPIError, StorefrontConnectionError
from .models import OrderConfirmation, OrderRequest, Product, ProductDraft

logger = logging.getLogger(__name__)


class StorefrontClient:
    """Client for interacting with the storefront REST backend."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the storefront client.

        Args:
            settings: Client settings (default: loaded from the environment)
            transport: Optional httpx transport, used to stub the backend
        """
        self.settings = settings or Settings.from_env()
        self.client = httpx.AsyncClient(
            base_url=self.settings.backend_url,
            timeout=self.settings.timeout,
            follow_redirects=True,
            transport=transport,
            headers={
                "Accept": "application/json",
            },
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and turn failures into ShopClone errors."""
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise StorefrontConnectionError(str(e)) from e

        logger.info(f"{method} {url} response: status={response.status_code}")

        if not response.is_success:
            detail = None
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("detail"):
                    detail = str(body["detail"])
            except ValueError:
                logger.debug(f"Non-JSON error body: {response.text[:200]}")
            raise StorefrontAPIError(response.status_code, detail)

        return response

    async def list_products(self, q: str = "", category: str = "") -> list[Product]:
        """
        Fetch the product list for a search query and category.

        Empty filters are left out of the query string.

        Args:
            q: Search text
            category: Category name, empty for all categories

        Returns:
            Products in the order the backend returned them
        """
        logger.info(f"=== LIST PRODUCTS: q='{q}', category='{category}' ===")

        params = {}
        if q:
            params["q"] = q
        if category:
            params["category"] = category

        response = await self._request("GET", "/api/products", params=params)

        try:
            data = response.json()
            products = [Product.model_validate(item) for item in data]
        except (ValueError, TypeError, PydanticValidationError) as e:
            logger.error(f"Could not parse product list: {e}")
            raise StorefrontConnectionError("Unreadable product list") from e

        logger.info(f"Found {len(products)} products")
        return products

    async def seed_products(self) -> None:
        """Ask the backend to populate demo products."""
        logger.info("=== SEED PRODUCTS ===")
        await self._request("POST", "/api/products/seed")

    async def create_product(self, draft: ProductDraft) -> Optional[Product]:
        """
        Create a new product.

        Args:
            draft: Product fields; blank optional fields are not sent

        Returns:
            The created product, or None if the backend sent no usable body
        """
        logger.info(f"=== CREATE PRODUCT: title='{draft.title}' ===")

        response = await self._request(
            "POST",
            "/api/products",
            json=draft.model_dump(mode="json", exclude_none=True),
        )

        try:
            return Product.model_validate(response.json())
        except (ValueError, PydanticValidationError):
            logger.warning("Created product missing from response body")
            return None

    async def place_order(self, order: OrderRequest) -> OrderConfirmation:
        """
        Submit an order.

        Args:
            order: Order snapshot built from the cart

        Returns:
            Confirmation carrying the backend order ID
        """
        logger.info(f"=== PLACE ORDER: items={len(order.items)} ===")

        response = await self._request(
            "POST",
            "/api/orders",
            json=order.model_dump(mode="json", exclude_none=True),
        )

        try:
            confirmation = OrderConfirmation.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Could not parse order confirmation: {e}")
            raise StorefrontConnectionError("Unreadable order confirmation") from e

        logger.info(f"Order placed: order_id={confirmation.order_id}")
        return confirmation

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
