"""Storefront controller that owns catalog, cart and form state."""

import logging
import webbrowser
from typing import Optional

from .cart import CartEngine
from .catalog import CatalogLoader
from .config import Settings
from .exceptions import (
    CheckoutInProgressError,
    EmptyCartError,
    ProductNotFoundError,
    ShopCloneError,
    StorefrontAPIError,
    StorefrontConnectionError,
    SubmissionInProgressError,
    ValidationError,
)
from .models import CartLineItem, OrderConfirmation, Product
from .product_form import ProductForm
from .storefront_client import StorefrontClient

logger = logging.getLogger(__name__)


class Storefront:
    """
    Single owner of all storefront state.

    Each public action catches its own failures and reports them through
    `message` (or the catalog/form `error`), so callers always get back an
    interactive state. The exception behind the latest failed action is kept
    in `last_error`.
    """

    def __init__(self, client: Optional[StorefrontClient] = None, settings: Optional[Settings] = None) -> None:
        self.client = client or StorefrontClient(settings)
        self.catalog = CatalogLoader(self.client)
        self.cart = CartEngine()
        self.form = ProductForm()
        self.message: Optional[str] = None
        self.last_error: Optional[ShopCloneError] = None
        self.started = False

    async def start(self) -> None:
        """Run the initial catalog load with empty filters."""
        if not self.started:
            self.started = True
            await self.catalog.load()

    async def search(self, query: str) -> tuple[Product, ...]:
        await self.catalog.set_filters(query=query)
        return self.catalog.products

    async def filter_category(self, category: str) -> tuple[Product, ...]:
        await self.catalog.set_filters(category=category)
        return self.catalog.products

    async def seed_demo_data(self) -> bool:
        return await self.catalog.seed()

    def resolve(self, ref: str) -> Product:
        """
        Find a product in the current catalog by id or title.

        Raises:
            ProductNotFoundError: If nothing matches
        """
        product = self.catalog.find(ref)
        if product is None:
            raise ProductNotFoundError(f"Product not found: {ref}")
        return product

    def add_to_cart(self, product_ref: str) -> Optional[CartLineItem]:
        """
        Add one unit of a catalog product to the cart.

        Returns:
            The updated cart line, or None if the product could not be added
        """
        try:
            product = self.resolve(product_ref)
            line = self.cart.add(product)
        except (ProductNotFoundError, CheckoutInProgressError) as e:
            self.last_error = e
            self.message = str(e)
            return None

        self.last_error = None
        self.message = f"Added {line.title} to cart (quantity: {line.quantity})"
        return line

    async def checkout(self) -> Optional[OrderConfirmation]:
        """
        Place an order for the current cart.

        Returns:
            Confirmation on success, None otherwise
        """
        try:
            confirmation = await self.cart.checkout(self.client)
        except StorefrontAPIError as e:
            logger.error(f"Checkout rejected: {e}")
            self.last_error = e
            self.message = e.detail or "Order failed"
            return None
        except StorefrontConnectionError as e:
            logger.error(f"Checkout error: {e}", exc_info=True)
            self.last_error = e
            self.message = "Checkout failed"
            return None
        except (EmptyCartError, CheckoutInProgressError) as e:
            self.last_error = e
            self.message = str(e)
            return None

        self.last_error = None
        self.message = f"Order placed! ID: {confirmation.order_id}"
        return confirmation

    async def submit_product(self, **fields: Optional[str]) -> Optional[Product]:
        """
        Fill the add-product form with `fields` and submit it.

        A submission already in flight rejects the new one before any field
        is touched. The catalog reloads after a successful submission.

        Returns:
            The created product, or None on failure
        """
        if self.form.saving:
            self.last_error = SubmissionInProgressError("A product submission is already in progress")
            self.message = str(self.last_error)
            logger.warning(f"Product submission rejected: {self.message}")
            return None

        try:
            if fields:
                self.form.update(**fields)
            created = await self.form.submit(self.client)
        except ShopCloneError as e:
            logger.warning(f"Product submission failed: {e}")
            self.last_error = e
            self.message = self.form.error or str(e)
            return None
        except ValueError as e:
            self.form.error = str(e)
            self.last_error = ValidationError(str(e))
            self.message = str(e)
            return None

        self.last_error = None
        self.message = f"Product added: {created.title}"
        await self.catalog.load()
        return created

    def buy_now(self, product_ref: str, open_browser: bool = False) -> Optional[str]:
        """
        Return the external purchase URL of a product.

        Args:
            product_ref: Product id or title
            open_browser: Also open the URL in a new browser tab

        Returns:
            The buy URL, or None if the product has none
        """
        try:
            product = self.resolve(product_ref)
        except ProductNotFoundError as e:
            self.message = str(e)
            return None

        if not product.buy_url:
            return None
        if open_browser:
            webbrowser.open_new_tab(product.buy_url)
        return product.buy_url

    async def aclose(self) -> None:
        await self.client.aclose()
