"""Product catalog loading and filtering state."""

import logging
from typing import TYPE_CHECKING, Optional

from .exceptions import ShopCloneError
from .models import Product

if TYPE_CHECKING:
    from .storefront_client import StorefrontClient

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load products"
SEED_ERROR = "Failed to seed demo products"


class CatalogLoader:
    """
    Holds the product list for the current search query and category.

    Every filter change starts a fresh load. Loads are numbered, and a
    response that arrives after a newer load has started is dropped, so
    the list always reflects the latest filters.
    """

    def __init__(self, client: "StorefrontClient") -> None:
        self.client = client
        self.query = ""
        self.category = ""
        self.loading = False
        self.products: tuple[Product, ...] = ()
        self.error: Optional[str] = None
        self._generation = 0

    @property
    def needs_seed(self) -> bool:
        """True when the catalog is settled and empty."""
        return not self.loading and self.error is None and not self.products

    async def set_filters(self, query: Optional[str] = None, category: Optional[str] = None) -> bool:
        """
        Update search text and/or category, reloading if either changed.

        A catalog left in error by an earlier load is reloaded even when
        the filters are unchanged.

        Args:
            query: New search text, or None to keep the current one
            category: New category ("" for all), or None to keep the current one

        Returns:
            True if a reload ran and its result was applied
        """
        changed = False
        if query is not None and query != self.query:
            self.query = query
            changed = True
        if category is not None and category != self.category:
            self.category = category
            changed = True

        if not changed and self.error is None:
            return False
        return await self.load()

    async def load(self) -> bool:
        """
        Fetch products for the current filters.

        Failures set `error` and keep the previous list.

        Returns:
            True if the fetched list was applied
        """
        self._generation += 1
        generation = self._generation
        query, category = self.query, self.category

        self.loading = True
        self.error = None
        try:
            products = await self.client.list_products(q=query, category=category)
        except ShopCloneError as e:
            if generation == self._generation:
                logger.error(f"Catalog load failed: {e}")
                self.error = LOAD_ERROR
            return False
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.info(f"Discarding stale catalog response (q='{query}', category='{category}')")
            return False

        self.products = tuple(products)
        return True

    async def seed(self) -> bool:
        """Populate demo data on the backend, then reload."""
        try:
            await self.client.seed_products()
        except ShopCloneError as e:
            logger.error(f"Seeding failed: {e}")
            self.error = SEED_ERROR
            return False
        return await self.load()

    def find(self, ref: str) -> Optional[Product]:
        """
        Look up a product in the current list by id or title.

        Args:
            ref: Product id (as text) or exact title

        Returns:
            First matching product, or None
        """
        for product in self.products:
            if product.id is not None and str(product.id) == ref:
                return product
        for product in self.products:
            if product.title == ref:
                return product
        return None
