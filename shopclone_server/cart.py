"""Client-side shopping cart."""

import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence

from .config import Settings
from .exceptions import CheckoutInProgressError, EmptyCartError
from .models import CartLineItem, OrderConfirmation, OrderItem, OrderRequest, Product, Totals
from .pricing import compute_totals, format_money, format_shipping

if TYPE_CHECKING:
    from .storefront_client import StorefrontClient

logger = logging.getLogger(__name__)

EMPTY_CART_TEXT = "Your cart is empty."


def build_order(items: Sequence[CartLineItem], settings: Optional[Settings] = None) -> OrderRequest:
    """
    Build an order request from cart lines.

    Args:
        items: Cart line items, in cart order
        settings: Source of the placeholder customer fields

    Returns:
        OrderRequest snapshot
    """
    settings = settings or Settings()
    return OrderRequest(
        items=[
            OrderItem(
                product_id=item.id,
                title=item.title,
                price=item.price,
                quantity=item.quantity,
                image=item.image,
            )
            for item in items
        ],
        customer_name=settings.customer_name,
        customer_email=settings.customer_email,
        customer_address=settings.customer_address,
    )


class CartEngine:
    """Ordered list of cart lines with derived totals."""

    def __init__(self) -> None:
        self._items: list[CartLineItem] = []
        self.checking_out = False

    @property
    def items(self) -> tuple[CartLineItem, ...]:
        return tuple(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def add(self, product: Product) -> CartLineItem:
        """
        Add one unit of a product to the cart.

        A product that matches an existing line bumps that line's quantity;
        anything else is appended as a new line with quantity 1.

        Args:
            product: Product to add

        Returns:
            The resulting cart line

        Raises:
            CheckoutInProgressError: If an order submission is in flight
        """
        if self.checking_out:
            raise CheckoutInProgressError("Cart is locked while checkout is in progress")

        for index, item in enumerate(self._items):
            if item.matches(product):
                updated = item.incremented()
                self._items[index] = updated
                logger.info(f"Cart: {updated.title} quantity -> {updated.quantity}")
                return updated

        line = CartLineItem.from_product(product)
        self._items.append(line)
        logger.info(f"Cart: added {line.title}")
        return line

    def totals(self) -> Totals:
        return compute_totals(self._items)

    def snapshot(self) -> tuple[CartLineItem, ...]:
        return self.items

    def clear(self) -> None:
        self._items = []

    async def checkout(self, client: "StorefrontClient") -> OrderConfirmation:
        """
        Submit the current cart as an order.

        The cart is snapshotted before the request starts and stays locked
        until it finishes. On success the cart is emptied; on failure it is
        left exactly as it was.

        Args:
            client: Storefront backend client

        Returns:
            Backend order confirmation

        Raises:
            EmptyCartError: If the cart has no items
            CheckoutInProgressError: If a checkout is already running
            ShopCloneError: If the submission fails
        """
        if self.checking_out:
            raise CheckoutInProgressError("Checkout already in progress")
        if self.is_empty:
            raise EmptyCartError("Cart is empty")

        items = self.snapshot()
        totals = compute_totals(items)
        order = build_order(items, client.settings)
        logger.info(f"=== CHECKOUT: lines={len(items)}, total={totals.total} ===")

        self.checking_out = True
        try:
            confirmation = await client.place_order(order)
        finally:
            self.checking_out = False

        self.clear()
        return confirmation

    def summary(self) -> dict[str, Any]:
        """JSON-ready view of the cart and its totals."""
        return {
            "items": [item.model_dump(mode="json") for item in self._items],
            "totals": self.totals().model_dump(mode="json"),
            "item_count": self.item_count,
            "empty": self.is_empty,
        }

    def render(self) -> str:
        """Text rendering of the cart with its totals."""
        if self.is_empty:
            return EMPTY_CART_TEXT

        totals = self.totals()
        lines = [f"Cart ({self.item_count} items):"]
        for item in self._items:
            lines.append(f"  - {item.title} × {item.quantity}: {format_money(item.line_total)}")
        lines.append("")
        lines.append(f"Subtotal: {format_money(totals.subtotal)}")
        lines.append(f"Shipping: {format_shipping(totals.shipping)}")
        lines.append(f"Taxes: {format_money(totals.taxes)}")
        lines.append(f"Total: {format_money(totals.total)}")
        return "\n".join(lines)
