"""Cart pricing: subtotal, shipping, taxes and total."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .models import CartLineItem, Totals

FREE_SHIPPING_THRESHOLD = Decimal("50.00")
FLAT_SHIPPING_FEE = Decimal("6.99")
TAX_RATE = Decimal("0.07")

CENT = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round to two decimal places, halves away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_totals(items: Iterable[CartLineItem]) -> Totals:
    """
    Derive the cart totals from its line items.

    Taxes are rounded before they are added to the sum, and the total is
    rounded again afterwards. Changing that order changes the result for
    some carts.

    Args:
        items: Cart line items

    Returns:
        Totals for the given items
    """
    subtotal = sum((item.price * item.quantity for item in items), Decimal("0"))
    shipping = Decimal("0.00") if subtotal >= FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE
    taxes = round_money(subtotal * TAX_RATE)
    total = round_money(subtotal + shipping + taxes)

    return Totals(subtotal=subtotal, shipping=shipping, taxes=taxes, total=total)


def format_money(amount: Decimal) -> str:
    return f"${round_money(amount)}"


def format_shipping(shipping: Decimal) -> str:
    """Shipping label as shown in the cart; zero reads as FREE."""
    return "FREE" if shipping == 0 else format_money(shipping)
