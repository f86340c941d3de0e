"""Exceptions raised by the ShopClone client and controllers."""

from typing import Optional


class ShopCloneError(Exception):
    """Base class for all ShopClone errors."""


class StorefrontConnectionError(ShopCloneError):
    """The backend could not be reached or returned an unreadable body."""


class StorefrontAPIError(ShopCloneError):
    """The backend answered with a non-success status."""

    def __init__(self, status_code: int, detail: Optional[str] = None) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(detail or f"Backend returned HTTP {status_code}")


class ValidationError(ShopCloneError):
    """Client-side validation failed before any request was made."""


class EmptyCartError(ShopCloneError):
    """Checkout was attempted with no items in the cart."""


class CheckoutInProgressError(ShopCloneError):
    """The cart is locked while an order submission is in flight."""


class SubmissionInProgressError(ShopCloneError):
    """A product submission is already in flight."""


class ProductNotFoundError(ShopCloneError):
    """No product in the current catalog matches the given reference."""
