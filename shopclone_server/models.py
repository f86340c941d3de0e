"""Data models for ShopClone storefront entities."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Prices travel as JSON numbers on the wire but are kept as Decimal in memory.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

DEFAULT_CATEGORY = "Other"
DEFAULT_RATING = Decimal("4.5")


class Product(BaseModel):
    """Represents a product returned by the storefront backend."""

    model_config = ConfigDict(frozen=True)

    id: Optional[Union[int, str]] = Field(None, description="Backend product ID (absent for fresh seed items)")
    title: str = Field(description="Product title")
    price: Money = Field(ge=0, description="Unit price")
    category: str = Field(default=DEFAULT_CATEGORY, description="Product category")
    rating: Optional[Money] = Field(None, description="Average rating (0-5)")
    image: Optional[str] = Field(None, description="Product image URL")
    buy_url: Optional[str] = Field(None, description="External purchase URL")
    description: Optional[str] = Field(None, description="Product description")

    @property
    def identity(self) -> Union[int, str]:
        """Key used to merge cart lines: the id when present, otherwise the title."""
        return self.id if self.id is not None else self.title

    @property
    def display_rating(self) -> Decimal:
        return self.rating if self.rating is not None else DEFAULT_RATING

    @property
    def stars(self) -> str:
        """Star string for listings; unrated products show four stars."""
        rating = self.rating if self.rating is not None else Decimal("4")
        return "★" * int(rating.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def matches(self, other: "Product") -> bool:
        """
        Check whether two products belong on the same cart line.

        Products match when both carry the same id, or when their titles are
        equal. Two distinct products that share a title are merged.
        """
        if self.id is not None and self.id == other.id:
            return True
        return self.title == other.title


class CartLineItem(Product):
    """Represents a product in the cart together with its quantity."""

    quantity: int = Field(default=1, gt=0, description="Quantity of the product")

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def incremented(self) -> "CartLineItem":
        """Return a copy of this line with the quantity bumped by one."""
        return self.model_copy(update={"quantity": self.quantity + 1})

    @classmethod
    def from_product(cls, product: Product) -> "CartLineItem":
        return cls(**product.model_dump(), quantity=1)


class Totals(BaseModel):
    """Derived cart totals. Never stored; always recomputed from line items."""

    model_config = ConfigDict(frozen=True)

    subtotal: Money
    shipping: Money
    taxes: Money
    total: Money


class OrderItem(BaseModel):
    """Represents a single line of an order request."""

    product_id: Optional[Union[int, str]] = None
    title: str
    price: Money
    quantity: int = Field(gt=0)
    image: Optional[str] = None


class OrderRequest(BaseModel):
    """Snapshot of the cart sent to the backend at checkout."""

    items: list[OrderItem] = Field(default_factory=list, description="Ordered line items")
    customer_name: str = Field(default="Guest", description="Customer name")
    customer_email: str = Field(default="guest@example.com", description="Customer email")
    customer_address: str = Field(default="123 Demo St, Web City", description="Delivery address")


class OrderConfirmation(BaseModel):
    """Backend reply to a successful order submission."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    order_id: str = Field(description="Backend-assigned order identifier")


class ProductDraft(BaseModel):
    """Body for creating a new product."""

    title: str = Field(min_length=1)
    price: Money = Field(ge=0)
    category: str = DEFAULT_CATEGORY
    image: Optional[str] = None
    buy_url: Optional[str] = None
    description: Optional[str] = None
