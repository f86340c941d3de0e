"""Form state for submitting a new product."""

import logging
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .exceptions import ShopCloneError, StorefrontAPIError, SubmissionInProgressError, ValidationError
from .models import DEFAULT_CATEGORY, Product, ProductDraft

if TYPE_CHECKING:
    from .storefront_client import StorefrontClient

logger = logging.getLogger(__name__)

FIELDS = ("title", "price", "category", "image", "buy_url", "description")

REQUIRED_MESSAGE = "Title and price are required"
PRICE_MESSAGE = "Price must be a non-negative number"
FAILURE_MESSAGE = "Failed to add product"


class FormState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"


class ProductForm:
    """
    Add-product form.

    States move closed -> open -> submitting, then back to closed on
    success or to open with an error on failure. Field values survive a
    failed submission.
    """

    def __init__(self) -> None:
        self.state = FormState.CLOSED
        self.fields: dict[str, str] = {name: "" for name in FIELDS}
        self.error: Optional[str] = None

    @property
    def saving(self) -> bool:
        return self.state is FormState.SUBMITTING

    def open(self) -> None:
        if self.state is FormState.CLOSED:
            self.state = FormState.OPEN

    def close(self) -> None:
        if self.state is FormState.OPEN:
            self.state = FormState.CLOSED

    def toggle(self) -> None:
        if self.state is FormState.CLOSED:
            self.open()
        else:
            self.close()

    def update(self, **values: Optional[str]) -> None:
        """Set field values. Unknown field names raise ValueError."""
        for name, value in values.items():
            if name not in self.fields:
                raise ValueError(f"Unknown field: {name}")
            self.fields[name] = value or ""

    def reset(self) -> None:
        self.fields = {name: "" for name in FIELDS}
        self.error = None

    def validate(self) -> ProductDraft:
        """
        Turn the current field values into a product draft.

        Returns:
            Draft ready to send

        Raises:
            ValidationError: If title or price is missing or the price is not a number
        """
        title = self.fields["title"].strip()
        price_text = self.fields["price"].strip()
        if not title or not price_text:
            raise ValidationError(REQUIRED_MESSAGE)

        try:
            price = Decimal(price_text)
        except InvalidOperation:
            raise ValidationError(PRICE_MESSAGE)
        if not price.is_finite() or price < 0:
            raise ValidationError(PRICE_MESSAGE)

        return ProductDraft(
            title=title,
            price=price,
            category=self.fields["category"].strip() or DEFAULT_CATEGORY,
            image=self.fields["image"].strip() or None,
            buy_url=self.fields["buy_url"].strip() or None,
            description=self.fields["description"].strip() or None,
        )

    async def submit(self, client: "StorefrontClient") -> Optional[Product]:
        """
        Validate and send the form.

        Validation failures never reach the network. On success the fields
        reset and the form closes; on failure the form stays open with
        `error` set and the input kept.

        Args:
            client: Storefront backend client

        Returns:
            The created product as returned by the backend, or as submitted
            when the backend sent no body

        Raises:
            SubmissionInProgressError: If a submission is already in flight
            ShopCloneError: If validation or the request fails
        """
        if self.saving:
            raise SubmissionInProgressError("A product submission is already in progress")

        self.open()
        self.error = None

        try:
            draft = self.validate()
        except ValidationError as e:
            self.error = str(e)
            raise

        self.state = FormState.SUBMITTING
        try:
            created = await client.create_product(draft)
        except StorefrontAPIError as e:
            self.error = e.detail or FAILURE_MESSAGE
            self.state = FormState.OPEN
            raise
        except ShopCloneError:
            self.error = FAILURE_MESSAGE
            self.state = FormState.OPEN
            raise

        logger.info(f"Product created: {draft.title}")
        self.reset()
        self.state = FormState.CLOSED
        return created or Product(**draft.model_dump())
