"""Product aggregate — the catalogue entries that order line items refer to."""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, String, Text

from ordering.domain import ordering


@ordering.aggregate
class Product:
    """A sellable item with a current list price.

    Order items capture the price at the time the order is placed, so changing
    a product's price never alters orders that already reference it.
    """

    name = String(required=True, max_length=255)
    description = Text()
    image = String(max_length=255)
    price = Float(required=True, min_value=0.0)
    created_at = DateTime(default=lambda: datetime.now(UTC))
    updated_at = DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, name, price, description=None, image=None):
        now = datetime.now(UTC)
        return cls(
            name=name,
            price=price,
            description=description,
            image=image,
            created_at=now,
            updated_at=now,
        )

    def update(self, name=None, description=None, image=None, price=None):
        """Apply a partial update; `None` leaves a field unchanged."""
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if image is not None:
            self.image = image
        if price is not None:
            self.price = price

        self.updated_at = datetime.now(UTC)
