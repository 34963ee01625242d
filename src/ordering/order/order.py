"""Order aggregate (CQRS) — a buyer's order and its line items.

An Order and all of its OrderItems are persisted together through the
repository inside one unit of work, so readers never observe an order without
its items. Line items are immutable once placed; they capture the price the
buyer was quoted, independent of later catalogue price changes.

State Machine (4 states):
    NEW → PAID → FULFILLED
    NEW, PAID → CANCELLED
"""

import math
import numbers
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import InvalidOperationError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.domain import ordering


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    NEW = "New"
    PAID = "Paid"
    FULFILLED = "Fulfilled"
    CANCELLED = "Cancelled"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.NEW: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.FULFILLED, OrderStatus.CANCELLED},
    OrderStatus.FULFILLED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def _validate_line(index, line):
    """Reject a line whose quantity or price cannot be placed."""
    quantity = line.get("quantity")
    price = line.get("price")

    errors = {}
    if isinstance(quantity, bool) or not isinstance(quantity, numbers.Integral) or quantity < 1:
        errors[f"items[{index}].quantity"] = ["Quantity must be a positive integer"]
    if isinstance(price, bool) or not isinstance(price, numbers.Real) or not math.isfinite(price) or price < 0:
        errors[f"items[{index}].price"] = ["Price must be a non-negative number"]

    if errors:
        raise ValidationError(errors)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A product, quantity and price-at-order-time belonging to one order."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    status = String(
        max_length=50,
        choices=OrderStatus,
        default=OrderStatus.NEW.value,
    )
    payment_intent_id = String(max_length=255)
    items = HasMany(OrderItem)
    created_at = DateTime(default=lambda: datetime.now(UTC))
    updated_at = DateTime(default=lambda: datetime.now(UTC))

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, lines):
        """Create a new order for `user_id` from a list of line dicts.

        Each line carries `product_id`, `quantity` and `price`. Product
        existence is the caller's concern; this factory only guards the
        shape of the lines and refuses to build an order with no items.
        """
        if not user_id:
            raise ValidationError({"user_id": ["Missing buyer"]})
        if not lines:
            raise ValidationError({"items": ["An order must contain at least one item"]})

        for index, line in enumerate(lines):
            _validate_line(index, line)

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            status=OrderStatus.NEW.value,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(
                OrderItem(
                    product_id=str(line["product_id"]),
                    quantity=int(line["quantity"]),
                    price=float(line["price"]),
                )
            )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_owned_by(self, user_id):
        return user_id is not None and str(self.user_id) == str(user_id)

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def change_status(self, target):
        """Move the order to `target`, if the transition table allows it."""
        try:
            target_status = OrderStatus(target)
        except ValueError:
            expected = ", ".join(s.value for s in OrderStatus)
            raise ValidationError({"status": [f"Unknown order status '{target}'. Expected one of: {expected}"]}) from None

        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise InvalidOperationError(f"Cannot transition order from {current.value} to {target_status.value}")

        self.status = target_status.value
        self.updated_at = datetime.now(UTC)
