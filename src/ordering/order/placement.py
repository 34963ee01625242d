"""Order placement — command and handler.

Validation runs in a fixed order and always completes before anything is
written:

1. a buyer identity is present,
2. the item list is a non-empty list of line objects,
3. every referenced product exists in the catalogue,
4. every quantity is a positive integer and every price is non-negative.

The order and its items are then added through the repository inside the
handler's unit of work, so they commit together or not at all.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.catalogue.lookup import existing_product_ids
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier()  # Checked by the handler so a missing buyer reads as bad input
    items = Text(required=True)  # JSON: list of {product_id, quantity, price}


def _parse_lines(raw):
    lines = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(lines, list) or not lines:
        raise ValidationError({"items": ["An order must contain at least one item"]})

    for index, line in enumerate(lines):
        if not isinstance(line, dict) or line.get("product_id") in (None, ""):
            raise ValidationError({f"items[{index}]": ["Each item needs a product_id, quantity and price"]})
    return lines


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        if not command.user_id:
            logger.info("Order rejected", reason="missing_buyer")
            raise ValidationError({"user_id": ["Missing buyer"]})

        add_context(user_id=str(command.user_id))
        try:
            return self._place(command)
        finally:
            clear_context()

    def _place(self, command):
        try:
            lines = _parse_lines(command.items)
        except json.JSONDecodeError:
            raise ValidationError({"items": ["Items must be a JSON list"]}) from None

        requested = {str(line["product_id"]) for line in lines}
        missing = requested - existing_product_ids(requested)
        if missing:
            logger.info("Order rejected", reason="unknown_products", product_ids=sorted(missing))
            raise ValidationError({"items": ["One or more products not found"]})

        order = Order.place(user_id=command.user_id, lines=lines)
        add_context(order_id=str(order.id))
        current_domain.repository_for(Order).add(order)

        logger.info("Order placed", item_count=len(order.items))
        return str(order.id)
