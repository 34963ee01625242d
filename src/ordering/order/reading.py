"""Order read side — single-order views merged with their items, and scoped listings."""

from protean.utils.globals import current_domain

from ordering.access import get_access_policy
from ordering.access.caller import Caller
from ordering.order.order import Order
from ordering.order.repository import DEFAULT_PAGE_SIZE


def order_fields(order: Order) -> dict:
    """The order's own scalar fields, without its items."""
    return {
        "id": str(order.id),
        "user_id": str(order.user_id),
        "status": order.status,
        "payment_intent_id": order.payment_intent_id,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def merge_order(order: Order) -> dict:
    """Compose an order with its line items.

    Each item is stamped with the identifier of the order it belongs to. An
    order without items still yields its fields with an empty item list.
    """
    order_id = str(order.id)
    return {
        **order_fields(order),
        "items": [
            {
                "id": str(item.id),
                "order_id": order_id,
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "price": item.price,
            }
            for item in order.items or []
        ],
    }


def get_order(order_id) -> dict:
    """Load an order with its items.

    Raises `ObjectNotFoundError` before any merging when the order is unknown.
    """
    order = current_domain.repository_for(Order).get(order_id)
    return merge_order(order)


def read_order(caller: Caller, order_id) -> dict:
    """Load an order for `caller`, subject to the active access policy."""
    order = current_domain.repository_for(Order).get(order_id)
    get_access_policy().ensure_can_read(caller, order)
    return merge_order(order)


def list_orders(caller: Caller, limit: int = DEFAULT_PAGE_SIZE) -> list[dict]:
    """The orders `caller` may see, newest first, without their items."""
    orders = current_domain.repository_for(Order).visible_to(caller, limit=limit)
    return [order_fields(order) for order in orders]
