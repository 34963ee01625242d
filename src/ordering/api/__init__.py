"""Ordering domain API package."""

from ordering.api.errors import register_exception_handlers
from ordering.api.routes import order_router, product_router

__all__ = ["order_router", "product_router", "register_exception_handlers"]
