"""Ordering bounded context — product catalogue and order management.

Accepts orders against the catalogue, persists each order together with its
line items in one unit of work, and serves role-scoped views of orders.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging(log_file_prefix="ordering")

logger = get_logger(__name__)

# Domain Composition Root
ordering = Domain(name="ordering")
