"""Repository for the Order aggregate."""

from ordering.access.caller import Caller
from ordering.access.policy import visibility_criteria
from ordering.domain import ordering
from ordering.order.order import Order

DEFAULT_PAGE_SIZE = 100


@ordering.repository(part_of=Order)
class OrderRepository:
    """Order persistence plus the role-scoped listing query."""

    def visible_to(self, caller: Caller, limit: int = DEFAULT_PAGE_SIZE) -> list[Order]:
        """Orders `caller` may list, newest first.

        The caller's visibility rule is applied as a filter on the query, so a
        regular user's listing never loads other buyers' orders.
        """
        query = self._dao.query
        criteria = visibility_criteria(caller)
        if criteria:
            query = query.filter(**criteria)
        return query.order_by("-created_at").limit(limit).all().items
