"""Order status updates — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.access import get_access_policy
from ordering.access.caller import Caller, Role
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    caller_id = Identifier()
    caller_role = String(max_length=20, choices=Role, default=Role.USER.value)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        add_context(order_id=str(command.order_id), caller_role=command.caller_role)
        try:
            return self._update(command)
        finally:
            clear_context()

    def _update(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        caller = Caller(user_id=command.caller_id, role=Role(command.caller_role))
        get_access_policy().ensure_can_update(caller, order)

        previous = order.status
        order.change_status(command.status)
        repo.add(order)

        logger.info(
            "Order status changed",
            user_id=str(order.user_id),
            previous_status=previous,
            new_status=order.status,
        )
        return str(order.id)
