"""Order access policy — which orders a caller may list, read and update.

Listing is scoped by role: each role maps to a visibility rule that yields the
repository filter for that caller, so scoping happens in the query rather than
after fetching. Reading or updating a single order is decided by an
`OrderAccessPolicy`, chosen through configuration (see `ordering.access`).
"""

from abc import ABC, abstractmethod

from protean.exceptions import ValidationError

from ordering.access.caller import Caller, Role


class AccessDenied(Exception):
    """The active policy forbids the caller from acting on an order."""


# ---------------------------------------------------------------------------
# Listing visibility
# ---------------------------------------------------------------------------
def _all_orders(caller: Caller) -> dict:  # noqa: ARG001
    return {}


def _seller_orders(caller: Caller) -> dict:  # noqa: ARG001
    # Products carry no seller yet, so every order is visible.
    # TODO: narrow to orders containing the seller's products once products record a seller.
    return {}


def _own_orders(caller: Caller) -> dict:
    if not caller.user_id:
        raise ValidationError({"user_id": ["Missing caller identity"]})
    return {"user_id": str(caller.user_id)}


_VISIBILITY_RULES = {
    Role.ADMIN: _all_orders,
    Role.SELLER: _seller_orders,
    Role.USER: _own_orders,
}


def visibility_criteria(caller: Caller) -> dict:
    """Return the repository filter selecting the orders `caller` may list."""
    return _VISIBILITY_RULES[caller.role](caller)


# ---------------------------------------------------------------------------
# Single-order access
# ---------------------------------------------------------------------------
class OrderAccessPolicy(ABC):
    """Decides whether a caller may read or update one specific order."""

    name: str

    @abstractmethod
    def can_read(self, caller: Caller, order) -> bool: ...

    @abstractmethod
    def can_update(self, caller: Caller, order) -> bool: ...

    def ensure_can_read(self, caller: Caller, order) -> None:
        if not self.can_read(caller, order):
            raise AccessDenied(f"{caller.role.value} {caller.user_id} may not read order {order.id}")

    def ensure_can_update(self, caller: Caller, order) -> None:
        if not self.can_update(caller, order):
            raise AccessDenied(f"{caller.role.value} {caller.user_id} may not update order {order.id}")


class OpenAccessPolicy(OrderAccessPolicy):
    """Any authenticated caller may read or update any order by identifier."""

    name = "open"

    def can_read(self, caller: Caller, order) -> bool:  # noqa: ARG002
        return True

    def can_update(self, caller: Caller, order) -> bool:  # noqa: ARG002
        return True


class OwnerAccessPolicy(OrderAccessPolicy):
    """Only the owning buyer, sellers and admins may read or update an order."""

    name = "owner"

    _PRIVILEGED = {Role.ADMIN, Role.SELLER}

    def can_read(self, caller: Caller, order) -> bool:
        return caller.role in self._PRIVILEGED or order.is_owned_by(caller.user_id)

    def can_update(self, caller: Caller, order) -> bool:
        return self.can_read(caller, order)
