"""Caller identity from the headers set by the authentication gateway."""

from fastapi import Header
from protean.exceptions import ValidationError

from ordering.access.caller import Caller, Role


def current_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str = Header(default=Role.USER.value),
) -> Caller:
    try:
        role = Role(x_user_role.strip().lower())
    except ValueError:
        expected = ", ".join(r.value for r in Role)
        raise ValidationError({"role": [f"Unknown role '{x_user_role}'. Expected one of: {expected}"]}) from None

    return Caller(user_id=(x_user_id or "").strip() or None, role=role)
