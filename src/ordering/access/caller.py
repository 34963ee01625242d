"""Caller identity attached to each request by the authentication layer."""

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    USER = "user"
    SELLER = "seller"
    ADMIN = "admin"


@dataclass(frozen=True)
class Caller:
    """The authenticated caller of an operation. Never persisted."""

    user_id: str | None
    role: Role = Role.USER
