"""Order access policy factory.

Provides get_access_policy() / set_access_policy() to swap implementations:
- OpenAccessPolicy: any authenticated caller may read or update any order
- OwnerAccessPolicy: only the owner, sellers and admins may

The default comes from the ORDER_ACCESS_POLICY environment variable
("open" unless set).
"""

import os

from protean.exceptions import ConfigurationError

from ordering.access.policy import OpenAccessPolicy, OrderAccessPolicy, OwnerAccessPolicy

_POLICIES = {
    OpenAccessPolicy.name: OpenAccessPolicy,
    OwnerAccessPolicy.name: OwnerAccessPolicy,
}

_current_policy: OrderAccessPolicy | None = None


def policy_from_env() -> OrderAccessPolicy:
    """Build the policy named by ORDER_ACCESS_POLICY."""
    name = os.getenv("ORDER_ACCESS_POLICY", OpenAccessPolicy.name).strip().lower()
    try:
        return _POLICIES[name]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown ORDER_ACCESS_POLICY '{name}'. Expected one of: {', '.join(sorted(_POLICIES))}"
        ) from None


def get_access_policy() -> OrderAccessPolicy:
    """Return the active access policy, building it from the environment on first use."""
    global _current_policy
    if _current_policy is None:
        _current_policy = policy_from_env()
    return _current_policy


def set_access_policy(policy: OrderAccessPolicy) -> None:
    """Override the active access policy (useful for tests)."""
    global _current_policy
    _current_policy = policy


def reset_access_policy() -> None:
    """Reset to the environment-configured policy."""
    global _current_policy
    _current_policy = None
