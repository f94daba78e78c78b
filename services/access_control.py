# services/access_control.py
"""
Access decision engine.

Every protected action goes through ``authorize``. The engine is a set of
pure functions over the principal's loaded roles: it holds no state, never
writes, and may be called concurrently without coordination.

Permissions are resolved by exactly one rule (see ``effective_permissions``):
the union of the permissions of the roles a user holds. There is no direct
user -> permission grant and no hierarchy between permissions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Optional

from utils.constants import OVERRIDE_ROLE
from utils.errors import MissingPermissionError, NotOwnerError
from utils.logging_config import decision_logger


class DenyReason(Enum):
    MISSING_PERMISSION = "missing_permission"
    NOT_OWNER = "not_owner"


@dataclass(frozen=True)
class Decision:
    """Outcome of an access check; truthy when access is allowed"""
    allowed: bool
    reason: Optional[DenyReason] = None

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls) -> 'Decision':
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason) -> 'Decision':
        return cls(allowed=False, reason=reason)

    def raise_for_denial(self, permission: Optional[str] = None) -> None:
        """
        Raise the matching access error when this decision is a denial.

        Args:
            permission: Permission name reported in the MissingPermission message
        """
        if self.allowed:
            return
        if self.reason is DenyReason.NOT_OWNER:
            raise NotOwnerError()
        raise MissingPermissionError(permission)


def effective_permissions(user) -> FrozenSet[str]:
    """
    Compute the set of permission names a user holds.

    Args:
        user: Principal with a loaded ``roles`` collection

    Returns:
        frozenset of permission names, the union over all of the user's roles
    """
    if user is None:
        return frozenset()
    names = set()
    for role in user.roles:
        names.update(permission.name for permission in role.permissions)
    return frozenset(names)


def has_role(user, role_name: str) -> bool:
    if user is None:
        return False
    return any(role.name == role_name for role in user.roles)


def owns(user, resource: Any) -> bool:
    return resource is not None and user is not None and resource.user_id == user.id


def authorize(user, permission: str, resource: Any = None,
              override_role: str = OVERRIDE_ROLE) -> Decision:
    """
    Decide whether ``user`` may exercise ``permission``, optionally on ``resource``.

    Args:
        user: Authenticated principal
        permission: Required permission name (e.g. "manage-files")
        resource: Owned resource exposing ``user_id``; when given the
            ownership rule applies on top of the permission check
        override_role: Role name that bypasses the ownership rule

    Returns:
        Decision: Allow, or Deny with MISSING_PERMISSION / NOT_OWNER
    """
    user_id = getattr(user, 'id', None)

    if permission not in effective_permissions(user):
        decision_logger.warning(
            "Permission refused for user_id=%s permission=%s", user_id, permission
        )
        return Decision.deny(DenyReason.MISSING_PERMISSION)

    if resource is not None:
        if has_role(user, override_role):
            decision_logger.debug(
                "Ownership bypassed for user_id=%s role=%s resource_id=%s",
                user_id, override_role, getattr(resource, 'id', None)
            )
            return Decision.allow()
        if not owns(user, resource):
            decision_logger.warning(
                "Ownership refused for user_id=%s resource_id=%s owner_id=%s",
                user_id, getattr(resource, 'id', None), resource.user_id
            )
            return Decision.deny(DenyReason.NOT_OWNER)

    decision_logger.debug("Access granted for user_id=%s permission=%s", user_id, permission)
    return Decision.allow()


def scope_to_owner(query, user, owner_column, override_role: str = OVERRIDE_ROLE):
    """
    Apply the ownership rule to a list query as a filter.

    Users holding the override role see every row; everyone else only sees
    rows where ``owner_column`` equals their id.
    """
    if has_role(user, override_role):
        return query
    return query.filter(owner_column == user.id)
