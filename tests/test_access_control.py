"""
Unit tests for the access decision engine
"""
from types import SimpleNamespace

import pytest

from services.access_control import (
    Decision,
    DenyReason,
    authorize,
    effective_permissions,
    has_role,
    scope_to_owner,
)
from utils.constants import MANAGE_FILES, MANAGE_ROLES, MANAGE_USERS
from utils.errors import MissingPermissionError, NotOwnerError


def make_role(name, *permission_names):
    return SimpleNamespace(
        name=name,
        permissions=[SimpleNamespace(name=p) for p in permission_names],
    )


def make_user(user_id, *roles):
    return SimpleNamespace(id=user_id, roles=list(roles))


ADMIN = make_role('admin', MANAGE_ROLES, MANAGE_USERS, MANAGE_FILES)
FILES = make_role('management-file', MANAGE_FILES)
ROLES = make_role('management-user', MANAGE_ROLES)


class TestEffectivePermissions:
    """Test cases for effective permission resolution"""

    def test_union_over_roles(self):
        user = make_user(1, FILES, ROLES)
        assert effective_permissions(user) == frozenset({MANAGE_FILES, MANAGE_ROLES})

    def test_no_roles_means_no_permissions(self):
        assert effective_permissions(make_user(1)) == frozenset()

    def test_none_user(self):
        assert effective_permissions(None) == frozenset()

    def test_direct_permission_attribute_is_ignored(self):
        user = make_user(1, FILES)
        user.permissions = [SimpleNamespace(name=MANAGE_USERS)]
        user.direct_permissions = [SimpleNamespace(name=MANAGE_USERS)]

        assert MANAGE_USERS not in effective_permissions(user)
        assert not authorize(user, MANAGE_USERS)

    def test_overlapping_roles_deduplicated(self):
        user = make_user(1, ADMIN, FILES)
        assert effective_permissions(user) == frozenset({MANAGE_ROLES, MANAGE_USERS, MANAGE_FILES})


class TestAuthorize:
    """Test cases for authorize()"""

    def test_allow_when_permission_held(self):
        decision = authorize(make_user(1, FILES), MANAGE_FILES)
        assert decision.allowed
        assert decision.reason is None

    def test_missing_permission(self):
        decision = authorize(make_user(1, FILES), MANAGE_ROLES)
        assert not decision
        assert decision.reason is DenyReason.MISSING_PERMISSION

    def test_owner_allowed(self):
        resource = SimpleNamespace(id=10, user_id=1)
        assert authorize(make_user(1, FILES), MANAGE_FILES, resource=resource)

    def test_non_owner_denied(self):
        resource = SimpleNamespace(id=10, user_id=2)
        decision = authorize(make_user(1, FILES), MANAGE_FILES, resource=resource)
        assert decision.reason is DenyReason.NOT_OWNER

    def test_override_role_bypasses_ownership(self):
        resource = SimpleNamespace(id=10, user_id=2)
        assert authorize(make_user(1, ADMIN), MANAGE_FILES, resource=resource)

    def test_override_role_still_needs_permission(self):
        # admin role stripped of manage-files: the override only covers ownership
        weak_admin = make_role('admin', MANAGE_USERS)
        resource = SimpleNamespace(id=10, user_id=1)
        decision = authorize(make_user(1, weak_admin), MANAGE_FILES, resource=resource)
        assert decision.reason is DenyReason.MISSING_PERMISSION

    def test_permission_checked_before_ownership(self):
        resource = SimpleNamespace(id=10, user_id=2)
        decision = authorize(make_user(1, ROLES), MANAGE_FILES, resource=resource)
        assert decision.reason is DenyReason.MISSING_PERMISSION

    def test_custom_override_role(self):
        auditor = make_role('auditor', MANAGE_FILES)
        resource = SimpleNamespace(id=10, user_id=2)
        user = make_user(1, auditor)

        assert not authorize(user, MANAGE_FILES, resource=resource)
        assert authorize(user, MANAGE_FILES, resource=resource, override_role='auditor')

    def test_has_role(self):
        user = make_user(1, FILES)
        assert has_role(user, 'management-file')
        assert not has_role(user, 'admin')
        assert not has_role(None, 'admin')


class TestDecision:
    """Test cases for Decision.raise_for_denial"""

    def test_allow_does_not_raise(self):
        Decision.allow().raise_for_denial(MANAGE_FILES)

    def test_missing_permission_raises(self):
        with pytest.raises(MissingPermissionError) as exc_info:
            Decision.deny(DenyReason.MISSING_PERMISSION).raise_for_denial(MANAGE_FILES)

        assert exc_info.value.status_code == 403
        assert exc_info.value.code == 'MISSING_PERMISSION'
        assert MANAGE_FILES in exc_info.value.message

    def test_not_owner_raises(self):
        with pytest.raises(NotOwnerError) as exc_info:
            Decision.deny(DenyReason.NOT_OWNER).raise_for_denial(MANAGE_FILES)

        assert exc_info.value.status_code == 403
        assert exc_info.value.code == 'NOT_OWNER'


class TestScopeToOwner:
    """Test cases for list scoping"""

    def test_override_role_sees_everything(self):
        query = object()
        assert scope_to_owner(query, make_user(1, ADMIN), owner_column=None) is query

    def test_other_users_are_filtered(self):
        class FakeQuery:
            def __init__(self):
                self.criteria = []

            def filter(self, criterion):
                self.criteria.append(criterion)
                return self

        class FakeColumn:
            def __eq__(self, other):
                return ('owner', other)

        query = scope_to_owner(FakeQuery(), make_user(7, FILES), FakeColumn())
        assert query.criteria == [('owner', 7)]
