# services/seeder.py
"""
Seed data: the permission registry, the default roles and the demo accounts.

Every function is idempotent and expects an application context.
"""

import logging
from datetime import datetime, timezone

from extensions import db
from models.permission import Permission
from models.role import Role
from models.user import User
from utils.constants import (
    GUARD_NAME,
    ALL_PERMISSIONS,
    DEFAULT_ROLE_PERMISSIONS,
    ADMIN_ROLE,
    MANAGEMENT_USER_ROLE,
    MANAGEMENT_FILE_ROLE,
)

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"

# (name, email, roles)
DEMO_USERS = [
    ("Admin User", "admin@example.com", [ADMIN_ROLE]),
    ("Management User", "management.user@example.com", [MANAGEMENT_USER_ROLE]),
    ("Management File", "management.file@example.com", [MANAGEMENT_FILE_ROLE]),
    ("Multi Role User 1", "multi1@example.com", [ADMIN_ROLE, MANAGEMENT_USER_ROLE]),
    ("Multi Role User 2", "multi2@example.com", [ADMIN_ROLE, MANAGEMENT_FILE_ROLE]),
    ("Multi Role User 3", "multi3@example.com", [MANAGEMENT_USER_ROLE, MANAGEMENT_FILE_ROLE]),
    ("Multi Role User 4", "multi4@example.com", [ADMIN_ROLE, MANAGEMENT_USER_ROLE, MANAGEMENT_FILE_ROLE]),
]


def seed_permissions(guard_name=GUARD_NAME):
    """Ensure every known permission exists; returns the number created"""
    created = 0
    for name in ALL_PERMISSIONS:
        if not Permission.query.filter_by(name=name, guard_name=guard_name).first():
            db.session.add(Permission(name=name, guard_name=guard_name))
            created += 1
    db.session.commit()
    logger.info("Permissions ensured (created: %s)", created)
    return created


def seed_roles(guard_name=GUARD_NAME):
    """
    Ensure the default roles exist with their default permissions.

    Existing default roles get missing default permissions added back;
    permissions an administrator granted on top are left alone.
    """
    created = 0
    for role_name, permission_names in DEFAULT_ROLE_PERMISSIONS.items():
        role = Role.query.filter_by(name=role_name, guard_name=guard_name).first()
        if role is None:
            role = Role(name=role_name, guard_name=guard_name)
            db.session.add(role)
            created += 1

        for permission_name in permission_names:
            permission = Permission.query.filter_by(name=permission_name, guard_name=guard_name).first()
            if permission is not None and permission not in role.permissions:
                role.permissions.append(permission)

    db.session.commit()
    logger.info("Default roles ensured (created: %s)", created)
    return created


def seed_roles_and_permissions(guard_name=GUARD_NAME):
    seed_permissions(guard_name)
    seed_roles(guard_name)


def seed_demo_users(password=DEMO_PASSWORD, guard_name=GUARD_NAME):
    """Create the demo accounts (single-role and multi-role); returns the created users"""
    created = []
    for name, email, role_names in DEMO_USERS:
        if User.query.filter_by(email=email).first():
            logger.info("Demo user %s already exists", email)
            continue

        roles = Role.query.filter(Role.guard_name == guard_name, Role.name.in_(role_names)).all()
        if len(roles) != len(role_names):
            raise RuntimeError("Roles not found. Seed roles and permissions first.")

        user = User(name=name, email=email, email_verified_at=datetime.now(timezone.utc))
        user.set_password(password)
        user.roles = roles
        db.session.add(user)
        created.append(user)

    db.session.commit()
    logger.info("Demo users created: %s", len(created))
    return created
