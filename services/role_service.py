# services/role_service.py

import logging
from typing import Iterable, List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from extensions import db
from models.permission import Permission
from models.role import Role, role_permissions, user_roles
from utils.access_logger import log_action
from utils.constants import GUARD_NAME, PROTECTED_ROLES
from utils.errors import ValidationError, ProtectedResourceError, ResourceNotFoundError

logger = logging.getLogger(__name__)

ROLE_NAME_MAX_LENGTH = 255


class RoleService:
    """Role and permission store"""

    @property
    def guard_name(self) -> str:
        return current_app.config.get("GUARD_NAME", GUARD_NAME)

    @property
    def protected_roles(self) -> frozenset:
        return frozenset(current_app.config.get("PROTECTED_ROLES", PROTECTED_ROLES))

    # ------------------------ LECTURE ------------------------

    def list_permissions(self) -> List[Permission]:
        return (Permission.query
                .filter_by(guard_name=self.guard_name)
                .order_by(Permission.id)
                .all())

    def list_roles(self, search: str = None, page: int = 1, per_page: int = 15):
        query = Role.query.filter_by(guard_name=self.guard_name)
        if search:
            query = query.filter(Role.name.contains(search, autoescape=True))
        return query.order_by(Role.id).paginate(page=page, per_page=per_page, error_out=False)

    def list_all_roles(self) -> List[Role]:
        return Role.query.filter_by(guard_name=self.guard_name).order_by(Role.id).all()

    def get_role(self, role_id: int) -> Role:
        role = Role.query.filter_by(id=role_id, guard_name=self.guard_name).first()
        if role is None:
            raise ResourceNotFoundError("Role not found.")
        return role

    def get_roles_by_ids(self, role_ids: Iterable[int], field: str = "roles") -> List[Role]:
        """
        Resolve role ids, failing when any of them is unknown.

        Raises:
            ValidationError: on ``field`` when an id does not match a role
        """
        ids = _normalize_ids(role_ids, field)
        if not ids:
            return []
        roles = (Role.query
                 .filter(Role.guard_name == self.guard_name, Role.id.in_(ids))
                 .all())
        if len(roles) != len(ids):
            raise ValidationError.for_field(field, "One or more selected roles do not exist.")
        return roles

    # ------------------------ ECRITURE ------------------------

    def sync_permissions(self, role: Role, permission_ids: Iterable[int]) -> Role:
        """
        Replace the permission set of ``role`` with exactly ``permission_ids``.

        Not additive: permissions missing from ``permission_ids`` are removed.
        The caller commits.
        """
        ids = _normalize_ids(permission_ids, "permissions")
        permissions = []
        if ids:
            permissions = (Permission.query
                           .filter(Permission.guard_name == self.guard_name, Permission.id.in_(ids))
                           .order_by(Permission.id)
                           .all())
            if len(permissions) != len(ids):
                raise ValidationError.for_field(
                    "permissions", "One or more selected permissions do not exist."
                )
        role.permissions = permissions
        return role

    def create_role(self, name: str, permission_ids: Optional[Iterable[int]] = None,
                    acting_user_id: int = None) -> Role:
        name = self._validate_name(name)

        role = Role(name=name, guard_name=self.guard_name)
        try:
            if permission_ids is not None:
                self.sync_permissions(role, permission_ids)
            db.session.add(role)
            db.session.flush()
            log_action(acting_user_id, 'CREATE_ROLE', f"role:{role.name}")
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError.for_field("name", "Role name already exists.")
        except Exception:
            db.session.rollback()
            raise

        logger.info("Role created: %s (permissions=%s)", role.name, sorted(role.permission_names))
        return role

    def update_role(self, role_id: int, name: str, permission_ids: Optional[Iterable[int]] = None,
                    acting_user_id: int = None) -> Role:
        role = self.get_role(role_id)
        name = self._validate_name(name, ignore_id=role.id)
        # Les rôles par défaut gardent leur nom ; seules leurs permissions changent
        if role.name in self.protected_roles and name != role.name:
            logger.warning("Refused rename of protected role %s", role.name)
            raise ProtectedResourceError("Cannot rename default roles.")

        try:
            role.name = name
            if permission_ids is not None:
                self.sync_permissions(role, permission_ids)
            log_action(acting_user_id, 'UPDATE_ROLE', f"role:{role.name}")
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError.for_field("name", "Role name already exists.")
        except Exception:
            db.session.rollback()
            raise

        logger.info("Role updated: %s (permissions=%s)", role.name, sorted(role.permission_names))
        return role

    def delete_role(self, role_id: int, acting_user_id: int = None) -> None:
        """
        Delete a role and every membership row pointing at it, in one transaction.

        Raises:
            ProtectedResourceError: the role is one of the default roles
        """
        role = self.get_role(role_id)
        if role.name in self.protected_roles:
            logger.warning("Refused deletion of protected role %s", role.name)
            raise ProtectedResourceError("Cannot delete default roles.")

        role_name = role.name
        try:
            db.session.execute(user_roles.delete().where(user_roles.c.role_id == role.id))
            db.session.execute(role_permissions.delete().where(role_permissions.c.role_id == role.id))
            # Membership rows are gone; reload the collection so the ORM has nothing left to unlink
            db.session.expire(role, ['permissions'])
            db.session.delete(role)
            log_action(acting_user_id, 'DELETE_ROLE', f"role:{role_name}")
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info("Role deleted: %s", role_name)

    # ------------------------ VALIDATION ------------------------

    def _validate_name(self, name, ignore_id: int = None) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError.for_field("name", "Role name is required.")
        name = name.strip()
        if len(name) > ROLE_NAME_MAX_LENGTH:
            raise ValidationError.for_field(
                "name", f"Role name may not be greater than {ROLE_NAME_MAX_LENGTH} characters."
            )

        query = Role.query.filter(Role.name == name, Role.guard_name == self.guard_name)
        if ignore_id is not None:
            query = query.filter(Role.id != ignore_id)
        if query.first() is not None:
            raise ValidationError.for_field("name", "Role name already exists.")
        return name


def _normalize_ids(ids, field: str) -> List[int]:
    if ids is None:
        return []
    if isinstance(ids, (str, bytes)) or not hasattr(ids, '__iter__'):
        raise ValidationError.for_field(field, f"{field.capitalize()} must be an array.")
    normalized = []
    for value in ids:
        if isinstance(value, bool):
            raise ValidationError.for_field(field, f"One or more selected {field} do not exist.")
        try:
            normalized.append(int(value))
        except (TypeError, ValueError):
            raise ValidationError.for_field(field, f"One or more selected {field} do not exist.")
    return sorted(set(normalized))
