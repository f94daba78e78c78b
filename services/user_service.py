# services/user_service.py

import logging
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from extensions import db
from models.file import File
from models.role import Role, user_roles
from models.user import User
from services.file_storage_service import FileStorageService
from services.role_service import RoleService
from services.session_service import session_service
from utils.access_logger import log_action
from utils.constants import DEFAULT_REGISTRATION_ROLE
from utils.errors import ValidationError, SelfDeletionError, ResourceNotFoundError

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_MIN_LENGTH = 8


class UserService:
    """Principal store: administrative CRUD plus self-registration"""

    def __init__(self, role_service: RoleService = None):
        self.role_service = role_service or RoleService()

    # ------------------------ LECTURE ------------------------

    def list_users(self, search: str = None, role: str = None, page: int = 1, per_page: int = 15):
        query = User.query
        if search:
            query = query.filter(or_(
                User.name.contains(search, autoescape=True),
                User.email.contains(search, autoescape=True),
            ))
        if role:
            query = query.filter(User.roles.any(Role.name == role))
        return query.order_by(User.id).paginate(page=page, per_page=per_page, error_out=False)

    def get_user(self, user_id: int) -> User:
        user = db.session.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User not found.")
        return user

    def list_assignable_roles(self) -> List[Role]:
        return self.role_service.list_all_roles()

    # ------------------------ ECRITURE ------------------------

    def sync_roles(self, user: User, role_ids: Iterable[int]) -> User:
        """Replace the role set of ``user`` with exactly ``role_ids``; the caller commits"""
        user.roles = self.role_service.get_roles_by_ids(role_ids)
        return user

    def create_user(self, name: str, email: str, password: str,
                    role_ids: Optional[Iterable[int]] = None, acting_user_id: int = None) -> User:
        """
        Administrative creation. Without ``role_ids`` the user holds no role.
        """
        name, email = self._validate_identity(name, email)
        self._validate_password(password)

        user = User(name=name, email=email)
        user.set_password(password)
        try:
            if role_ids is not None:
                self.sync_roles(user, role_ids)
            db.session.add(user)
            db.session.flush()
            log_action(acting_user_id, 'CREATE_USER', f"user:{user.email}")
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError.for_field("email", "The email has already been taken.")
        except Exception:
            db.session.rollback()
            raise

        logger.info("User created: %s (roles=%s)", user.email, user.role_names)
        return user

    def register(self, name: str, email: str, password: str) -> User:
        """
        Self-registration: the new user gets exactly the default role.
        """
        name, email = self._validate_identity(name, email)
        self._validate_password(password)

        default_role_name = current_app.config.get("DEFAULT_REGISTRATION_ROLE", DEFAULT_REGISTRATION_ROLE)
        default_role = Role.query.filter_by(
            name=default_role_name, guard_name=self.role_service.guard_name
        ).first()
        if default_role is None:
            # Seed data missing: refuse rather than create a user without access
            raise RuntimeError(f"Default role '{default_role_name}' is not seeded")

        user = User(name=name, email=email, email_verified_at=datetime.now(timezone.utc))
        user.set_password(password)
        user.roles = [default_role]
        try:
            db.session.add(user)
            db.session.flush()
            log_action(user.id, 'REGISTER', f"user:{user.email}")
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError.for_field("email", "The email has already been taken.")
        except Exception:
            db.session.rollback()
            raise

        logger.info("User registered: %s", user.email)
        return user

    def update_user(self, user_id: int, name: str = None, email: str = None, password: str = None,
                    role_ids: Optional[Iterable[int]] = None, acting_user_id: int = None) -> User:
        """
        Update the supplied fields only.

        ``password`` is re-hashed only when non-empty; roles are replaced only
        when ``role_ids`` is given.
        """
        user = self.get_user(user_id)

        if name is not None:
            if not isinstance(name, str) or not name.strip():
                raise ValidationError.for_field("name", "Name is required.")
            name = name.strip()
        if email is not None:
            email = self._validate_email(email, ignore_id=user.id)
        if password:
            self._validate_password(password)

        try:
            if name is not None:
                user.name = name
            if email is not None:
                user.email = email
            if password:
                user.set_password(password)
            if role_ids is not None:
                self.sync_roles(user, role_ids)
            log_action(acting_user_id, 'UPDATE_USER', f"user:{user.email}")
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError.for_field("email", "The email has already been taken.")
        except Exception:
            db.session.rollback()
            raise

        logger.info("User updated: %s (roles=%s)", user.email, user.role_names)
        return user

    def delete_user(self, user_id: int, acting_user_id: int) -> None:
        """
        Delete a user together with its role links, its tokens and its files.

        Raises:
            SelfDeletionError: ``user_id`` is the acting user
        """
        if user_id == acting_user_id:
            logger.warning("Refused self-deletion for user_id=%s", acting_user_id)
            raise SelfDeletionError()

        user = self.get_user(user_id)
        email = user.email
        stored_paths = [f.path for f in File.query.filter_by(user_id=user.id).all()]

        try:
            db.session.execute(user_roles.delete().where(user_roles.c.user_id == user.id))
            session_service.revoke_all(user.id, commit=False)
            File.query.filter_by(user_id=user.id).delete()
            # Child rows are gone; reload the collections so the ORM has nothing left to unlink
            db.session.expire(user, ['roles', 'files', 'tokens'])
            db.session.delete(user)
            log_action(acting_user_id, 'DELETE_USER', f"user:{email}")
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        storage = FileStorageService()
        for path in stored_paths:
            if storage.exists(path):
                storage.delete(path)

        logger.info("User deleted: %s (%s file(s) removed)", email, len(stored_paths))

    # ------------------------ VALIDATION ------------------------

    def _validate_identity(self, name, email):
        if not isinstance(name, str) or not name.strip():
            raise ValidationError.for_field("name", "Name is required.")
        return name.strip(), self._validate_email(email)

    def _validate_email(self, email, ignore_id: int = None) -> str:
        if not isinstance(email, str) or not email.strip():
            raise ValidationError.for_field("email", "Email is required.")
        email = email.strip()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError.for_field("email", "Email must be a valid email address.")

        query = User.query.filter(User.email == email)
        if ignore_id is not None:
            query = query.filter(User.id != ignore_id)
        if query.first() is not None:
            raise ValidationError.for_field("email", "The email has already been taken.")
        return email

    def _validate_password(self, password):
        if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError.for_field(
                "password", f"Password must be at least {PASSWORD_MIN_LENGTH} characters."
            )
