# services/session_service.py

import logging
from datetime import datetime, timezone
from typing import Optional

from flask import jsonify
from flask_jwt_extended import create_access_token, decode_token

from extensions import db
from models.access_token import AccessToken
from models.user import User
from utils.errors import BadCredentialError, ValidationError

logger = logging.getLogger(__name__)


class SessionService:
    """Issues, resolves and revokes bearer tokens bound to a user"""

    TOKEN_NAME = "auth_token"

    def authenticate(self, email: str, password: str) -> User:
        """
        Verify a credential pair.

        Raises:
            ValidationError: email or password missing
            BadCredentialError: unknown email or wrong password
        """
        errors = {}
        if not isinstance(email, str) or not email.strip():
            errors["email"] = ["Email is required."]
        if not isinstance(password, str) or not password:
            errors["password"] = ["Password is required."]
        if errors:
            raise ValidationError(errors)

        user = User.query.filter_by(email=email.strip()).first()
        if not user or not user.check_password(password):
            logger.info("Failed login attempt for email=%s", email)
            raise BadCredentialError()
        return user

    def issue(self, user: User) -> str:
        """
        Create an access token for ``user`` and record it so it can be revoked.

        Returns:
            str: encoded JWT to be sent as ``Authorization: Bearer <token>``
        """
        token = create_access_token(identity=str(user.id))
        jti = decode_token(token)["jti"]

        db.session.add(AccessToken(user_id=user.id, jti=jti, name=self.TOKEN_NAME))
        db.session.commit()

        logger.debug("Issued token jti=%s for user_id=%s", jti, user.id)
        return token

    def resolve(self, jti: str, identity) -> Optional[User]:
        """
        Resolve a verified token to its user.

        Returns None when the token was revoked or the user no longer exists.
        """
        record = AccessToken.query.filter_by(jti=jti).first()
        if record is None:
            return None

        try:
            user_id = int(identity)
        except (TypeError, ValueError):
            return None
        if record.user_id != user_id:
            return None

        user = db.session.get(User, user_id)
        if user is None:
            return None

        record.last_used_at = datetime.now(timezone.utc)
        db.session.commit()
        return user

    def is_revoked(self, jti: str) -> bool:
        return AccessToken.query.filter_by(jti=jti).first() is None

    def revoke_current(self, jti: str) -> bool:
        deleted = AccessToken.query.filter_by(jti=jti).delete()
        db.session.commit()
        return deleted > 0

    def revoke_all(self, user_id: int, commit: bool = True) -> int:
        deleted = AccessToken.query.filter_by(user_id=user_id).delete()
        if commit:
            db.session.commit()
        logger.info("Revoked %s token(s) for user_id=%s", deleted, user_id)
        return deleted


session_service = SessionService()


def _unauthenticated(message="Unauthenticated."):
    return jsonify({'success': False, 'message': message, 'code': 'UNAUTHENTICATED'}), 401


def register_jwt_callbacks(jwt_manager):
    """Wire Flask-JWT-Extended to the token table and to the JSON error envelope"""

    @jwt_manager.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return session_service.is_revoked(jwt_payload["jti"])

    @jwt_manager.user_lookup_loader
    def load_user(jwt_header, jwt_data):
        return session_service.resolve(jwt_data["jti"], jwt_data["sub"])

    @jwt_manager.unauthorized_loader
    def missing_token(reason):
        return _unauthenticated()

    @jwt_manager.invalid_token_loader
    def invalid_token(reason):
        return _unauthenticated()

    @jwt_manager.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return _unauthenticated("Token has expired.")

    @jwt_manager.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return _unauthenticated("Token has been revoked.")

    @jwt_manager.user_lookup_error_loader
    def user_lookup_failed(jwt_header, jwt_payload):
        return _unauthenticated()
