from dataclasses import dataclass
from functools import wraps
from typing import FrozenSet

from flask import current_app
from flask_jwt_extended import verify_jwt_in_request, get_jwt, get_current_user

from services.access_control import authorize, effective_permissions
from utils.errors import UnauthenticatedError


@dataclass(frozen=True)
class SessionContext:
    """
    Authenticated state for a single request.

    Built after the bearer token is verified and handed to the view as its
    ``ctx`` argument; it goes away with the request.
    """
    user: object
    token_jti: str

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def permissions(self) -> FrozenSet[str]:
        return effective_permissions(self.user)


def build_session_context() -> SessionContext:
    verify_jwt_in_request()
    user = get_current_user()
    if user is None:
        raise UnauthenticatedError()
    return SessionContext(user=user, token_jti=get_jwt()["jti"])


def authenticated(f):
    """Require a valid bearer token and inject the session context as ``ctx``"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        ctx = build_session_context()
        return f(*args, ctx=ctx, **kwargs)
    return decorated_function


def require_permission(permission):
    """
    Route-level gate: the caller must hold ``permission`` through one of its roles.

    The check runs before the view, so no resource is looked up for a caller
    who lacks the permission.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            ctx = build_session_context()
            decision = authorize(ctx.user, permission,
                                 override_role=current_app.config["OVERRIDE_ROLE"])
            decision.raise_for_denial(permission)
            return f(*args, ctx=ctx, **kwargs)
        return decorated_function
    return decorator
