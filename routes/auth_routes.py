# routes/auth_routes.py

from flask import Blueprint

from extensions import db
from services.session_service import session_service
from services.user_service import UserService
from utils.access_logger import log_action
from utils.responses import get_payload, success
from utils.security import authenticated

auth_bp = Blueprint("auth", __name__)


def _token_payload(user, token):
    return {
        'user': user.to_dict(with_permissions=True),
        'token': token,
        'token_type': 'Bearer',
    }


@auth_bp.route("/register", methods=["POST"])
def register():
    data = get_payload()
    user = UserService().register(
        name=data.get("name"),
        email=data.get("email"),
        password=data.get("password"),
    )
    token = session_service.issue(user)
    return success(_token_payload(user, token), "User registered successfully.", 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = get_payload()
    user = session_service.authenticate(data.get("email"), data.get("password"))
    token = session_service.issue(user)

    log_action(user.id, 'LOGIN', f"user:{user.email}")
    db.session.commit()
    return success(_token_payload(user, token), "Login successful.")


@auth_bp.route("/me", methods=["GET"])
@authenticated
def me(ctx):
    return success(ctx.user.to_dict(with_permissions=True))


@auth_bp.route("/logout", methods=["POST"])
@authenticated
def logout(ctx):
    session_service.revoke_current(ctx.token_jti)
    log_action(ctx.user_id, 'LOGOUT', f"user:{ctx.user.email}")
    db.session.commit()
    return success(message="Logged out successfully.")


@auth_bp.route("/logout-all", methods=["POST"])
@authenticated
def logout_all(ctx):
    count = session_service.revoke_all(ctx.user_id)
    log_action(ctx.user_id, 'LOGOUT_ALL', f"user:{ctx.user.email}", f"{count} token(s)")
    db.session.commit()
    return success(message="Logged out from all devices successfully.")
