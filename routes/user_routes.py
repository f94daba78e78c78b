# routes/user_routes.py

from flask import Blueprint, request

from services.user_service import UserService
from utils.constants import MANAGE_USERS
from utils.responses import get_payload, pagination_args, paginated, success
from utils.security import require_permission

user_bp = Blueprint("users", __name__)


@user_bp.route("/", methods=["GET"], strict_slashes=False)
@require_permission(MANAGE_USERS)
def list_users(ctx):
    page, per_page = pagination_args()
    users = UserService().list_users(
        search=request.args.get("search"),
        role=request.args.get("role"),
        page=page,
        per_page=per_page,
    )
    return success(paginated(users, lambda user: user.to_dict()))


@user_bp.route("/", methods=["POST"], strict_slashes=False)
@require_permission(MANAGE_USERS)
def create_user(ctx):
    data = get_payload()
    user = UserService().create_user(
        name=data.get("name"),
        email=data.get("email"),
        password=data.get("password"),
        role_ids=data.get("roles"),
        acting_user_id=ctx.user_id,
    )
    return success(user.to_dict(with_permissions=True), "User created successfully.", 201)


@user_bp.route("/roles", methods=["GET"])
@require_permission(MANAGE_USERS)
def list_assignable_roles(ctx):
    roles = UserService().list_assignable_roles()
    return success([role.to_dict(with_permissions=False) for role in roles])


@user_bp.route("/<int:user_id>", methods=["GET"])
@require_permission(MANAGE_USERS)
def show_user(user_id, ctx):
    return success(UserService().get_user(user_id).to_dict(with_permissions=True))


@user_bp.route("/<int:user_id>", methods=["PUT", "PATCH"])
@require_permission(MANAGE_USERS)
def update_user(user_id, ctx):
    data = get_payload()
    user = UserService().update_user(
        user_id,
        name=data.get("name"),
        email=data.get("email"),
        password=data.get("password"),
        role_ids=data.get("roles"),
        acting_user_id=ctx.user_id,
    )
    return success(user.to_dict(with_permissions=True), "User updated successfully.")


@user_bp.route("/<int:user_id>", methods=["DELETE"])
@require_permission(MANAGE_USERS)
def delete_user(user_id, ctx):
    UserService().delete_user(user_id, acting_user_id=ctx.user_id)
    return success(message="User deleted successfully.")
