# routes/role_routes.py

from flask import Blueprint, request

from services.role_service import RoleService
from utils.constants import MANAGE_ROLES
from utils.responses import get_payload, pagination_args, paginated, success
from utils.security import require_permission

role_bp = Blueprint("roles", __name__)


@role_bp.route("/", methods=["GET"], strict_slashes=False)
@require_permission(MANAGE_ROLES)
def list_roles(ctx):
    page, per_page = pagination_args()
    roles = RoleService().list_roles(search=request.args.get("search"), page=page, per_page=per_page)
    return success(paginated(roles, lambda role: role.to_dict()))


@role_bp.route("/", methods=["POST"], strict_slashes=False)
@require_permission(MANAGE_ROLES)
def create_role(ctx):
    data = get_payload()
    role = RoleService().create_role(
        name=data.get("name"),
        permission_ids=data.get("permissions"),
        acting_user_id=ctx.user_id,
    )
    return success(role.to_dict(), "Role created successfully.", 201)


@role_bp.route("/permissions", methods=["GET"])
@require_permission(MANAGE_ROLES)
def list_permissions(ctx):
    permissions = RoleService().list_permissions()
    return success([p.to_dict() for p in permissions])


@role_bp.route("/<int:role_id>", methods=["GET"])
@require_permission(MANAGE_ROLES)
def show_role(role_id, ctx):
    return success(RoleService().get_role(role_id).to_dict())


@role_bp.route("/<int:role_id>", methods=["PUT", "PATCH"])
@require_permission(MANAGE_ROLES)
def update_role(role_id, ctx):
    data = get_payload()
    role = RoleService().update_role(
        role_id,
        name=data.get("name"),
        permission_ids=data.get("permissions"),
        acting_user_id=ctx.user_id,
    )
    return success(role.to_dict(), "Role updated successfully.")


@role_bp.route("/<int:role_id>", methods=["DELETE"])
@require_permission(MANAGE_ROLES)
def delete_role(role_id, ctx):
    RoleService().delete_role(role_id, acting_user_id=ctx.user_id)
    return success(message="Role deleted successfully.")
