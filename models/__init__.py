from .permission import Permission
from .role import Role, role_permissions, user_roles
from .user import User
from .file import File
from .access_token import AccessToken
from .access_log import AccessLog

__all__ = [
    "Permission",
    "Role",
    "role_permissions",
    "user_roles",
    "User",
    "File",
    "AccessToken",
    "AccessLog",
]
