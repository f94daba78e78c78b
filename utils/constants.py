# utils/constants.py

GUARD_NAME = "web"

MANAGE_ROLES = "manage-roles"
MANAGE_USERS = "manage-users"
MANAGE_FILES = "manage-files"

ALL_PERMISSIONS = (MANAGE_ROLES, MANAGE_USERS, MANAGE_FILES)

ADMIN_ROLE = "admin"
MANAGEMENT_USER_ROLE = "management-user"
MANAGEMENT_FILE_ROLE = "management-file"

# Role -> permissions granted at seed time
DEFAULT_ROLE_PERMISSIONS = {
    ADMIN_ROLE: list(ALL_PERMISSIONS),
    MANAGEMENT_USER_ROLE: [MANAGE_ROLES],
    MANAGEMENT_FILE_ROLE: [MANAGE_FILES],
}

PROTECTED_ROLES = frozenset(DEFAULT_ROLE_PERMISSIONS)

OVERRIDE_ROLE = ADMIN_ROLE
DEFAULT_REGISTRATION_ROLE = MANAGEMENT_FILE_ROLE
