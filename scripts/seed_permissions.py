# scripts/seed_permissions.py
import os
import sys

# Ensure the backend package root is on sys.path so top-level imports resolve
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_BACKEND_ROOT = os.path.dirname(_SCRIPT_DIR)
if _BACKEND_ROOT not in sys.path:
    sys.path.insert(0, _BACKEND_ROOT)

from app import create_app
from models.role import Role
from services.seeder import seed_permissions as ensure_permissions, seed_roles


def seed_permissions():
    app = create_app()
    with app.app_context():
        guard_name = app.config["GUARD_NAME"]

        created = ensure_permissions(guard_name)
        print(f"✅ Ensured permission registry entries exist (created: {created})")

        created = seed_roles(guard_name)
        print(f"✅ Default roles created/ensured: {created}")

        for role in Role.query.filter_by(guard_name=guard_name).order_by(Role.id).all():
            print(f"   {role.name}: {', '.join(sorted(role.permission_names)) or '-'}")


if __name__ == "__main__":
    seed_permissions()
