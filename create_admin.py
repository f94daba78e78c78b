#!/usr/bin/env python3
"""
Script pour créer un utilisateur administrateur
"""

import argparse
import sys

from app import create_app
from services.seeder import seed_roles_and_permissions
from services.user_service import UserService
from models.role import Role
from utils.errors import ValidationError


def create_admin_user(name, email, password):
    """Crée un compte portant le rôle admin"""
    app = create_app()

    with app.app_context():
        seed_roles_and_permissions(app.config["GUARD_NAME"])
        admin_role = Role.query.filter_by(
            name=app.config["OVERRIDE_ROLE"], guard_name=app.config["GUARD_NAME"]
        ).first()

        try:
            admin_user = UserService().create_user(
                name=name, email=email, password=password, role_ids=[admin_role.id]
            )
        except ValidationError as e:
            print(f"❌ {e.message}")
            for field, messages in (e.errors or {}).items():
                print(f"   {field}: {' '.join(messages)}")
            return None

        print("✅ Utilisateur administrateur créé:")
        print(f"   Name: {admin_user.name}")
        print(f"   Email: {admin_user.email}")
        print(f"   Roles: {', '.join(admin_user.role_names)}")
        print(f"   ID: {admin_user.id}")
        return admin_user


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create an administrator account")
    parser.add_argument("--name", default="Administrator")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    args = parser.parse_args()

    if create_admin_user(args.name, args.email, args.password) is None:
        sys.exit(1)
