#!/usr/bin/env python3
"""
Script pour initialiser la base de données
Crée les tables RBAC puis les permissions et rôles par défaut
"""

from sqlalchemy import inspect

from app import create_app
from extensions import db
from models import *  # Import tous les modèles
from services.seeder import seed_roles_and_permissions


def init_database():
    """Crée toutes les tables et le registre de permissions"""
    app = create_app()

    with app.app_context():
        print("Création de toutes les tables...")
        db.create_all()
        print("✅ Toutes les tables ont été créées avec succès!")

        seed_roles_and_permissions(app.config["GUARD_NAME"])
        print("✅ Permissions et rôles par défaut en place")

        tables = inspect(db.engine).get_table_names()
        print(f"\n📋 Tables ({len(tables)}):")
        for table in sorted(tables):
            print(f"  - {table}")


if __name__ == "__main__":
    init_database()
