import argparse

from app import create_app
from services.seeder import DEMO_PASSWORD, seed_roles_and_permissions, seed_demo_users


def seed_users(password=DEMO_PASSWORD):
    app = create_app()
    with app.app_context():
        # Les rôles doivent exister avant d'être attribués
        seed_roles_and_permissions(app.config["GUARD_NAME"])

        created = seed_demo_users(password=password, guard_name=app.config["GUARD_NAME"])
        if created:
            for user in created:
                print(f"✅ {user.email} ({', '.join(user.role_names)})")
        else:
            print("⚠️ Les comptes de démonstration existent déjà.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the demo accounts")
    parser.add_argument("--password", default=DEMO_PASSWORD)
    args = parser.parse_args()
    seed_users(args.password)
