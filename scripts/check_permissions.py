import os
import sys

# Ensure backend root is on sys.path when running this script directly
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_BACKEND_ROOT = os.path.dirname(_SCRIPT_DIR)
if _BACKEND_ROOT not in sys.path:
    sys.path.insert(0, _BACKEND_ROOT)

from app import create_app
from models.user import User
from services.access_control import effective_permissions
from utils.constants import ALL_PERMISSIONS

email = sys.argv[1] if len(sys.argv) > 1 else 'admin@example.com'

app = create_app()
with app.app_context():
    user = User.query.filter_by(email=email).first()
    if user is None:
        print(f'{email}: not found')
        sys.exit(1)

    print(f'{user.email} roles:', ', '.join(user.role_names) or '-')
    granted = effective_permissions(user)
    for permission in ALL_PERMISSIONS:
        print(f"  {'✔' if permission in granted else '✘'} {permission}")
