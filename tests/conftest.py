"""
Pytest configuration and fixtures for backend tests
"""
import io

import pytest
from werkzeug.datastructures import FileStorage

from app import create_app
from config import Config
from extensions import db
from models.role import Role
from models.user import User
from services.seeder import seed_roles_and_permissions
from utils.constants import ADMIN_ROLE, MANAGEMENT_USER_ROLE, MANAGEMENT_FILE_ROLE

PASSWORD = 'secret-password'


@pytest.fixture
def app(tmp_path):
    """Create application for testing, with a fresh SQLite database per test"""
    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'test.db'}"
        JWT_SECRET_KEY = 'test-secret-key-long-enough-for-hs256-signing'
        UPLOAD_FOLDER = str(tmp_path / 'storage')
        LOG_LEVEL = 'WARNING'

    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        seed_roles_and_permissions()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def app_context(app):
    """Create application context"""
    with app.app_context():
        yield app


def create_user(app, name, email, role_names, password=PASSWORD):
    """Insert a user holding ``role_names`` and return its id"""
    with app.app_context():
        user = User(name=name, email=email)
        user.set_password(password)
        user.roles = Role.query.filter(Role.name.in_(role_names)).all()
        db.session.add(user)
        db.session.commit()
        return user.id


def login(client, email, password=PASSWORD):
    response = client.post('/auth/login', json={'email': email, 'password': password})
    assert response.status_code == 200
    token = response.get_json()['data']['token']
    return {'Authorization': f'Bearer {token}'}


def make_upload(filename, content=b'file-content', content_type='image/png'):
    return FileStorage(stream=io.BytesIO(content), filename=filename, content_type=content_type)


@pytest.fixture
def admin_id(app):
    return create_user(app, 'Admin User', 'admin@example.com', [ADMIN_ROLE])


@pytest.fixture
def manager_id(app):
    """Holds management-user only (manage-roles)"""
    return create_user(app, 'Management User', 'manager@example.com', [MANAGEMENT_USER_ROLE])


@pytest.fixture
def file_user_id(app):
    return create_user(app, 'File User', 'files@example.com', [MANAGEMENT_FILE_ROLE])


@pytest.fixture
def other_file_user_id(app):
    return create_user(app, 'Other File User', 'other.files@example.com', [MANAGEMENT_FILE_ROLE])


@pytest.fixture
def no_role_user_id(app):
    return create_user(app, 'Nobody', 'nobody@example.com', [])


@pytest.fixture
def admin_headers(client, admin_id):
    return login(client, 'admin@example.com')


@pytest.fixture
def manager_headers(client, manager_id):
    return login(client, 'manager@example.com')


@pytest.fixture
def file_user_headers(client, file_user_id):
    return login(client, 'files@example.com')


@pytest.fixture
def other_file_user_headers(client, other_file_user_id):
    return login(client, 'other.files@example.com')


@pytest.fixture
def no_role_headers(client, no_role_user_id):
    return login(client, 'nobody@example.com')
