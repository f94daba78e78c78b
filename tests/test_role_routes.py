"""
Tests for role management routes
"""
import pytest

from models.permission import Permission
from models.role import Role

from conftest import login


@pytest.fixture
def permission_ids(app):
    with app.app_context():
        return {p.name: p.id for p in Permission.query.all()}


class TestRoleRoutes:
    """Test cases for /rbac/roles"""

    def test_list_roles(self, client, manager_headers):
        response = client.get('/rbac/roles?per_page=2', headers=manager_headers)

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['total'] == 3
        assert data['per_page'] == 2
        assert data['last_page'] == 2
        assert [r['name'] for r in data['items']] == ['admin', 'management-user']
        assert 'permissions' in data['items'][0]

    def test_list_roles_search(self, client, manager_headers):
        response = client.get('/rbac/roles?search=file', headers=manager_headers)
        assert [r['name'] for r in response.get_json()['data']['items']] == ['management-file']

    def test_list_permissions(self, client, manager_headers):
        response = client.get('/rbac/roles/permissions', headers=manager_headers)

        assert response.status_code == 200
        assert [p['name'] for p in response.get_json()['data']] == [
            'manage-roles', 'manage-users', 'manage-files'
        ]

    def test_requires_manage_roles(self, client, file_user_headers):
        response = client.get('/rbac/roles', headers=file_user_headers)

        assert response.status_code == 403
        data = response.get_json()
        assert data['code'] == 'MISSING_PERMISSION'

    def test_requires_authentication(self, client):
        assert client.get('/rbac/roles').status_code == 401

    def test_create_update_delete(self, client, manager_headers, permission_ids):
        response = client.post('/rbac/roles', headers=manager_headers, json={
            'name': 'editor',
            'permissions': [permission_ids['manage-files']],
        })
        assert response.status_code == 201
        role = response.get_json()['data']
        assert [p['name'] for p in role['permissions']] == ['manage-files']

        response = client.put(f"/rbac/roles/{role['id']}", headers=manager_headers, json={
            'name': 'editor',
            'permissions': [permission_ids['manage-roles']],
        })
        assert response.status_code == 200
        assert [p['name'] for p in response.get_json()['data']['permissions']] == ['manage-roles']

        response = client.get(f"/rbac/roles/{role['id']}", headers=manager_headers)
        assert response.get_json()['data']['name'] == 'editor'

        response = client.delete(f"/rbac/roles/{role['id']}", headers=manager_headers)
        assert response.status_code == 200
        assert response.get_json()['message'] == 'Role deleted successfully.'

        assert client.get(f"/rbac/roles/{role['id']}", headers=manager_headers).status_code == 404

    def test_create_duplicate_name(self, client, manager_headers):
        response = client.post('/rbac/roles', headers=manager_headers, json={'name': 'admin'})

        assert response.status_code == 422
        assert response.get_json()['errors'] == {'name': ['Role name already exists.']}

    def test_create_unknown_permission(self, client, manager_headers):
        response = client.post('/rbac/roles', headers=manager_headers, json={
            'name': 'editor',
            'permissions': [12345],
        })
        assert response.status_code == 422
        assert 'permissions' in response.get_json()['errors']

    @pytest.mark.parametrize('name', ['admin', 'management-user', 'management-file'])
    def test_delete_protected_role(self, client, app, admin_headers, name):
        with app.app_context():
            role_id = Role.query.filter_by(name=name).first().id

        response = client.delete(f'/rbac/roles/{role_id}', headers=admin_headers)

        assert response.status_code == 422
        data = response.get_json()
        assert data['code'] == 'PROTECTED_RESOURCE'
        assert data['message'] == 'Cannot delete default roles.'

    def test_deleted_role_no_longer_grants(self, client, app, admin_headers, permission_ids):
        response = client.post('/rbac/roles', headers=admin_headers, json={
            'name': 'file-only',
            'permissions': [permission_ids['manage-files']],
        })
        role_id = response.get_json()['data']['id']

        response = client.post('/rbac/users', headers=admin_headers, json={
            'name': 'U1',
            'email': 'u1@example.com',
            'password': 'password123',
            'roles': [role_id],
        })
        assert response.status_code == 201

        u1_headers = login(client, 'u1@example.com', 'password123')
        assert client.get('/files', headers=u1_headers).status_code == 200

        assert client.delete(f'/rbac/roles/{role_id}', headers=admin_headers).status_code == 200
        assert client.get('/files', headers=u1_headers).status_code == 403

    def test_rename_protected_role(self, client, app, admin_headers, permission_ids):
        with app.app_context():
            role_id = Role.query.filter_by(name='management-file').first().id

        response = client.put(f'/rbac/roles/{role_id}', headers=admin_headers, json={'name': 'files'})
        assert response.status_code == 422
        assert response.get_json()['code'] == 'PROTECTED_RESOURCE'

        response = client.delete(f'/rbac/roles/{role_id}', headers=admin_headers)
        assert response.status_code == 422

        response = client.put(f'/rbac/roles/{role_id}', headers=admin_headers, json={
            'name': 'management-file',
            'permissions': [permission_ids['manage-files']],
        })
        assert response.status_code == 200

        response = client.post('/auth/register', json={
            'name': 'New User',
            'email': 'new@example.com',
            'password': 'password123',
        })
        assert response.status_code == 201
        assert [r['name'] for r in response.get_json()['data']['user']['roles']] == ['management-file']
