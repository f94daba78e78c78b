"""
Tests for file routes: batch upload, ownership scoping and downloads
"""
import io


def upload(client, headers, *files):
    return client.post(
        '/files/upload',
        headers=headers,
        data={'files': [(io.BytesIO(content), name) for name, content in files]},
        content_type='multipart/form-data',
    )


class TestFileRoutes:
    """Test cases for /files"""

    def test_upload_partial_success(self, client, file_user_headers):
        response = upload(
            client, file_user_headers,
            ('one.png', b'first'),
            ('two.txt', b'second'),
            ('three.jpg', b'third'),
        )

        assert response.status_code == 201
        data = response.get_json()
        assert data['success'] is True
        assert data['message'] == '2 file(s) uploaded successfully.'
        assert [f['name'] for f in data['data']] == ['one.png', 'three.jpg']
        assert data['errors'] == [{'file': 'two.txt', 'error': 'Each file must be one of: jpeg, jpg, mp4, png.'}]

    def test_upload_all_valid(self, client, file_user_headers):
        response = upload(client, file_user_headers, ('a.png', b'a'), ('b.mp4', b'b'))

        assert response.status_code == 201
        data = response.get_json()
        assert data['errors'] is None
        assert data['data'][0]['url'].endswith(f"/files/{data['data'][0]['id']}/download")

    def test_upload_all_failed(self, client, file_user_headers):
        response = upload(client, file_user_headers, ('a.txt', b'a'), ('b.png', b''))

        assert response.status_code == 422
        data = response.get_json()
        assert data['success'] is False
        assert len(data['errors']) == 2

    def test_upload_without_files(self, client, file_user_headers):
        response = client.post('/files/upload', headers=file_user_headers, data={},
                               content_type='multipart/form-data')

        assert response.status_code == 422
        assert response.get_json()['errors'] == {'files': ['At least one file is required.']}

    def test_requires_manage_files(self, client, manager_headers):
        response = client.get('/files', headers=manager_headers)
        assert response.status_code == 403

    def test_list_scoped_to_owner(self, client, file_user_headers, other_file_user_headers, admin_headers):
        upload(client, file_user_headers, ('mine.png', b'1'))
        upload(client, other_file_user_headers, ('theirs.png', b'2'))

        mine = client.get('/files', headers=file_user_headers).get_json()['data']
        assert [f['name'] for f in mine['items']] == ['mine.png']
        assert mine['total'] == 1

        everything = client.get('/files', headers=admin_headers).get_json()['data']
        assert {f['name'] for f in everything['items']} == {'mine.png', 'theirs.png'}

    def test_show_and_download_ownership(self, client, file_user_headers, other_file_user_headers,
                                         admin_headers):
        file_id = upload(client, file_user_headers, ('mine.png', b'png-bytes')).get_json()['data'][0]['id']

        response = client.get(f'/files/{file_id}', headers=file_user_headers)
        assert response.status_code == 200
        assert response.get_json()['data']['user']['email'] == 'files@example.com'

        response = client.get(f'/files/{file_id}/download', headers=file_user_headers)
        assert response.status_code == 200
        assert response.data == b'png-bytes'
        assert 'attachment' in response.headers['Content-Disposition']
        assert 'mine.png' in response.headers['Content-Disposition']

        response = client.get(f'/files/{file_id}', headers=other_file_user_headers)
        assert response.status_code == 403
        assert response.get_json()['code'] == 'NOT_OWNER'
        assert client.get(f'/files/{file_id}/download', headers=other_file_user_headers).status_code == 403

        assert client.get(f'/files/{file_id}/download', headers=admin_headers).status_code == 200

    def test_delete_ownership(self, client, file_user_headers, other_file_user_headers):
        file_id = upload(client, file_user_headers, ('mine.png', b'1')).get_json()['data'][0]['id']

        assert client.delete(f'/files/{file_id}', headers=other_file_user_headers).status_code == 403

        response = client.delete(f'/files/{file_id}', headers=file_user_headers)
        assert response.status_code == 200
        assert client.get(f'/files/{file_id}', headers=file_user_headers).status_code == 404

    def test_admin_deletes_any_file(self, client, file_user_headers, admin_headers):
        file_id = upload(client, file_user_headers, ('mine.png', b'1')).get_json()['data'][0]['id']
        assert client.delete(f'/files/{file_id}', headers=admin_headers).status_code == 200

    def test_missing_file(self, client, admin_headers):
        assert client.get('/files/9999', headers=admin_headers).status_code == 404
