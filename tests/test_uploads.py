"""
Tests for image uploads on the local and MinIO storage backends.

Business rules:
- Files above UPLOAD_MAX_FILE_SIZE get 413 before anything is written
- Only image MIME types are accepted
- Stored files are served back from /uploads/<key>
- On MinIO, an unreachable endpoint is a 503, never a 500
"""
import io
import os
import re
from unittest.mock import MagicMock, patch

import pytest
from urllib3.exceptions import MaxRetryError

from clinic_admin.errors import UpstreamStorageError
from clinic_admin.services.storage import MinioStorage, generate_object_key

PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 64


def _upload(client, data, filename='photo.png', content_type='image/png'):
    return client.post(
        '/api/uploads',
        data={'file': (io.BytesIO(data), filename, content_type)},
        content_type='multipart/form-data',
    )


def _stored_files(app):
    root = app.config['UPLOAD_FOLDER']
    if not os.path.exists(root):
        return []
    return [os.path.join(d, f) for d, _, files in os.walk(root) for f in files]


class TestUpload:

    def test_upload_and_serve(self, app, staff_client, client):
        response = _upload(staff_client, PNG_BYTES)

        assert response.status_code == 201
        body = response.get_json()
        assert body['success'] is True
        assert re.match(r'^/uploads/uploads/\d{13}-[0-9a-f-]{36}\.png$', body['url'])

        served = client.get(body['url'])
        assert served.status_code == 200
        assert served.data == PNG_BYTES

    def test_five_megabytes_is_too_large(self, app, staff_client):
        response = _upload(staff_client, b'\x00' * (5 * 1024 * 1024))

        assert response.status_code == 413
        assert _stored_files(app) == []

    def test_body_over_request_cap(self, app, staff_client):
        app.config['MAX_CONTENT_LENGTH'] = 1024
        response = _upload(staff_client, b'\x00' * 4096)
        assert response.status_code == 413

    def test_unsupported_type(self, app, staff_client):
        response = _upload(staff_client, b'%PDF-1.4', filename='doc.pdf', content_type='application/pdf')

        assert response.status_code == 400
        assert _stored_files(app) == []

    def test_missing_file(self, staff_client):
        response = staff_client.post('/api/uploads', data={}, content_type='multipart/form-data')
        assert response.status_code == 400

    def test_requires_login(self, client):
        assert _upload(client, PNG_BYTES).status_code == 401

    def test_unknown_file_is_404(self, client):
        assert client.get('/uploads/uploads/missing.png').status_code == 404


class TestObjectKeys:

    def test_extension_from_content_type(self):
        key = generate_object_key('blogs', 'no-extension', 'image/png')
        assert key.startswith('blogs/') and key.endswith('.png')

    def test_keys_are_unique(self):
        assert generate_object_key('x', 'a.png') != generate_object_key('x', 'a.png')


class TestMinioStorage:

    @pytest.fixture
    def storage(self):
        with patch('clinic_admin.services.storage.Minio') as minio_cls:
            client = MagicMock()
            client.bucket_exists.return_value = True
            minio_cls.return_value = client
            storage = MinioStorage('minio:9000', 'key', 'secret', 'clinic', public_url='https://cdn.example/clinic')
            yield storage

    def test_store_returns_public_url(self, storage):
        url = storage.store(PNG_BYTES, 'a.png', 'image/png', prefix='uploads')

        assert url.startswith('https://cdn.example/clinic/uploads/')
        args, kwargs = storage.client.put_object.call_args
        assert args[0] == 'clinic'
        assert kwargs['length'] == len(PNG_BYTES)
        assert kwargs['content_type'] == 'image/png'

    def test_client_has_bounded_timeouts(self):
        with patch('clinic_admin.services.storage.Minio') as minio_cls:
            MinioStorage('minio:9000', 'key', 'secret', 'clinic', timeout=2.0)

        http_client = minio_cls.call_args.kwargs['http_client']
        assert http_client.connection_pool_kw['timeout'].connect_timeout == 2.0
        assert http_client.connection_pool_kw['retries'].total == 1

    def test_unreachable_endpoint_is_upstream_error(self, storage):
        storage.client.put_object.side_effect = MaxRetryError(None, '/clinic/uploads/a.png')

        with pytest.raises(UpstreamStorageError):
            storage.store(PNG_BYTES, 'a.png', 'image/png')

    def test_unreachable_during_bucket_check(self, storage):
        storage.client.bucket_exists.side_effect = MaxRetryError(None, '/clinic')

        with pytest.raises(UpstreamStorageError):
            storage.store(PNG_BYTES, 'a.png', 'image/png')
        storage.client.put_object.assert_not_called()

    def test_delete_ignores_foreign_urls(self, storage):
        assert storage.delete('https://elsewhere.example/x.png') is False
        assert storage.delete('https://cdn.example/clinic/uploads/x.png') is True
        storage.client.remove_object.assert_called_once_with('clinic', 'uploads/x.png')


class TestMinioBackend:

    def test_upload_stored_as_object(self, minio_client, staff_client):
        response = _upload(staff_client, PNG_BYTES)

        assert response.status_code == 201
        assert response.get_json()['url'].startswith('http://cdn.example/clinic/uploads/')
        minio_client.put_object.assert_called_once()

    def test_unreachable_storage_is_503(self, minio_client, staff_client):
        minio_client.put_object.side_effect = MaxRetryError(None, '/clinic-uploads/uploads/a.png')

        response = _upload(staff_client, PNG_BYTES)

        assert response.status_code == 503
        assert response.get_json()['error'] == 'File storage is currently unavailable.'
