"""
Pluggable file storage for uploaded images.

``LocalStorage`` writes under UPLOAD_FOLDER and serves files from
``/uploads/<key>``; ``MinioStorage`` puts objects in an S3-compatible bucket.
Both expose ``store(data, filename, content_type, prefix) -> url`` and
``delete(url)``. The backend is picked by STORAGE_BACKEND the first time it is
needed and cached on the app.
"""
import io
import logging
import mimetypes
import os
import time
import uuid

import urllib3
from flask import current_app
from minio import Minio
from minio.error import S3Error

from clinic_admin.errors import PayloadTooLargeError, UpstreamStorageError, ValidationError

logger = logging.getLogger(__name__)

_EXTENSION_KEY = 'clinic_admin.storage'

# Backend failures: S3 error responses and transport errors (refused, timed out)
STORAGE_ERRORS = (S3Error, urllib3.exceptions.HTTPError)


def generate_object_key(prefix, filename, content_type=None):
    """
    Unique key of the form ``<prefix>/<epoch-ms>-<uuid4><ext>``.
    The client filename only contributes its extension.
    """
    ext = os.path.splitext(filename or '')[1].lower()
    if not ext and content_type:
        ext = mimetypes.guess_extension(content_type) or ''
    name = f"{int(time.time() * 1000)}-{uuid.uuid4()}{ext}"
    prefix = (prefix or '').strip('/')
    return f"{prefix}/{name}" if prefix else name


class LocalStorage:
    """Files on local disk, served by the uploads blueprint."""

    def __init__(self, root, url_prefix='/uploads'):
        self.root = os.path.abspath(root)
        self.url_prefix = url_prefix.rstrip('/')

    def store(self, data, filename, content_type, prefix='uploads'):
        key = generate_object_key(prefix, filename, content_type)
        path = os.path.join(self.root, *key.split('/'))
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'wb') as fh:
                fh.write(data)
        except OSError as e:
            logger.error("Local upload write failed for %s: %s", key, e)
            raise UpstreamStorageError() from e
        logger.info("Stored upload %s (%d bytes)", key, len(data))
        return f"{self.url_prefix}/{key}"

    def path_for(self, url):
        """Absolute path for one of our URLs, or None for foreign URLs."""
        if not url or not url.startswith(self.url_prefix + '/'):
            return None
        key = url[len(self.url_prefix) + 1:]
        path = os.path.abspath(os.path.join(self.root, *key.split('/')))
        if not path.startswith(self.root + os.sep):
            return None
        return path

    def delete(self, url):
        path = self.path_for(url)
        if path is None:
            return False
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise UpstreamStorageError() from e
        logger.info("Deleted upload %s", url)
        return True


class MinioStorage:
    """Objects in a MinIO / S3-compatible bucket."""

    def __init__(self, endpoint, access_key, secret_key, bucket, secure=False, public_url=None,
                 timeout=5.0):
        http_client = urllib3.PoolManager(
            timeout=urllib3.Timeout(connect=timeout, read=timeout),
            retries=urllib3.Retry(total=1, backoff_factor=0.2, status_forcelist=[500, 502, 503, 504]),
        )
        self.client = Minio(
            endpoint,
            access_key=access_key,
            secret_key=secret_key,
            secure=secure,
            http_client=http_client,
        )
        self.bucket = bucket
        scheme = 'https' if secure else 'http'
        self.public_url = (public_url or f"{scheme}://{endpoint}/{bucket}").rstrip('/')
        self._bucket_checked = False

    def _ensure_bucket(self):
        if self._bucket_checked:
            return
        if not self.client.bucket_exists(self.bucket):
            self.client.make_bucket(self.bucket)
            logger.info("Created storage bucket %s", self.bucket)
        self._bucket_checked = True

    def store(self, data, filename, content_type, prefix='uploads'):
        key = generate_object_key(prefix, filename, content_type)
        try:
            self._ensure_bucket()
            self.client.put_object(
                self.bucket,
                key,
                io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except STORAGE_ERRORS as e:
            logger.error("Object storage upload failed for %s: %s", key, e)
            raise UpstreamStorageError() from e
        logger.info("Stored object %s/%s (%d bytes)", self.bucket, key, len(data))
        return f"{self.public_url}/{key}"

    def object_key(self, url):
        if not url:
            return None
        if url.startswith(self.public_url + '/'):
            return url[len(self.public_url) + 1:]
        return None

    def delete(self, url):
        key = self.object_key(url)
        if key is None:
            return False
        try:
            self.client.remove_object(self.bucket, key)
        except STORAGE_ERRORS as e:
            logger.error("Object storage delete failed for %s: %s", key, e)
            raise UpstreamStorageError() from e
        logger.info("Deleted object %s/%s", self.bucket, key)
        return True


def create_storage(config):
    backend = (config.get('STORAGE_BACKEND') or 'local').lower()
    if backend == 'minio':
        return MinioStorage(
            config['MINIO_ENDPOINT'],
            config.get('MINIO_ACCESS_KEY'),
            config.get('MINIO_SECRET_KEY'),
            config['MINIO_BUCKET'],
            secure=config.get('MINIO_SECURE', False),
            public_url=config.get('MINIO_PUBLIC_URL'),
            timeout=config.get('MINIO_TIMEOUT', 5.0),
        )
    if backend == 'local':
        return LocalStorage(config['UPLOAD_FOLDER'], config.get('UPLOAD_URL_PREFIX', '/uploads'))
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")


def get_storage():
    """Storage backend for the current app, created on first use."""
    storage = current_app.extensions.get(_EXTENSION_KEY)
    if storage is None:
        storage = create_storage(current_app.config)
        current_app.extensions[_EXTENSION_KEY] = storage
    return storage


def discard_file(url):
    """
    Best-effort removal of a replaced image; failures are only logged.
    Callers have already committed, so nothing here may fail the request.
    """
    if not url:
        return
    try:
        get_storage().delete(url)
    except (UpstreamStorageError, OSError, *STORAGE_ERRORS) as e:
        logger.warning("Could not remove stored file %s: %s", url, e)


def validate_upload(data, content_type):
    """Enforce the size and MIME limits before anything is written."""
    max_size = current_app.config['UPLOAD_MAX_FILE_SIZE']
    if len(data) > max_size:
        raise PayloadTooLargeError(f"File too large. Maximum size is {max_size // (1024 * 1024)} MB.")
    if not data:
        raise ValidationError('No file uploaded', field='file')
    if content_type not in current_app.config['UPLOAD_ALLOWED_MIME']:
        raise ValidationError('Unsupported file type', field='file')
