"""
Storage backends for uploaded files.

Two interchangeable backends, selected by settings.STORAGE_BACKEND:
- 'local': Django's default storage (MEDIA_ROOT on disk)
- 'minio': a MinIO/S3 bucket

Both expose save(content, filename) -> StoredObject, delete(key) -> bool,
open(key) and url(key).
"""
import io
import uuid
from dataclasses import dataclass

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from minio import Minio
from minio.error import S3Error


@dataclass(frozen=True)
class StoredObject:
    url: str
    key: str


def generate_object_key(prefix: str, filename: str) -> str:
    """
    Generate unique object key.

    Args:
        prefix: Folder prefix (e.g., 'uploads', 'reports')
        filename: Original filename
    """
    unique_id = uuid.uuid4().hex[:12]
    safe_filename = "".join(c for c in filename if c.isalnum() or c in "._-") or 'file'
    return f"{prefix}/{unique_id}_{safe_filename}"


class DjangoFileStorage:
    """Backend over django.core.files.storage.default_storage."""

    def __init__(self, storage=None, prefix='uploads'):
        self.storage = storage or default_storage
        self.prefix = prefix

    def save(self, content: bytes, filename: str, content_type: str = None) -> StoredObject:
        key = self.storage.save(generate_object_key(self.prefix, filename), ContentFile(content))
        return StoredObject(url=self.url(key), key=key)

    def delete(self, key: str) -> bool:
        if not key or not self.storage.exists(key):
            return False
        self.storage.delete(key)
        return True

    def open(self, key: str):
        return self.storage.open(key, 'rb')

    def url(self, key: str) -> str:
        return self.storage.url(key)


def get_minio_client():
    """Get configured MinIO client instance."""
    return Minio(
        settings.MINIO_ENDPOINT,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=settings.MINIO_USE_SSL
    )


class MinioStorage:
    """Backend over a MinIO bucket (settings.MINIO_UPLOADS_BUCKET)."""

    MISSING_OBJECT_CODES = {'NoSuchKey', 'NoSuchObject'}

    def __init__(self, client=None, bucket=None, prefix='uploads'):
        self.client = client or get_minio_client()
        self.bucket = bucket or settings.MINIO_UPLOADS_BUCKET
        self.prefix = prefix

    def save(self, content: bytes, filename: str, content_type: str = None) -> StoredObject:
        key = generate_object_key(self.prefix, filename)
        self.client.put_object(
            self.bucket,
            key,
            io.BytesIO(content),
            length=len(content),
            content_type=content_type or 'application/octet-stream'
        )
        return StoredObject(url=self.url(key), key=key)

    def delete(self, key: str) -> bool:
        if not key:
            return False
        try:
            self.client.stat_object(self.bucket, key)
        except S3Error as e:
            if e.code in self.MISSING_OBJECT_CODES:
                return False
            raise
        self.client.remove_object(self.bucket, key)
        return True

    def open(self, key: str):
        return self.client.get_object(self.bucket, key)

    def url(self, key: str) -> str:
        return f"{settings.MINIO_PUBLIC_URL.rstrip('/')}/{self.bucket}/{key}"


def get_storage(prefix='uploads'):
    """Return the backend configured by settings.STORAGE_BACKEND; new keys go under `prefix`."""
    backend = getattr(settings, 'STORAGE_BACKEND', 'local')
    if backend == 'minio':
        return MinioStorage(prefix=prefix)
    if backend == 'local':
        return DjangoFileStorage(prefix=prefix)
    raise ValueError(f'Unknown STORAGE_BACKEND: {backend}')
