"""
Tests for upload validation and the upload endpoint.
"""
import hashlib

import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework import status

from apps.core.exceptions import PayloadTooLargeError, ValidationError
from apps.core.models import AdminMetrics
from apps.uploads.models import StoredUpload
from apps.uploads.validator import (
    INVALID_TYPE_MESSAGE,
    UploadConfig,
    format_file_size,
    get_upload_config,
    validate_upload,
)

UPLOAD_URL = '/api/v1/uploads/'
IMAGE_TYPES = ('image/jpeg', 'image/png', 'image/gif', 'image/webp')


class TestFormatFileSize:

    @pytest.mark.parametrize('size,expected', [
        (0, '0KB'),
        (512, '1KB'),
        (2 * 1024, '2KB'),
        (10 * 1024, '10KB'),
        (1536 * 1024, '1.5MB'),
        (1024 * 1024, '1.0MB'),
    ])
    def test_formats(self, size, expected):
        assert format_file_size(size) == expected


class TestValidateUpload:

    config = UploadConfig(max_file_size=2 * 1024, allowed_mime_types=IMAGE_TYPES)

    def test_accepts_small_image(self):
        validate_upload(1024, 'image/png', self.config)

    def test_size_equal_to_limit_is_rejected(self):
        with pytest.raises(PayloadTooLargeError) as exc_info:
            validate_upload(2 * 1024, 'image/png', self.config)

        assert exc_info.value.message == 'Arquivo deve ter menos de 2KB. Tamanho atual: 2KB'

    def test_one_byte_under_limit_is_accepted(self):
        validate_upload(2 * 1024 - 1, 'image/jpeg', self.config)

    def test_oversize_message_reports_current_size(self):
        with pytest.raises(PayloadTooLargeError) as exc_info:
            validate_upload(3 * 1024 * 1024, 'image/png', self.config)

        assert exc_info.value.message == 'Arquivo deve ter menos de 2KB. Tamanho atual: 3.0MB'

    @pytest.mark.parametrize('content_type', ['application/pdf', 'text/plain', 'image/svg+xml', ''])
    def test_rejects_non_image_types(self, content_type):
        with pytest.raises(ValidationError) as exc_info:
            validate_upload(10, content_type, self.config)

        assert exc_info.value.message == INVALID_TYPE_MESSAGE

    def test_size_checked_before_type(self):
        with pytest.raises(PayloadTooLargeError):
            validate_upload(5 * 1024, 'application/pdf', self.config)


class TestUploadConfig:

    def test_production_limit(self):
        assert get_upload_config('production').max_file_size == 2 * 1024

    def test_development_limit(self):
        assert get_upload_config('development').max_file_size == 10 * 1024

    def test_unknown_env_uses_development(self):
        assert get_upload_config('staging') == get_upload_config('development')

    def test_follows_app_env(self, settings):
        settings.APP_ENV = 'production'
        assert get_upload_config().max_file_size == 2 * 1024


@pytest.mark.django_db
class TestUploadApi:

    def test_upload_stores_file_and_returns_metadata(self, receptor_client):
        content = b'\x89PNG\r\n\x1a\n fake image bytes'
        image = SimpleUploadedFile('exame.png', content, content_type='image/png')

        response = receptor_client.post(UPLOAD_URL, {'file': image}, format='multipart')

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data['name'] == 'exame.png'
        assert data['fileHash'] == hashlib.sha256(content).hexdigest()
        assert data['physicalPath'].startswith('uploads/')
        assert data['uploadDate']
        assert default_storage.exists(data['physicalPath'])
        assert AdminMetrics.load().total_upload_bytes == len(content)
        record = StoredUpload.objects.get(key=data['physicalPath'])
        assert record.user.email == 'receptor@test.com'
        assert record.file_hash == data['fileHash']

    def test_missing_file_returns_400(self, receptor_client):
        response = receptor_client.post(UPLOAD_URL, {}, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error'] == 'Nenhum arquivo enviado'

    def test_non_image_returns_400(self, receptor_client):
        pdf = SimpleUploadedFile('laudo.pdf', b'%PDF-1.4', content_type='application/pdf')

        response = receptor_client.post(UPLOAD_URL, {'file': pdf}, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error'] == INVALID_TYPE_MESSAGE

    def test_oversize_file_returns_413(self, receptor_client, settings):
        settings.APP_ENV = 'production'
        image = SimpleUploadedFile('grande.png', b'x' * 4096, content_type='image/png')

        response = receptor_client.post(UPLOAD_URL, {'file': image}, format='multipart')

        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        assert response.json()['error'] == 'Arquivo deve ter menos de 2KB. Tamanho atual: 4KB'
        assert AdminMetrics.load().total_upload_bytes == 0

    def test_requires_authentication(self, api_client):
        image = SimpleUploadedFile('foto.png', b'png', content_type='image/png')

        response = api_client.post(UPLOAD_URL, {'file': image}, format='multipart')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
