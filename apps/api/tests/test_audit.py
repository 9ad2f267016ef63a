"""
Tests for the audit trail: what gets recorded, and the ADMIN listing.
"""
from unittest.mock import patch

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from rest_framework import status

from apps.audit.models import AuditActionChoices, AuditLog, AuditOriginChoices, AuditStatusChoices
from apps.audit.services import log_document_event, log_security_event
from apps.reports.models import Report
from apps.uploads.models import StoredUpload

AUDIT_URL = '/api/v1/admin/audit-log/'
UPLOAD_URL = '/api/v1/uploads/'
REPORTS_URL = '/api/v1/reports/'


def _image(name='foto.png', content=b'\x89PNG small', content_type='image/png'):
    return SimpleUploadedFile(name, content, content_type=content_type)


@pytest.mark.django_db
class TestSecurityEvents:

    def test_rate_limited_upload_is_recorded(self, receptor_client, receptor, settings):
        settings.UPLOAD_RATE_LIMIT = {'LIMIT': 1, 'WINDOW_SECONDS': 3600, 'BLOCK_SECONDS': 900, 'DISABLED': False}
        receptor_client.post(UPLOAD_URL, {'file': _image()}, format='multipart', REMOTE_ADDR='10.2.2.2')

        response = receptor_client.post(UPLOAD_URL, {'file': _image()}, format='multipart', REMOTE_ADDR='10.2.2.2')

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        entry = AuditLog.objects.get(action=AuditActionChoices.RATE_LIMIT_EXCEEDED)
        assert entry.status == AuditStatusChoices.REJECTED
        assert entry.actor_user == receptor
        assert entry.resource == UPLOAD_URL
        assert entry.ip_address == '10.2.2.2'
        assert entry.metadata == {'retryAfter': 900}

    def test_bad_type_is_recorded(self, receptor_client, receptor):
        pdf = _image('laudo.pdf', b'%PDF-1.4', 'application/pdf')

        receptor_client.post(UPLOAD_URL, {'file': pdf}, format='multipart')

        entry = AuditLog.objects.get(action=AuditActionChoices.INVALID_FILE_TYPE)
        assert entry.actor_user == receptor
        assert entry.metadata['content_type'] == 'application/pdf'

    def test_oversize_file_is_recorded(self, receptor_client, settings):
        settings.APP_ENV = 'production'

        receptor_client.post(UPLOAD_URL, {'file': _image(content=b'x' * 4096)}, format='multipart')

        entry = AuditLog.objects.get(action=AuditActionChoices.FILE_TOO_LARGE)
        assert entry.metadata['size'] == 4096
        assert not StoredUpload.objects.exists()

    def test_accepted_upload_is_not_a_security_event(self, receptor_client):
        receptor_client.post(UPLOAD_URL, {'file': _image()}, format='multipart')

        assert not AuditLog.objects.exists()


@pytest.mark.django_db
class TestDocumentEvents:

    def test_report_submission_is_recorded(self, emissor_client, emissor, receptor):
        response = emissor_client.post(REPORTS_URL, {
            'title': 'Hemograma',
            'file_name': 'hemograma.pdf',
            'file_url': '/uploads/hemograma.pdf',
            'receiver_id': str(receptor.id),
        }, format='json')

        entry = AuditLog.objects.get(action=AuditActionChoices.DOCUMENT_SUBMITTED)
        assert entry.origin == AuditOriginChoices.PORTAL_EMISSOR
        assert entry.actor_user == emissor
        assert entry.protocol == response.json()['protocol']
        assert entry.emitter_cnpj == '12345678000199'
        assert entry.receiver_cpf == '12345678901'
        assert entry.file_name == 'hemograma.pdf'

    def test_attachment_is_recorded(self, receptor_client, receptor):
        StoredUpload.objects.create(key='uploads/exame.png', url='/uploads/exame.png', user=receptor, name='exame.png')

        response = receptor_client.post('/api/v1/events/', {
            'title': 'Exame',
            'type': 'EXAME',
            'date': '2025-10-27',
            'start_time': '08:00',
            'end_time': '08:30',
            'files': [{
                'slot': 'result',
                'name': 'exame.png',
                'url': '/uploads/exame.png',
                'physical_path': 'uploads/exame.png',
                'file_hash': 'ab' * 32,
            }],
        }, format='json')

        entry = AuditLog.objects.get(action=AuditActionChoices.FILE_ATTACHED)
        assert entry.document_type == 'result'
        assert entry.file_hash == 'ab' * 32
        assert entry.metadata == {'event_id': response.json()['id']}

    def test_file_download_is_recorded(self, receptor_client, receptor, make_event, make_file):
        f = make_file(receptor, make_event(receptor), content=b'bytes')

        receptor_client.get(f'/api/v1/files/{f.id}/download/')

        entry = AuditLog.objects.get(action=AuditActionChoices.DOCUMENT_DOWNLOADED)
        assert entry.actor_user == receptor
        assert entry.file_name == f.name
        assert entry.metadata == {'file_id': str(f.id)}

    def test_report_download_is_recorded(self, receptor_client, emissor, receptor):
        key = default_storage.save('reports/hemograma.png', ContentFile(b'img'))
        report = Report.objects.create(
            protocol='2025-00001', title='Hemograma', file_name='hemograma.png',
            file_url=f'/{key}', physical_path=key, sender=emissor, receiver=receptor,
        )

        receptor_client.get(f'{REPORTS_URL}{report.id}/download/')

        entry = AuditLog.objects.get(action=AuditActionChoices.DOCUMENT_DOWNLOADED)
        assert entry.protocol == '2025-00001'
        assert entry.receiver_cpf == '12345678901'

    def test_failed_audit_write_does_not_break_the_request(self, emissor_client, receptor):
        with patch('apps.audit.services.AuditLog') as audit_model:
            audit_model.objects.create.side_effect = DatabaseError('audit table unavailable')
            response = emissor_client.post(REPORTS_URL, {
                'title': 'Hemograma',
                'file_name': 'hemograma.pdf',
                'file_url': '/uploads/hemograma.pdf',
                'receiver_id': str(receptor.id),
            }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Report.objects.count() == 1
        assert not AuditLog.objects.exists()


@pytest.mark.django_db
class TestAuditLogListing:

    @pytest.fixture
    def entries(self, receptor, emissor):
        return [
            log_document_event(AuditActionChoices.DOCUMENT_SUBMITTED, emissor, 'a.pdf', protocol='2025-00001'),
            log_document_event(AuditActionChoices.DOCUMENT_DOWNLOADED, receptor, 'a.pdf'),
            log_security_event(AuditActionChoices.RATE_LIMIT_EXCEEDED, UPLOAD_URL, user=receptor),
        ]

    def test_admin_lists_entries(self, admin_client, entries):
        response = admin_client.get(AUDIT_URL)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data['pagination']['total'] == 3
        assert {e['id'] for e in data['entries']} == {str(e.id) for e in entries}

    def test_filter_by_category(self, admin_client, entries):
        documents = admin_client.get(f'{AUDIT_URL}?category=document').json()['entries']
        security = admin_client.get(f'{AUDIT_URL}?category=security').json()['entries']

        assert {e['action'] for e in documents} == {'DOCUMENT_SUBMITTED', 'DOCUMENT_DOWNLOADED'}
        assert [e['action'] for e in security] == ['RATE_LIMIT_EXCEEDED']

    def test_filter_by_action(self, admin_client, entries):
        data = admin_client.get(f'{AUDIT_URL}?action=DOCUMENT_SUBMITTED').json()

        assert [e['protocol'] for e in data['entries']] == ['2025-00001']
        assert data['entries'][0]['actor_email'] == 'lab@test.com'

    def test_unknown_category_returns_400(self, admin_client):
        response = admin_client.get(f'{AUDIT_URL}?category=billing')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_limit_is_capped_at_100(self, admin_client, entries):
        data = admin_client.get(f'{AUDIT_URL}?limit=500').json()

        assert data['pagination']['limit'] == 100

    @pytest.mark.parametrize('client_fixture', ['receptor_client', 'emissor_client'])
    def test_non_admin_is_forbidden(self, request, client_fixture):
        client = request.getfixturevalue(client_fixture)

        response = client.get(AUDIT_URL)

        assert response.status_code == status.HTTP_403_FORBIDDEN
