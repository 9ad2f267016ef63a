"""
Tests for event deletion and file orphaning.

Deleting an event either deletes its files (rows + stored bytes) or keeps
them as orphans with a reason naming the deleted event.
"""
from datetime import date, time
from unittest.mock import patch

import pytest
from django.core.files.storage import default_storage
from django.utils import timezone
from rest_framework import status

from apps.core.exceptions import NotFoundError
from apps.events.models import FileInfo, FileSlotChoices, HealthEvent
from apps.events.services import delete_event, event_orphan_reason

EVENTS_URL = '/api/v1/events/'


@pytest.mark.django_db
class TestOrphanReason:

    def test_reason_names_type_professional_title_and_date(self, receptor, make_professional, make_event):
        professional = make_professional(receptor, name='Dra. Ana Souza')
        event = make_event(receptor, professional, title='Check-up')

        reason = event_orphan_reason(event, deleted_on=date(2025, 10, 27))

        assert reason == "Consulta - Dra. Ana Souza: 'Check-up' foi deletado em 27/10/2025"

    def test_reason_without_professional(self, receptor, make_event):
        event = make_event(receptor, None, title='Exame de sangue', type='EXAME')

        reason = event_orphan_reason(event, deleted_on=date(2025, 1, 5))

        assert reason == "Exame: 'Exame de sangue' foi deletado em 05/01/2025"


@pytest.mark.django_db
class TestDeleteEvent:

    @pytest.fixture
    def event(self, receptor, make_professional, make_event):
        return make_event(receptor, make_professional(receptor))

    def test_default_orphans_files(self, receptor, event, make_file):
        make_file(receptor, event, slot=FileSlotChoices.RESULT, content=b'a')
        make_file(receptor, event, slot=FileSlotChoices.REQUEST, name='pedido.png', content=b'b')

        count = delete_event(event.id, receptor)

        assert count == 2
        assert not HealthEvent.objects.filter(pk=event.id).exists()
        orphans = FileInfo.objects.filter(user=receptor)
        assert orphans.count() == 2
        for f in orphans:
            assert f.is_orphaned
            assert f.event_id is None
            assert f.professional_id is None
            assert "'Consulta de rotina' foi deletado em" in f.orphaned_reason
            assert timezone.localdate().strftime('%d/%m/%Y') in f.orphaned_reason
            assert default_storage.exists(f.physical_path)

    def test_delete_files_removes_rows_and_bytes(
        self, receptor, event, make_file, django_capture_on_commit_callbacks
    ):
        stored = make_file(receptor, event, content=b'conteudo')
        key = stored.physical_path
        assert default_storage.exists(key)

        with django_capture_on_commit_callbacks(execute=True):
            count = delete_event(event.id, receptor, delete_files=True)

        assert count == 1
        assert not FileInfo.objects.filter(pk=stored.id).exists()
        assert not default_storage.exists(key)

    def test_missing_stored_object_is_not_fatal(
        self, receptor, event, make_file, django_capture_on_commit_callbacks
    ):
        f = make_file(receptor, event)
        FileInfo.objects.filter(pk=f.pk).update(physical_path='uploads/missing.png')

        with patch('apps.events.services.log_storage_delete_failed') as mock_log:
            with django_capture_on_commit_callbacks(execute=True):
                count = delete_event(event.id, receptor, delete_files=True)

        assert count == 1
        mock_log.assert_called_once_with('uploads/missing.png', reason='not_found')
        assert not HealthEvent.objects.filter(pk=event.id).exists()

    def test_storage_failure_is_logged_not_raised(
        self, receptor, event, make_file, django_capture_on_commit_callbacks
    ):
        make_file(receptor, event, content=b'x')

        with patch('apps.events.services.get_storage') as mock_storage, \
                patch('apps.events.services.log_storage_delete_failed') as mock_log:
            mock_storage.return_value.delete.side_effect = OSError('disk gone')
            with django_capture_on_commit_callbacks(execute=True):
                delete_event(event.id, receptor, delete_files=True)

        mock_log.assert_called_once()
        assert not FileInfo.objects.filter(user=receptor).exists()

    def test_stored_bytes_survive_a_rollback(self, receptor, event, make_file, django_capture_on_commit_callbacks):
        stored = make_file(receptor, event, content=b'x')

        with patch('apps.events.models.HealthEvent.delete', side_effect=RuntimeError('boom')):
            with django_capture_on_commit_callbacks(execute=True) as callbacks:
                with pytest.raises(RuntimeError):
                    delete_event(event.id, receptor, delete_files=True)

        assert callbacks == []
        assert FileInfo.objects.filter(pk=stored.id).exists()
        assert default_storage.exists(stored.physical_path)

    def test_other_users_event_is_not_found(self, other_receptor, event):
        with pytest.raises(NotFoundError):
            delete_event(event.id, other_receptor)

        assert HealthEvent.objects.filter(pk=event.id).exists()

    def test_orphaning_rolls_back_when_event_delete_fails(self, receptor, event, make_file):
        f = make_file(receptor, event)

        with patch('apps.events.models.HealthEvent.delete', side_effect=RuntimeError('boom')):
            with pytest.raises(RuntimeError):
                delete_event(event.id, receptor)

        f.refresh_from_db()
        assert not f.is_orphaned
        assert f.event_id == event.id


@pytest.mark.django_db
class TestDeleteEventApi:

    def test_delete_orphans_by_default(self, receptor_client, receptor, make_event, make_file):
        event = make_event(receptor)
        make_file(receptor, event)

        response = receptor_client.delete(f'{EVENTS_URL}{event.id}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'success': True, 'orphanedFiles': 1}

        orphans = receptor_client.get('/api/v1/repository/orphan-files/')
        assert orphans.status_code == status.HTTP_200_OK
        assert len(orphans.json()) == 1

    def test_delete_with_files(self, receptor_client, receptor, make_event, make_file):
        event = make_event(receptor)
        make_file(receptor, event)

        response = receptor_client.delete(f'{EVENTS_URL}{event.id}/?deleteFiles=true')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'success': True, 'deletedFiles': 1}
        assert not FileInfo.objects.filter(user=receptor).exists()

    def test_delete_unknown_event_returns_404(self, receptor_client):
        response = receptor_client.delete(f'{EVENTS_URL}00000000-0000-0000-0000-000000000000/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()['error'] == 'Evento não encontrado'

    def test_emissor_cannot_manage_events(self, emissor_client):
        response = emissor_client.get(EVENTS_URL)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestProfessionalDeletion:

    def test_files_of_deleted_professional_are_orphaned(self, receptor_client, receptor, make_professional, make_event, make_file):
        professional = make_professional(receptor, name='Dr. Pedro')
        event = make_event(receptor, professional, day=date(2025, 3, 1), start=time(8), end=time(9))
        f = make_file(receptor, event)

        response = receptor_client.delete(f'/api/v1/professionals/{professional.id}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'success': True, 'orphanedFiles': 1}
        f.refresh_from_db()
        assert f.is_orphaned
        assert f.orphaned_reason == 'Profissional deletado: Dr. Pedro'
        assert f.event_id is None
        assert f.professional_id is None
        assert not HealthEvent.objects.filter(pk=event.id).exists()

    def test_events_without_files_are_deleted_too(self, receptor_client, receptor, make_professional, make_event):
        professional = make_professional(receptor)
        make_event(receptor, professional)
        unrelated = make_event(receptor, None, start=time(14), end=time(15))

        response = receptor_client.delete(f'/api/v1/professionals/{professional.id}/')

        assert response.json() == {'success': True, 'orphanedFiles': 0}
        assert list(HealthEvent.objects.values_list('id', flat=True)) == [unrelated.id]
