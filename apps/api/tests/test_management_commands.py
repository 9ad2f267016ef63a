"""
Tests for management commands.
"""
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from apps.authz.models import RoleChoices, User
from apps.events.models import FileInfo


@pytest.mark.django_db
class TestCleanupOrphanFiles:

    @pytest.fixture
    def orphans(self, receptor, make_file):
        old = make_file(receptor, None, name='velho.png', is_orphaned=True, orphaned_reason='x')
        recent = make_file(receptor, None, name='novo.png', is_orphaned=True, orphaned_reason='x')
        FileInfo.objects.filter(pk=old.pk).update(updated_at=timezone.now() - timedelta(days=45))
        return old, recent

    def test_deletes_only_old_orphans(self, orphans):
        old, recent = orphans
        out = StringIO()

        call_command('cleanup_orphan_files', '--days', '30', stdout=out)

        assert not FileInfo.objects.filter(pk=old.pk).exists()
        assert FileInfo.objects.filter(pk=recent.pk).exists()
        assert 'Deleted 1' in out.getvalue()

    def test_dry_run_deletes_nothing(self, orphans):
        out = StringIO()

        call_command('cleanup_orphan_files', '--days', '30', '--dry-run', stdout=out)

        assert FileInfo.objects.count() == 2
        assert '1 orphaned file(s) would be deleted' in out.getvalue()


@pytest.mark.django_db
class TestCreateEmissor:

    def test_creates_emissor_with_info(self):
        call_command(
            'create_emissor', 'lab@omni.com',
            '--password', 'senha12345',
            '--clinic-name', 'Laboratório Omni',
            '--cnpj', '12.345.678/0001-99',
            stdout=StringIO(),
        )

        user = User.objects.get(email='lab@omni.com')
        assert user.role == RoleChoices.EMISSOR
        assert user.emissor_info.clinic_name == 'Laboratório Omni'

    def test_existing_user_is_left_alone(self, receptor):
        out = StringIO()

        call_command(
            'create_emissor', receptor.email,
            '--password', 'x', '--clinic-name', 'Y',
            stdout=out,
        )

        receptor.refresh_from_db()
        assert receptor.role == RoleChoices.RECEPTOR
        assert 'already exists' in out.getvalue()


@pytest.mark.django_db
def test_ensure_superuser_creates_admin(monkeypatch):
    monkeypatch.setenv('DJANGO_SUPERUSER_EMAIL', 'root@omni.com')
    monkeypatch.setenv('DJANGO_SUPERUSER_PASSWORD', 'senha12345')

    call_command('ensure_superuser', stdout=StringIO())

    admin = User.objects.get(email='root@omni.com')
    assert admin.role == RoleChoices.ADMIN
    assert admin.is_superuser
