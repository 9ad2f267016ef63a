"""
Global test fixtures for pytest.

Provides reusable fixtures for API testing:
- Users and authenticated API clients by role (RECEPTOR, EMISSOR, ADMIN)
- Model instances (Professional, HealthEvent, FileInfo, Notification)
- Isolated storage (MEDIA_ROOT in a temp dir) and a clean cache per test
"""
from datetime import date, time

import pytest
from django.core.cache import cache
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from rest_framework.test import APIClient

from apps.authz.models import EmissorInfo, RoleChoices, User
from apps.events.models import EventTypeChoices, FileInfo, FileSlotChoices, HealthEvent
from apps.events.services import combine_local
from apps.notifications.models import Notification, NotificationStatusChoices, NotificationTypeChoices
from apps.professionals.models import Professional


# ============================================================================
# Environment
# ============================================================================

@pytest.fixture(autouse=True)
def clean_cache():
    """Rate limiter state and share tokens live in the cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    """Local storage backend writes under a per-test directory."""
    settings.MEDIA_ROOT = str(tmp_path)
    settings.STORAGE_BACKEND = 'local'
    return tmp_path


# ============================================================================
# Users
# ============================================================================

@pytest.fixture
def receptor(db):
    return User.objects.create_user(
        email='receptor@test.com',
        password='testpass123',
        name='Maria Receptora',
        cpf='12345678901',
        role=RoleChoices.RECEPTOR,
    )


@pytest.fixture
def other_receptor(db):
    return User.objects.create_user(
        email='other@test.com',
        password='testpass123',
        name='João Outro',
        cpf='10987654321',
        role=RoleChoices.RECEPTOR,
    )


@pytest.fixture
def emissor(db):
    user = User.objects.create_user(
        email='lab@test.com',
        password='testpass123',
        name='Laboratório Central',
        role=RoleChoices.EMISSOR,
    )
    EmissorInfo.objects.create(user=user, clinic_name='Laboratório Central', cnpj='12345678000199')
    return user


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@test.com',
        password='testpass123',
        name='Admin',
        role=RoleChoices.ADMIN,
        is_staff=True,
    )


# ============================================================================
# API Clients
# ============================================================================

def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def api_client():
    """Unauthenticated DRF API client."""
    return APIClient()


@pytest.fixture
def receptor_client(receptor):
    return _client_for(receptor)


@pytest.fixture
def other_receptor_client(other_receptor):
    return _client_for(other_receptor)


@pytest.fixture
def emissor_client(emissor):
    return _client_for(emissor)


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


# ============================================================================
# Model factories
# ============================================================================

@pytest.fixture
def make_professional(db):
    def _make(user, name='Dra. Ana Souza', specialty='Cardiologia'):
        return Professional.objects.create(user=user, name=name, specialty=specialty)
    return _make


@pytest.fixture
def make_event(db):
    """
    Create a HealthEvent from local wall-clock values.

    make_event(user, professional, start=time(10), end=time(11))
    """
    def _make(
        user,
        professional=None,
        day=date(2025, 10, 27),
        start=time(10, 0),
        end=time(11, 0),
        title='Consulta de rotina',
        type=EventTypeChoices.CONSULTA,
    ):
        return HealthEvent.objects.create(
            user=user,
            professional=professional,
            title=title,
            type=type,
            date=day,
            start_time=combine_local(day, start),
            end_time=combine_local(day, end),
        )
    return _make


@pytest.fixture
def make_file(db):
    """Create a FileInfo; pass content to also write bytes to storage."""
    def _make(user, event=None, slot=FileSlotChoices.RESULT, name='laudo.png', content=None, **extra):
        physical_path = ''
        if content is not None:
            physical_path = default_storage.save(f'uploads/{name}', ContentFile(content))
        return FileInfo.objects.create(
            user=user,
            event=event,
            professional=event.professional if event else None,
            slot=slot,
            name=name,
            url=f'/uploads/{physical_path or name}',
            physical_path=physical_path,
            **extra
        )
    return _make


@pytest.fixture
def make_notification(db):
    def _make(user, payload=None, type=NotificationTypeChoices.INFO):
        return Notification.objects.create(
            user=user,
            type=type,
            status=NotificationStatusChoices.UNREAD,
            payload=payload or {'message': 'Olá'},
        )
    return _make
