"""
Professional services.
"""
from django.db import transaction
from django.db.models import Q

from apps.core.exceptions import NotFoundError
from apps.core.observability import log_domain_event
from apps.core.observability.events import log_files_orphaned
from apps.events.models import FileInfo, HealthEvent
from apps.events.services import orphan_files, professional_orphan_reason
from apps.professionals.models import DEFAULT_SPECIALTY, Professional


def delete_professional(professional_id, user) -> int:
    """
    Delete a professional owned by `user`.

    Every file linked to the professional, directly or through one of its
    events, is orphaned first with reason "Profissional deletado: <name>".
    The professional's events are then deleted with it.

    Returns the number of orphaned files.

    Raises:
        NotFoundError: professional missing or owned by someone else
    """
    with transaction.atomic():
        professional = (
            Professional.objects.select_for_update()
            .filter(pk=professional_id, user=user)
            .first()
        )
        if professional is None:
            raise NotFoundError('Profissional não encontrado.')

        files = FileInfo.objects.filter(
            Q(professional=professional) | Q(event__professional=professional),
            is_orphaned=False,
        )
        count = orphan_files(
            files,
            professional_orphan_reason(professional),
            source='professional',
        )

        events = HealthEvent.objects.filter(professional=professional)
        events_deleted = events.count()
        events.delete()
        professional.delete()

    if count:
        log_files_orphaned('Professional', professional_id, count, user_id=user.id)
    log_domain_event(
        'professional_deleted',
        entity_type='Professional',
        entity_id=str(professional_id),
        entity_ids={'user_id': str(user.id)},
        orphaned_files=count,
        events_deleted=events_deleted,
    )
    return count


def list_specialties(user):
    """Distinct specialties of the user's professionals, placeholder excluded."""
    return sorted(
        set(
            Professional.objects.filter(user=user)
            .exclude(specialty__in=['', DEFAULT_SPECIALTY])
            .values_list('specialty', flat=True)
        )
    )
