"""
Health event and file services.

Every write path that touches more than one row runs inside a single
transaction.atomic() block:
- event create/update + file slot replacement + notification archival
- event delete + file orphaning (or file deletion)
- professional delete + file orphaning

Stored bytes are removed with transaction.on_commit(), so a rollback never
loses file content. Attachments may only reference storage keys their caller
uploaded, and bytes still referenced by another row are never removed.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction
from django.utils import timezone

from apps.audit.models import AuditActionChoices
from apps.audit.services import log_document_event
from apps.authz.models import RoleChoices
from apps.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from apps.core.observability import log_domain_event, metrics
from apps.core.observability.events import log_files_orphaned, log_storage_delete_failed
from apps.core.observability.logging import get_sanitized_logger
from apps.events.models import FileInfo, FileSlotChoices, HealthEvent
from apps.events.overlap import check_overlap
from apps.notifications.services import archive_notification
from apps.professionals.models import Professional
from apps.reports.models import Report
from apps.uploads.models import StoredUpload
from apps.uploads.services import owned_keys
from apps.uploads.storage import get_storage

logger = get_sanitized_logger(__name__)

EVENT_FIELDS = ('title', 'description', 'observation', 'type', 'date')


# ============================================================================
# Helpers
# ============================================================================

def combine_local(date, time):
    """Local wall-clock date + time -> aware datetime in the active timezone."""
    if date is None or time is None:
        return None
    return timezone.make_aware(datetime.combine(date, time))


def slot_label(slot):
    try:
        return FileSlotChoices(slot).label
    except ValueError:
        return slot


def event_orphan_reason(event, deleted_on=None):
    """
    "<Tipo> - <Profissional>: '<title>' foi deletado em DD/MM/YYYY"

    Events without a professional omit the " - <Profissional>" part.
    """
    deleted_on = deleted_on or timezone.localdate()
    prefix = event.get_type_display()
    if event.professional_id:
        prefix = f"{prefix} - {event.professional.name}"
    return f"{prefix}: '{event.title}' foi deletado em {deleted_on.strftime('%d/%m/%Y')}"


def professional_orphan_reason(professional):
    return f"Profissional deletado: {professional.name}"


def remove_stored_object(key):
    """
    Best-effort removal of stored bytes.

    A missing object or a backend failure is logged as a warning and never
    propagates.
    """
    if not key:
        return False
    try:
        removed = get_storage().delete(key)
    except Exception as e:
        metrics.storage_delete_failures_total.inc()
        log_storage_delete_failed(key, reason=str(e))
        return False
    if not removed:
        log_storage_delete_failed(key, reason='not_found')
    return removed


def key_in_use(key):
    """True while a file or report row still points at `key`."""
    return (
        FileInfo.objects.filter(physical_path=key).exists()
        or Report.objects.filter(physical_path=key).exists()
    )


def remove_stored_objects_on_commit(keys: Iterable[str]):
    """
    After commit, remove the bytes behind `keys` and forget their upload
    records. Keys another row still references are kept.
    """
    keys = [key for key in keys if key]

    def _remove_all():
        for key in keys:
            if key_in_use(key):
                log_domain_event(
                    'storage_delete_skipped',
                    entity_type='StoredObject',
                    entity_id=key,
                    reason='still_referenced',
                )
                continue
            remove_stored_object(key)
            StoredUpload.objects.filter(key=key).delete()

    if keys:
        transaction.on_commit(_remove_all)


def orphan_files(files, reason, source):
    """
    Detach `files` from their event and professional and flag them orphaned.

    Must run inside the caller's transaction. Returns the number of rows
    updated.
    """
    count = files.update(
        is_orphaned=True,
        orphaned_reason=reason[:500],
        professional=None,
        event=None,
        updated_at=timezone.now(),
    )
    if count:
        metrics.files_orphaned_total.labels(source=source).inc(count)
    return count


def get_owned_professional(professional_id, user, for_update=False):
    if professional_id is None:
        return None
    qs = Professional.objects.filter(pk=professional_id, user=user)
    if for_update:
        qs = qs.select_for_update()
    professional = qs.first()
    if professional is None:
        raise ValidationError('Profissional não encontrado para este usuário')
    return professional


def lock_professional(professional_id):
    """
    Row lock on the professional; overlap checks for one professional run
    one transaction at a time.
    """
    if professional_id is not None:
        Professional.objects.select_for_update().filter(pk=professional_id).first()


def get_owned_event(event_id, user, for_update=False):
    qs = HealthEvent.objects.filter(pk=event_id, user=user)
    if for_update:
        qs = qs.select_for_update(of=('self',))
    event = qs.select_related('professional').first()
    if event is None:
        raise NotFoundError('Evento não encontrado')
    return event


def _replace_slot_files(event, user, files: List[Dict[str, Any]], slots=None):
    """
    Attach `files` to `event`; existing non-orphaned files in the same slots
    are removed (row now, bytes on commit).
    """
    if not files:
        return []

    keys = {f['physical_path'] for f in files if f.get('physical_path')}
    if keys - owned_keys(user, keys):
        raise ValidationError('Arquivo enviado não encontrado para este usuário')

    target_slots = set(slots) if slots else {f['slot'] for f in files}
    seen = set()
    for f in files:
        if f['slot'] in seen:
            raise ValidationError(f"Slot duplicado: {f['slot']}")
        seen.add(f['slot'])

    replaced = FileInfo.objects.filter(event=event, slot__in=target_slots, is_orphaned=False)
    replaced_keys = list(replaced.values_list('physical_path', flat=True))
    replaced.delete()
    remove_stored_objects_on_commit(replaced_keys)

    created = []
    for f in files:
        if f['slot'] not in target_slots:
            continue
        created.append(FileInfo.objects.create(
            user=user,
            event=event,
            professional=event.professional,
            slot=f['slot'],
            name=f['name'],
            url=f['url'],
            physical_path=f.get('physical_path') or '',
            file_hash=f.get('file_hash') or '',
            upload_date=f.get('upload_date') or timezone.now(),
            expiry_date=f.get('expiry_date'),
        ))

    for attached in created:
        log_document_event(
            AuditActionChoices.FILE_ATTACHED,
            user,
            attached.name,
            file_hash=attached.file_hash,
            document_type=attached.slot,
            receiver_cpf=user.cpf,
            event_id=str(event.id),
        )
    return created


# ============================================================================
# Events
# ============================================================================

def create_event(user, data: Dict[str, Any]) -> HealthEvent:
    """
    Create a health event.

    `data` holds validated serializer output: title, description,
    observation, type, date, start_time/end_time (datetime.time, local),
    professional_id, files, notification_id.

    Raises:
        ValidationError: bad times or foreign professional
        OverlapError: professional already busy in that interval
        NotFoundError: notification_id not owned by the user
    """
    start = combine_local(data.get('date'), data.get('start_time'))
    end = combine_local(data.get('date'), data.get('end_time'))

    with transaction.atomic():
        professional = get_owned_professional(data.get('professional_id'), user, for_update=True)
        check_overlap(professional.id if professional else None, data['date'], start, end)

        event = HealthEvent.objects.create(
            user=user,
            professional=professional,
            title=data['title'],
            description=data.get('description', ''),
            observation=data.get('observation', ''),
            type=data['type'],
            date=data['date'],
            start_time=start,
            end_time=end,
        )
        files = _replace_slot_files(event, user, data.get('files') or [])

        notification_id = data.get('notification_id')
        if notification_id:
            archive_notification(notification_id, user)

    log_domain_event(
        'event_created',
        entity_type='HealthEvent',
        entity_id=str(event.id),
        entity_ids={'user_id': str(user.id)},
        files_count=len(files),
    )
    return event


def update_event(
    event_id,
    user,
    data: Dict[str, Any],
    overwrite: bool = False,
    slot: Optional[str] = None,
) -> HealthEvent:
    """
    Partially update an event.

    Without notification_id, files replace existing files in the same
    slots. With notification_id, only `slot` (default 'result') is
    touched: if a non-orphaned file already occupies it and `overwrite`
    is false, ConflictError is raised; otherwise the slot file is replaced
    and the notification archived, all in one transaction.
    """
    notification_id = data.get('notification_id')

    with transaction.atomic():
        event = get_owned_event(event_id, user, for_update=True)

        for field in EVENT_FIELDS:
            if field in data:
                setattr(event, field, data[field])

        if 'professional_id' in data:
            event.professional = get_owned_professional(data['professional_id'], user, for_update=True)
        else:
            lock_professional(event.professional_id)

        local_start = timezone.localtime(event.start_time).time()
        local_end = timezone.localtime(event.end_time).time()
        event.start_time = combine_local(event.date, data.get('start_time', local_start))
        event.end_time = combine_local(event.date, data.get('end_time', local_end))

        check_overlap(
            event.professional_id,
            event.date,
            event.start_time,
            event.end_time,
            exclude_id=event.id,
        )
        event.save()

        files = data.get('files') or []
        if notification_id:
            slot = slot or FileSlotChoices.RESULT
            occupied = FileInfo.objects.filter(event=event, slot=slot, is_orphaned=False).exists()
            if occupied and not overwrite:
                raise ConflictError(
                    f"Já existe um {slot_label(slot)} para este evento. Deseja sobrescrever?"
                )
            _replace_slot_files(event, user, [f for f in files if f['slot'] == slot], slots=[slot])
            archive_notification(notification_id, user)
        else:
            _replace_slot_files(event, user, files)

        # Files follow the event's professional
        FileInfo.objects.filter(event=event, is_orphaned=False).exclude(
            professional=event.professional
        ).update(professional=event.professional)

    log_domain_event(
        'event_updated',
        entity_type='HealthEvent',
        entity_id=str(event.id),
        entity_ids={'user_id': str(user.id)},
        notification_associated=bool(notification_id),
    )
    return event


def delete_event(event_id, user, delete_files: bool = False) -> int:
    """
    Delete an event and decide the fate of its files.

    - delete_files=True: file rows deleted, stored bytes removed after commit
    - delete_files=False: files orphaned with a reason naming the event

    Returns the number of files deleted or orphaned.

    Raises:
        NotFoundError: event missing or not owned by the user
    """
    with transaction.atomic():
        event = get_owned_event(event_id, user, for_update=True)
        files = FileInfo.objects.select_for_update().filter(event=event)

        if delete_files:
            keys = list(files.values_list('physical_path', flat=True))
            count = len(keys)
            files.delete()
            remove_stored_objects_on_commit(keys)
        else:
            count = orphan_files(files, event_orphan_reason(event), source='event')

        event_pk = event.pk
        event.delete()

    mode = 'delete_files' if delete_files else 'orphan'
    metrics.events_deleted_total.labels(mode=mode).inc()
    if not delete_files and count:
        log_files_orphaned('HealthEvent', event_pk, count, user_id=user.id)
    log_domain_event(
        'event_deleted',
        entity_type='HealthEvent',
        entity_id=str(event_pk),
        entity_ids={'user_id': str(user.id)},
        mode=mode,
        files_count=count,
    )
    return count


# ============================================================================
# Files
# ============================================================================

def _can_manage_file(file, user):
    if user.role == RoleChoices.ADMIN:
        return True
    if file.user_id == user.id:
        return True
    return file.event_id is not None and file.event.user_id == user.id


def delete_file(file_id, user):
    """Delete one file (owner of file or event, or ADMIN); bytes removed on commit."""
    with transaction.atomic():
        file = FileInfo.objects.select_for_update(of=('self',)).select_related('event').filter(pk=file_id).first()
        if file is None:
            raise NotFoundError('Arquivo não encontrado')
        if not _can_manage_file(file, user):
            raise AuthorizationError('Acesso negado ao arquivo')
        key = file.physical_path
        file.delete()
        remove_stored_objects_on_commit([key])

    log_domain_event('file_deleted', entity_type='FileInfo', entity_id=str(file_id))


def delete_event_slot(event_id, slot, user):
    """Remove the non-orphaned file occupying `slot` of an owned event."""
    with transaction.atomic():
        event = get_owned_event(event_id, user, for_update=True)
        file = FileInfo.objects.filter(event=event, slot=slot, is_orphaned=False).first()
        if file is None:
            raise NotFoundError('Arquivo não encontrado neste slot')
        key = file.physical_path
        file.delete()
        remove_stored_objects_on_commit([key])

    log_domain_event(
        'file_deleted',
        entity_type='HealthEvent',
        entity_id=str(event_id),
        slot=slot,
    )


def delete_orphan_file(file_id, user):
    """
    Permanently delete an orphaned file.

    Raises:
        NotFoundError: file missing or not orphaned
        AuthorizationError: caller is not the owner
    """
    with transaction.atomic():
        file = FileInfo.objects.select_for_update().filter(pk=file_id, is_orphaned=True).first()
        if file is None:
            raise NotFoundError('Arquivo órfão não encontrado')
        if file.user_id != user.id:
            raise AuthorizationError('Acesso negado ao arquivo')
        key = file.physical_path
        file.delete()
        remove_stored_objects_on_commit([key])

    log_domain_event('orphan_file_deleted', entity_type='FileInfo', entity_id=str(file_id))


def get_downloadable_file(file_id, user):
    file = FileInfo.objects.select_related('event').filter(pk=file_id).first()
    if file is None:
        raise NotFoundError('Arquivo não encontrado')
    if not _can_manage_file(file, user):
        raise AuthorizationError('Acesso negado ao arquivo')
    if not file.physical_path:
        raise NotFoundError('Arquivo sem conteúdo armazenado')
    return file


def delete_orphans_older_than(cutoff) -> int:
    """Delete orphaned files last touched before `cutoff`; returns the count."""
    with transaction.atomic():
        stale = FileInfo.objects.select_for_update().filter(is_orphaned=True, updated_at__lt=cutoff)
        keys = list(stale.values_list('physical_path', flat=True))
        count = len(keys)
        stale.delete()
        remove_stored_objects_on_commit(keys)
    return count
