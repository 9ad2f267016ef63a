"""
Report services: protocol numbering, sending, status transitions.
"""
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.audit.models import AuditActionChoices, AuditOriginChoices
from apps.audit.services import log_document_event
from apps.authz.models import RoleChoices, User
from apps.authz.serializers import normalize_cpf
from apps.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from apps.core.observability import log_domain_event, metrics
from apps.notifications.models import NotificationStatusChoices, NotificationTypeChoices
from apps.notifications.services import create_notification, set_status
from apps.reports.models import Report, ReportStatusChoices

PROTOCOL_ATTEMPTS = 3


def next_protocol(year=None):
    """
    Next protocol for `year`: last protocol of the year + 1, zero padded.

    2025 with no reports yet -> "2025-00001"; after "2025-00041" -> "2025-00042".
    """
    year = year or timezone.localdate().year
    last = (
        Report.objects.filter(protocol__startswith=f'{year}-')
        .order_by('-protocol')
        .values_list('protocol', flat=True)
        .first()
    )
    sequence = int(last.split('-')[1]) + 1 if last else 1
    return f'{year}-{sequence:05d}'


def resolve_receiver(receiver_id=None, receiver_cpf=None):
    """Find the RECEPTOR a report is addressed to, by id or CPF."""
    qs = User.objects.filter(role=RoleChoices.RECEPTOR, is_active=True)
    if receiver_id:
        receiver = qs.filter(pk=receiver_id).first()
    elif receiver_cpf:
        receiver = qs.filter(cpf=normalize_cpf(receiver_cpf)).first()
    else:
        raise ValidationError('Destinatário é obrigatório (receiver_id ou receiver_cpf)')

    if receiver is None:
        raise NotFoundError('Destinatário não encontrado')
    return receiver


def _emitter_cnpj(sender):
    info = getattr(sender, 'emissor_info', None)
    return info.cnpj if info else ''


def send_report(sender, title, file_name, file_url, receiver, physical_path='', file_hash=''):
    """
    Create a report and its LAB_RESULT notification in one transaction.

    physical_path and file_hash are set when the file was uploaded with the
    report. The submission is written to the audit log with the emitter's
    CNPJ and the receiver's CPF.

    Two senders racing for the same protocol hit the unique constraint; the
    loser recomputes and retries.
    """
    for attempt in range(1, PROTOCOL_ATTEMPTS + 1):
        try:
            with transaction.atomic():
                report = Report.objects.create(
                    protocol=next_protocol(),
                    title=title,
                    file_name=file_name,
                    file_url=file_url,
                    physical_path=physical_path,
                    file_hash=file_hash,
                    sender=sender,
                    receiver=receiver,
                    status=ReportStatusChoices.SENT,
                )
                report.notification = create_notification(
                    receiver,
                    NotificationTypeChoices.LAB_RESULT,
                    {'report_id': report.id, 'title': report.title, 'protocol': report.protocol},
                )
                report.save(update_fields=['notification'])
                log_document_event(
                    AuditActionChoices.DOCUMENT_SUBMITTED,
                    sender,
                    file_name,
                    origin=AuditOriginChoices.PORTAL_EMISSOR,
                    file_hash=file_hash,
                    document_type='result',
                    protocol=report.protocol,
                    emitter_cnpj=_emitter_cnpj(sender),
                    receiver_cpf=receiver.cpf,
                    report_id=str(report.id),
                )
            break
        except IntegrityError:
            if attempt == PROTOCOL_ATTEMPTS:
                raise

    metrics.reports_sent_total.inc()
    log_domain_event(
        'report_sent',
        entity_type='Report',
        entity_id=str(report.id),
        entity_ids={'sender_id': str(sender.id), 'receiver_id': str(receiver.id)},
        protocol=report.protocol,
    )
    return report


def get_participant_report(report_id, user):
    report = Report.objects.select_related('notification').filter(pk=report_id).first()
    if report is None:
        raise NotFoundError('Laudo não encontrado')
    if user.id not in (report.sender_id, report.receiver_id):
        raise AuthorizationError('Acesso negado')
    return report


def get_downloadable_report(report_id, user):
    report = get_participant_report(report_id, user)
    if not report.physical_path:
        raise NotFoundError('Laudo sem arquivo armazenado')
    return report


def update_status(report_id, user, status, at=None):
    """
    Move a report to `status` (sender or receiver only).

    RECEIVED stamps received_at; VIEWED stamps viewed_at and marks the
    linked notification READ.
    """
    at = at or timezone.now()
    with transaction.atomic():
        report = get_participant_report(report_id, user)
        report.status = status
        if status == ReportStatusChoices.RECEIVED:
            report.received_at = at
        elif status == ReportStatusChoices.VIEWED:
            report.viewed_at = at
            if report.notification is not None:
                set_status(report.notification, NotificationStatusChoices.READ)
        report.save(update_fields=['status', 'received_at', 'viewed_at'])

    log_domain_event(
        'report_status_changed',
        entity_type='Report',
        entity_id=str(report.id),
        status=status,
    )
    return report
