"""
Audit trail writers.

Entries are written inside a savepoint: a failed audit write is logged and
counted but never breaks the operation being audited. Client IP and user
agent come from the request correlation context.
"""
from django.db import DatabaseError, transaction

from apps.audit.models import (
    AuditActionChoices,
    AuditLog,
    AuditOriginChoices,
    AuditStatusChoices,
)
from apps.core.observability import metrics
from apps.core.observability.correlation import get_client_meta
from apps.core.observability.logging import get_sanitized_logger

logger = get_sanitized_logger(__name__)

UPLOAD_REJECTION_ACTIONS = {
    'too_large': AuditActionChoices.FILE_TOO_LARGE,
    'bad_type': AuditActionChoices.INVALID_FILE_TYPE,
}


def _actor(user):
    if user is not None and user.is_authenticated:
        return user
    return None


def _write(action, user=None, **fields):
    ip, user_agent = get_client_meta()
    fields.setdefault('ip_address', ip or '')
    fields.setdefault('user_agent', (user_agent or '')[:512])

    try:
        with transaction.atomic():
            entry = AuditLog.objects.create(action=action, actor_user=_actor(user), **fields)
    except DatabaseError:
        metrics.audit_write_failures_total.inc()
        logger.error(
            'Audit log write failed',
            exc_info=True,
            extra={'event': 'audit_write_failed', 'action': action},
        )
        return None

    metrics.audit_entries_total.labels(action=action).inc()
    return entry


def log_document_event(
    action,
    user,
    file_name,
    origin=AuditOriginChoices.PORTAL_LOGADO,
    file_hash='',
    document_type='',
    protocol='',
    emitter_cnpj='',
    receiver_cpf='',
    **metadata
):
    """Record a report submission, a file attachment or a download."""
    return _write(
        action,
        user=user,
        origin=origin,
        status=AuditStatusChoices.SUCCESS,
        file_name=(file_name or '')[:255],
        file_hash=file_hash or '',
        document_type=document_type or '',
        protocol=protocol or '',
        emitter_cnpj=emitter_cnpj or '',
        receiver_cpf=receiver_cpf or '',
        metadata=metadata,
    )


def log_security_event(action, resource, user=None, **details):
    """Record a rejected upload (rate limit, size or type)."""
    return _write(
        action,
        user=user,
        status=AuditStatusChoices.REJECTED,
        resource=(resource or '')[:255],
        metadata=details,
    )


def log_upload_rejection(reason, resource, user=None, **details):
    """reason: 'too_large' | 'bad_type'"""
    return log_security_event(UPLOAD_REJECTION_ACTIONS[reason], resource, user=user, **details)
