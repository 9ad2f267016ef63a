"""
Domain events logging helpers.

Provides structured event logging for business operations.
"""
from typing import Dict, Optional
from .logging import get_sanitized_logger, sanitize_dict

logger = get_sanitized_logger(__name__)


def log_domain_event(
    event_name: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    entity_ids: Optional[Dict[str, str]] = None,
    result: str = 'success',
    **extra_fields
):
    """
    Log a domain event with structured data.

    Args:
        event_name: Name of the event (e.g., 'event_deleted', 'report_sent')
        entity_type: Type of entity (e.g., 'HealthEvent', 'FileInfo')
        entity_id: ID of primary entity
        entity_ids: Dictionary of related entity IDs
        result: Result of operation (success, failure, blocked, ...)
        **extra_fields: Additional fields to log (will be sanitized)

    Example:
        log_domain_event(
            'files_orphaned',
            entity_type='HealthEvent',
            entity_id=str(event.id),
            entity_ids={'user_id': str(user.id)},
            result='success',
            files_count=3
        )
    """
    event_data = {
        'event': event_name,
        'result': result,
    }

    if entity_type:
        event_data['entity_type'] = entity_type

    if entity_id:
        event_data['entity_id'] = entity_id

    if entity_ids:
        event_data.update(entity_ids)

    event_data.update(sanitize_dict(extra_fields))

    # Log level follows the result
    if result in ['failure', 'error']:
        logger.error(f'Domain event: {event_name}', extra=event_data)
    elif result in ['warning', 'blocked', 'throttled', 'rejected']:
        logger.warning(f'Domain event: {event_name}', extra=event_data)
    else:
        logger.info(f'Domain event: {event_name}', extra=event_data)


def log_event_overlap_rejected(professional_id, date, excluded_event_id=None):
    """Log a rejected create/update that would double-book a professional."""
    log_domain_event(
        'event_overlap_rejected',
        entity_type='Professional',
        entity_id=str(professional_id),
        result='rejected',
        date=str(date),
        excluded_event_id=str(excluded_event_id) if excluded_event_id else None,
    )


def log_files_orphaned(entity_type, entity_id, files_count, user_id=None):
    """Log files detached from a deleted event or professional."""
    log_domain_event(
        'files_orphaned',
        entity_type=entity_type,
        entity_id=str(entity_id),
        entity_ids={'user_id': str(user_id)} if user_id else None,
        result='success',
        files_count=files_count,
    )


def log_storage_delete_failed(key, reason):
    """Log a stored object that could not be removed (non-fatal)."""
    log_domain_event(
        'storage_delete_failed',
        entity_type='StoredObject',
        entity_id=key,
        result='warning',
        reason=reason,
    )


def log_upload_rate_limited(ip, retry_after):
    """Log an upload request rejected by the per-IP limiter."""
    log_domain_event(
        'upload_rate_limited',
        result='throttled',
        client_ip=ip,
        retry_after=retry_after,
    )


def log_upload_rejected(reason, size, content_type):
    """Log an upload rejected by size or MIME validation."""
    log_domain_event(
        'upload_rejected',
        result='rejected',
        reason=reason,
        size=size,
        content_type=content_type,
    )
