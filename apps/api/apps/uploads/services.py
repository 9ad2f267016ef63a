"""
Upload services: validate, store and record uploaded files.
"""
import hashlib

from apps.audit.services import log_upload_rejection
from apps.core.exceptions import OmniError, PayloadTooLargeError
from apps.core.models import AdminMetrics
from apps.core.observability import log_domain_event, metrics
from apps.core.observability.events import log_upload_rejected
from apps.uploads.models import StoredUpload
from apps.uploads.storage import get_storage
from apps.uploads.validator import validate_upload


def store_upload(upload, user, resource, prefix='uploads') -> StoredUpload:
    """
    Validate `upload` (a Django UploadedFile), write it to storage and bind
    the resulting key to `user`.

    Rejections are counted, logged and audited before the error propagates.

    Raises:
        PayloadTooLargeError: file at or above the size limit
        ValidationError: MIME type not allowed
    """
    content_type = upload.content_type or ''
    try:
        validate_upload(upload.size, content_type)
    except OmniError as e:
        reason = 'too_large' if isinstance(e, PayloadTooLargeError) else 'bad_type'
        metrics.uploads_total.labels(result=reason).inc()
        log_upload_rejected(reason, upload.size, content_type)
        log_upload_rejection(
            reason,
            resource,
            user=user,
            size=upload.size,
            content_type=content_type,
        )
        raise

    content = upload.read()
    stored = get_storage(prefix).save(content, upload.name, content_type=content_type)
    record = StoredUpload.objects.create(
        key=stored.key,
        url=stored.url,
        user=user,
        name=upload.name,
        size=len(content),
        content_type=content_type,
        file_hash=hashlib.sha256(content).hexdigest(),
    )

    AdminMetrics.add_upload_bytes(len(content))
    metrics.uploads_total.labels(result='accepted').inc()
    metrics.uploads_bytes_total.inc(len(content))
    log_domain_event(
        'file_uploaded',
        entity_type='StoredObject',
        entity_id=stored.key,
        entity_ids={'user_id': str(user.id)},
        size=len(content),
        content_type=content_type,
    )
    return record


def owned_keys(user, keys):
    """Subset of `keys` that `user` uploaded."""
    return set(
        StoredUpload.objects.filter(user=user, key__in=keys).values_list('key', flat=True)
    )
