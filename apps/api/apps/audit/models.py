"""
Audit models: audit_log
"""
import uuid
from django.conf import settings
from django.db import models


class AuditActionChoices(models.TextChoices):
    # Documents
    DOCUMENT_SUBMITTED = 'DOCUMENT_SUBMITTED', 'Document Submitted'
    DOCUMENT_DOWNLOADED = 'DOCUMENT_DOWNLOADED', 'Document Downloaded'
    FILE_ATTACHED = 'FILE_ATTACHED', 'File Attached'
    # Security
    RATE_LIMIT_EXCEEDED = 'RATE_LIMIT_EXCEEDED', 'Rate Limit Exceeded'
    INVALID_FILE_TYPE = 'INVALID_FILE_TYPE', 'Invalid File Type'
    FILE_TOO_LARGE = 'FILE_TOO_LARGE', 'File Too Large'


DOCUMENT_ACTIONS = frozenset({
    AuditActionChoices.DOCUMENT_SUBMITTED,
    AuditActionChoices.DOCUMENT_DOWNLOADED,
    AuditActionChoices.FILE_ATTACHED,
})

SECURITY_ACTIONS = frozenset({
    AuditActionChoices.RATE_LIMIT_EXCEEDED,
    AuditActionChoices.INVALID_FILE_TYPE,
    AuditActionChoices.FILE_TOO_LARGE,
})


class AuditOriginChoices(models.TextChoices):
    PORTAL_EMISSOR = 'PORTAL_EMISSOR', 'Portal Emissor'
    PORTAL_LOGADO = 'PORTAL_LOGADO', 'Portal Logado'


class AuditStatusChoices(models.TextChoices):
    SUCCESS = 'SUCCESS', 'Success'
    REJECTED = 'REJECTED', 'Rejected'


class AuditLog(models.Model):
    """
    Trail of document traffic and upload security events.

    Fields:
    - actor_user: who acted (null for anonymous or deleted users)
    - action: see AuditActionChoices
    - origin: emitter portal or logged-in patient portal
    - emitter_cnpj, receiver_cpf, protocol: document parties and report protocol
    - file_name, file_hash, document_type: the document (slot for attachments)
    - resource: request path for security events
    - ip_address, user_agent: request origin
    - metadata: action-specific details (retryAfter, size, content_type, ...)
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)

    actor_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name='audit_logs'
    )
    action = models.CharField(max_length=32, choices=AuditActionChoices.choices)
    origin = models.CharField(
        max_length=16,
        choices=AuditOriginChoices.choices,
        default=AuditOriginChoices.PORTAL_LOGADO
    )
    status = models.CharField(
        max_length=16,
        choices=AuditStatusChoices.choices,
        default=AuditStatusChoices.SUCCESS
    )

    emitter_cnpj = models.CharField(max_length=18, blank=True)
    receiver_cpf = models.CharField(max_length=14, blank=True)
    protocol = models.CharField(max_length=10, blank=True)
    file_name = models.CharField(max_length=255, blank=True)
    file_hash = models.CharField(max_length=64, blank=True)
    document_type = models.CharField(max_length=32, blank=True)
    resource = models.CharField(max_length=255, blank=True)

    ip_address = models.CharField(max_length=64, blank=True)
    user_agent = models.CharField(max_length=512, blank=True)
    metadata = models.JSONField(default=dict)

    class Meta:
        db_table = 'audit_log'
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['created_at'], name='idx_auditlog_created_at'),
            models.Index(fields=['action'], name='idx_auditlog_action'),
            models.Index(fields=['actor_user'], name='idx_auditlog_actor'),
            models.Index(fields=['protocol'], name='idx_auditlog_protocol'),
        ]

    def __str__(self):
        actor = self.actor_user.email if self.actor_user else 'anonymous'
        return f"{self.action} by {actor}"
