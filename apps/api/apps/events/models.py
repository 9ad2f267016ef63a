"""
Events models: health_event, file_info
"""
import uuid
from django.conf import settings
from django.db import models
from django.db.models import Q


class EventTypeChoices(models.TextChoices):
    CONSULTA = 'CONSULTA', 'Consulta'
    EXAME = 'EXAME', 'Exame'
    PROCEDIMENTO = 'PROCEDIMENTO', 'Procedimento'
    MEDICACAO = 'MEDICACAO', 'Medicação'


class FileSlotChoices(models.TextChoices):
    """Attachment categories within an event (label = Portuguese display name)."""
    REQUEST = 'request', 'solicitação'
    AUTHORIZATION = 'authorization', 'autorização'
    CERTIFICATE = 'certificate', 'atestado'
    RESULT = 'result', 'laudo'
    PRESCRIPTION = 'prescription', 'prescrição'
    INVOICE = 'invoice', 'nota fiscal'
    EXAM = 'exam', 'exame'


class HealthEvent(models.Model):
    """
    Scheduled health activity owned by a patient.

    start_time/end_time are timezone-aware instants; `date` is the local
    calendar day they fall on and scopes the overlap rule.

    BUSINESS RULES:
    - For one professional and date, [start_time, end_time) intervals
      never intersect (back-to-back is allowed)
    - end_time is strictly after start_time
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='health_events'
    )
    professional = models.ForeignKey(
        'professionals.Professional',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='events'
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    observation = models.TextField(blank=True)
    type = models.CharField(max_length=16, choices=EventTypeChoices.choices)
    date = models.DateField()
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'health_event'
        verbose_name = 'Health Event'
        verbose_name_plural = 'Health Events'
        ordering = ['-date', '-start_time']
        indexes = [
            models.Index(fields=['user', 'date'], name='idx_event_user_date'),
            models.Index(fields=['professional', 'date'], name='idx_event_prof_date'),
        ]

    def __str__(self):
        return f"{self.title} ({self.date})"


class FileInfo(models.Model):
    """
    Uploaded attachment.

    A file sits in one slot of at most one event. When that event (or its
    professional) is deleted without deleting files, the file is kept as
    an orphan: event and professional cleared, is_orphaned set and
    orphaned_reason describing what was deleted and when.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='files'
    )
    event = models.ForeignKey(
        HealthEvent,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='files'
    )
    professional = models.ForeignKey(
        'professionals.Professional',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='files'
    )
    slot = models.CharField(max_length=16, choices=FileSlotChoices.choices)
    name = models.CharField(max_length=255)
    url = models.CharField(max_length=1024)
    physical_path = models.CharField(max_length=1024, blank=True, help_text='Storage key')
    file_hash = models.CharField(max_length=64, blank=True, help_text='SHA-256 hex digest')
    upload_date = models.DateTimeField(null=True, blank=True)
    expiry_date = models.DateTimeField(null=True, blank=True)
    is_orphaned = models.BooleanField(default=False)
    orphaned_reason = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'file_info'
        verbose_name = 'File'
        verbose_name_plural = 'Files'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_orphaned'], name='idx_file_user_orphaned'),
            models.Index(fields=['event', 'slot'], name='idx_file_event_slot'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['event', 'slot'],
                condition=Q(is_orphaned=False),
                name='uniq_file_active_slot_per_event'
            ),
        ]

    def __str__(self):
        return f"{self.slot}: {self.name}"
