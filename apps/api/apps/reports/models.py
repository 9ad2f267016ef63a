"""
Reports models: report (laudo)
"""
import uuid
from django.conf import settings
from django.db import models


class ReportStatusChoices(models.TextChoices):
    SENT = 'SENT', 'Sent'
    RECEIVED = 'RECEIVED', 'Received'
    VIEWED = 'VIEWED', 'Viewed'
    ARCHIVED = 'ARCHIVED', 'Archived'


class Report(models.Model):
    """
    Medical report sent by an EMISSOR to a RECEPTOR.

    - protocol: unique "YYYY-NNNNN", sequential within the year
    - status: SENT -> RECEIVED (received_at) -> VIEWED (viewed_at)
    - notification: the LAB_RESULT notification created for the receiver
    - physical_path, file_hash: storage key and SHA-256 when the file was
      uploaded with the report (blank for link-only reports)
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    protocol = models.CharField(max_length=10, unique=True)
    title = models.CharField(max_length=255)
    file_name = models.CharField(max_length=255)
    file_url = models.CharField(max_length=1024)
    physical_path = models.CharField(max_length=1024, blank=True)
    file_hash = models.CharField(max_length=64, blank=True)
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='sent_reports'
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='received_reports'
    )
    status = models.CharField(
        max_length=16,
        choices=ReportStatusChoices.choices,
        default=ReportStatusChoices.SENT
    )
    notification = models.OneToOneField(
        'notifications.Notification',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='report'
    )
    sent_at = models.DateTimeField(auto_now_add=True)
    received_at = models.DateTimeField(null=True, blank=True)
    viewed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'report'
        verbose_name = 'Report'
        verbose_name_plural = 'Reports'
        ordering = ['-sent_at']
        indexes = [
            models.Index(fields=['sender', 'sent_at'], name='idx_report_sender'),
            models.Index(fields=['receiver', 'sent_at'], name='idx_report_receiver'),
        ]

    def __str__(self):
        return f"{self.protocol} - {self.title}"
