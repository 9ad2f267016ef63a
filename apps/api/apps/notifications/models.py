"""
Notifications models: notification
"""
import uuid
from django.conf import settings
from django.db import models


class NotificationTypeChoices(models.TextChoices):
    LAB_RESULT = 'LAB_RESULT', 'Lab Result'
    INFO = 'INFO', 'Info'


class NotificationStatusChoices(models.TextChoices):
    UNREAD = 'UNREAD', 'Unread'
    READ = 'READ', 'Read'
    ARCHIVED = 'ARCHIVED', 'Archived'


class Notification(models.Model):
    """
    In-app notification.

    `payload` shape depends on `type` and is validated by
    apps.notifications.payloads before it is stored.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    type = models.CharField(max_length=16, choices=NotificationTypeChoices.choices)
    status = models.CharField(
        max_length=16,
        choices=NotificationStatusChoices.choices,
        default=NotificationStatusChoices.UNREAD
    )
    payload = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'notification'
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='idx_notification_user_status'),
        ]

    def __str__(self):
        return f"{self.type} -> {self.user_id} ({self.status})"
