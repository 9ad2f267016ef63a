"""
Uploads models: stored_upload
"""
import uuid
from django.conf import settings
from django.db import models


class StoredUpload(models.Model):
    """
    Object written to storage through an upload (event files, reports).

    Binds a storage key to the user who uploaded it; event attachments may
    only reference keys their caller uploaded.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=1024, unique=True)
    url = models.CharField(max_length=1024)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='stored_uploads'
    )
    name = models.CharField(max_length=255)
    size = models.PositiveIntegerField(default=0)
    content_type = models.CharField(max_length=100, blank=True)
    file_hash = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'stored_upload'
        verbose_name = 'Stored Upload'
        verbose_name_plural = 'Stored Uploads'
        indexes = [
            models.Index(fields=['user', 'created_at'], name='idx_upload_user'),
        ]

    def __str__(self):
        return self.key
