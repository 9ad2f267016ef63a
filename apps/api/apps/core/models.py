"""
Core models: admin_metrics
"""
from django.db import models
from django.db.models import F


class AdminMetrics(models.Model):
    """
    Platform-wide cumulative counters (single row).

    - id: fixed 'singleton'
    - total_upload_bytes: bytes accepted by the upload endpoint
    - total_download_bytes: bytes served by the download endpoint
    """
    SINGLETON_ID = 'singleton'

    id = models.CharField(primary_key=True, max_length=16, default=SINGLETON_ID, editable=False)
    total_upload_bytes = models.BigIntegerField(default=0)
    total_download_bytes = models.BigIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'admin_metrics'
        verbose_name = 'Admin Metrics'
        verbose_name_plural = 'Admin Metrics'

    def __str__(self):
        return f"Admin Metrics (up={self.total_upload_bytes}B, down={self.total_download_bytes}B)"

    @classmethod
    def load(cls):
        obj, _ = cls.objects.get_or_create(id=cls.SINGLETON_ID)
        return obj

    @classmethod
    def add_upload_bytes(cls, amount):
        cls.load()
        cls.objects.filter(id=cls.SINGLETON_ID).update(
            total_upload_bytes=F('total_upload_bytes') + amount
        )

    @classmethod
    def add_download_bytes(cls, amount):
        cls.load()
        cls.objects.filter(id=cls.SINGLETON_ID).update(
            total_download_bytes=F('total_download_bytes') + amount
        )
