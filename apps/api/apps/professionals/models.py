"""
Professionals models: professional
"""
import uuid
from django.conf import settings
from django.db import models

DEFAULT_SPECIALTY = 'A ser definido'


class Professional(models.Model):
    """
    Health professional kept in a patient's personal address book.

    - id: UUID PK
    - user: FK -> auth_user (owner)
    - name: required
    - specialty: defaults to "A ser definido"
    - address, contact: optional
    - created_at, updated_at
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='professionals'
    )
    name = models.CharField(max_length=255)
    specialty = models.CharField(max_length=255, default=DEFAULT_SPECIALTY)
    address = models.CharField(max_length=500, blank=True)
    contact = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'professional'
        verbose_name = 'Professional'
        verbose_name_plural = 'Professionals'
        ordering = ['name']
        indexes = [
            models.Index(fields=['user'], name='idx_professional_user'),
        ]

    def __str__(self):
        return f"{self.name} ({self.specialty})"
