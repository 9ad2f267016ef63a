"""
Authz models: auth_user, emissor_info
"""
import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin


class RoleChoices(models.TextChoices):
    """
    Account roles.

    - RECEPTOR: patient, receives reports and owns events/professionals/files
    - EMISSOR: laboratory or clinic issuing reports
    - ADMIN: platform administrator
    """
    RECEPTOR = 'RECEPTOR', 'Receptor'
    EMISSOR = 'EMISSOR', 'Emissor'
    ADMIN = 'ADMIN', 'Admin'


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', RoleChoices.ADMIN)
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom user model for authentication.

    - id: UUID PK
    - email: unique, login
    - name, cpf (11 digits, optional for EMISSOR/ADMIN), phone
    - role: RECEPTOR (default) | EMISSOR | ADMIN
    - created_at, updated_at
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255)
    name = models.CharField(max_length=255, blank=True)
    cpf = models.CharField(max_length=14, blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True)
    role = models.CharField(
        max_length=16,
        choices=RoleChoices.choices,
        default=RoleChoices.RECEPTOR
    )
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)  # Required for admin access
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'auth_user'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['email'], name='idx_user_email'),
            models.Index(fields=['role'], name='idx_user_role'),
            models.Index(fields=['cpf'], name='idx_user_cpf'),
        ]

    def __str__(self):
        return self.email

    @property
    def is_receptor(self):
        return self.role == RoleChoices.RECEPTOR

    @property
    def is_emissor(self):
        return self.role == RoleChoices.EMISSOR

    @property
    def is_admin_role(self):
        return self.role == RoleChoices.ADMIN


class EmissorInfo(models.Model):
    """
    Clinic/laboratory details for an EMISSOR account.

    - user: FK -> auth_user (unique)
    - clinic_name, cnpj, address, contact
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='emissor_info'
    )
    clinic_name = models.CharField(max_length=255)
    cnpj = models.CharField(max_length=18, blank=True, null=True)
    address = models.CharField(max_length=500, blank=True)
    contact = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'emissor_info'
        verbose_name = 'Emissor Info'
        verbose_name_plural = 'Emissor Info'

    def __str__(self):
        return self.clinic_name
