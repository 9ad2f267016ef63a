"""
Management command to ensure an ADMIN superuser exists (for Docker startup).
"""
import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from apps.authz.models import RoleChoices


class Command(BaseCommand):
    help = 'Create the ADMIN superuser if it does not exist (for Docker initialization)'

    def handle(self, *args, **options):
        User = get_user_model()

        email = os.environ.get('DJANGO_SUPERUSER_EMAIL', 'admin@example.com')
        password = os.environ.get('DJANGO_SUPERUSER_PASSWORD', 'admin123dev')

        if User.objects.filter(email=email).exists():
            self.stdout.write(self.style.WARNING(f'Superuser "{email}" already exists'))
            return

        User.objects.create_superuser(
            email=email,
            password=password,
            name='Administrador',
            role=RoleChoices.ADMIN,
        )
        self.stdout.write(self.style.SUCCESS(f'Superuser "{email}" created successfully'))
