"""
Django management command to provision an EMISSOR (lab/clinic) account.

EMISSOR accounts cannot self-register; an operator creates them:

    python manage.py create_emissor labor@omni.com --password 123456 \
        --clinic-name "Laboratório Omni" --cnpj 12.345.678/0001-99
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.authz.models import User, EmissorInfo, RoleChoices


class Command(BaseCommand):
    help = 'Create an EMISSOR user with its EmissorInfo (idempotent)'

    def add_arguments(self, parser):
        parser.add_argument('email')
        parser.add_argument('--password', required=True)
        parser.add_argument('--clinic-name', required=True)
        parser.add_argument('--cnpj', default=None)
        parser.add_argument('--address', default='')
        parser.add_argument('--contact', default='')

    def handle(self, *args, **options):
        email = options['email']

        if User.objects.filter(email=email).exists():
            self.stdout.write(self.style.WARNING(f'User "{email}" already exists'))
            return

        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=options['password'],
                name=options['clinic_name'],
                role=RoleChoices.EMISSOR,
            )
            EmissorInfo.objects.create(
                user=user,
                clinic_name=options['clinic_name'],
                cnpj=options['cnpj'],
                address=options['address'],
                contact=options['contact'],
            )

        self.stdout.write(self.style.SUCCESS(f'✓ Emissor "{email}" created'))
