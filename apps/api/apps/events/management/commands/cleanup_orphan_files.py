"""
Delete orphaned files older than N days (stored bytes included).

Usage:
    python manage.py cleanup_orphan_files --days 30
    python manage.py cleanup_orphan_files --days 30 --dry-run
"""
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.events.models import FileInfo
from apps.events.services import delete_orphans_older_than


class Command(BaseCommand):
    help = 'Permanently delete orphaned files older than --days'

    def add_arguments(self, parser):
        parser.add_argument('--days', type=int, default=30)
        parser.add_argument('--dry-run', action='store_true')

    def handle(self, *args, **options):
        cutoff = timezone.now() - timedelta(days=options['days'])

        if options['dry_run']:
            count = FileInfo.objects.filter(is_orphaned=True, updated_at__lt=cutoff).count()
            self.stdout.write(self.style.WARNING(f'[dry-run] {count} orphaned file(s) would be deleted'))
            return

        count = delete_orphans_older_than(cutoff)
        self.stdout.write(self.style.SUCCESS(f'✓ Deleted {count} orphaned file(s)'))
