import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='StoredUpload',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('key', models.CharField(max_length=1024, unique=True)),
                ('url', models.CharField(max_length=1024)),
                ('name', models.CharField(max_length=255)),
                ('size', models.PositiveIntegerField(default=0)),
                ('content_type', models.CharField(blank=True, max_length=100)),
                ('file_hash', models.CharField(blank=True, max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stored_uploads', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Stored Upload',
                'verbose_name_plural': 'Stored Uploads',
                'db_table': 'stored_upload',
                'indexes': [models.Index(fields=['user', 'created_at'], name='idx_upload_user')],
            },
        ),
    ]
