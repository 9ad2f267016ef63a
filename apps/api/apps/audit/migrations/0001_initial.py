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
            name='AuditLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('action', models.CharField(choices=[('DOCUMENT_SUBMITTED', 'Document Submitted'), ('DOCUMENT_DOWNLOADED', 'Document Downloaded'), ('FILE_ATTACHED', 'File Attached'), ('RATE_LIMIT_EXCEEDED', 'Rate Limit Exceeded'), ('INVALID_FILE_TYPE', 'Invalid File Type'), ('FILE_TOO_LARGE', 'File Too Large')], max_length=32)),
                ('origin', models.CharField(choices=[('PORTAL_EMISSOR', 'Portal Emissor'), ('PORTAL_LOGADO', 'Portal Logado')], default='PORTAL_LOGADO', max_length=16)),
                ('status', models.CharField(choices=[('SUCCESS', 'Success'), ('REJECTED', 'Rejected')], default='SUCCESS', max_length=16)),
                ('emitter_cnpj', models.CharField(blank=True, max_length=18)),
                ('receiver_cpf', models.CharField(blank=True, max_length=14)),
                ('protocol', models.CharField(blank=True, max_length=10)),
                ('file_name', models.CharField(blank=True, max_length=255)),
                ('file_hash', models.CharField(blank=True, max_length=64)),
                ('document_type', models.CharField(blank=True, max_length=32)),
                ('resource', models.CharField(blank=True, max_length=255)),
                ('ip_address', models.CharField(blank=True, max_length=64)),
                ('user_agent', models.CharField(blank=True, max_length=512)),
                ('metadata', models.JSONField(default=dict)),
                ('actor_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Audit Log',
                'verbose_name_plural': 'Audit Logs',
                'db_table': 'audit_log',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['created_at'], name='idx_auditlog_created_at'),
                    models.Index(fields=['action'], name='idx_auditlog_action'),
                    models.Index(fields=['actor_user'], name='idx_auditlog_actor'),
                    models.Index(fields=['protocol'], name='idx_auditlog_protocol'),
                ],
            },
        ),
    ]
