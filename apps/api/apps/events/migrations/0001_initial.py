import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('professionals', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='HealthEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('observation', models.TextField(blank=True)),
                ('type', models.CharField(choices=[('CONSULTA', 'Consulta'), ('EXAME', 'Exame'), ('PROCEDIMENTO', 'Procedimento'), ('MEDICACAO', 'Medicação')], max_length=16)),
                ('date', models.DateField()),
                ('start_time', models.DateTimeField()),
                ('end_time', models.DateTimeField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('professional', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='events', to='professionals.professional')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='health_events', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Health Event',
                'verbose_name_plural': 'Health Events',
                'db_table': 'health_event',
                'ordering': ['-date', '-start_time'],
                'indexes': [
                    models.Index(fields=['user', 'date'], name='idx_event_user_date'),
                    models.Index(fields=['professional', 'date'], name='idx_event_prof_date'),
                ],
            },
        ),
        migrations.CreateModel(
            name='FileInfo',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('slot', models.CharField(choices=[('request', 'solicitação'), ('authorization', 'autorização'), ('certificate', 'atestado'), ('result', 'laudo'), ('prescription', 'prescrição'), ('invoice', 'nota fiscal'), ('exam', 'exame')], max_length=16)),
                ('name', models.CharField(max_length=255)),
                ('url', models.CharField(max_length=1024)),
                ('physical_path', models.CharField(blank=True, help_text='Storage key', max_length=1024)),
                ('file_hash', models.CharField(blank=True, help_text='SHA-256 hex digest', max_length=64)),
                ('upload_date', models.DateTimeField(blank=True, null=True)),
                ('expiry_date', models.DateTimeField(blank=True, null=True)),
                ('is_orphaned', models.BooleanField(default=False)),
                ('orphaned_reason', models.CharField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('event', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='files', to='events.healthevent')),
                ('professional', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='files', to='professionals.professional')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'db_table': 'file_info',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'is_orphaned'], name='idx_file_user_orphaned'),
                    models.Index(fields=['event', 'slot'], name='idx_file_event_slot'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_orphaned', False)), fields=('event', 'slot'), name='uniq_file_active_slot_per_event'),
                ],
            },
        ),
    ]
