from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AdminMetrics',
            fields=[
                ('id', models.CharField(default='singleton', editable=False, max_length=16, primary_key=True, serialize=False)),
                ('total_upload_bytes', models.BigIntegerField(default=0)),
                ('total_download_bytes', models.BigIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Admin Metrics',
                'verbose_name_plural': 'Admin Metrics',
                'db_table': 'admin_metrics',
            },
        ),
    ]
