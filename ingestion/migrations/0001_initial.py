# Initial migration for CSVUpload model

import uuid

import django.db.models.deletion
import ingestion.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('projects', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CSVUpload',
            fields=[
                ('error_message', models.TextField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('file', models.FileField(max_length=500, upload_to=ingestion.models.upload_to)),
                ('file_name', models.CharField(max_length=255)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In progress'), ('completed', 'Completed'), ('completed_with_errors', 'Completed with errors'), ('failed', 'Failed')], default='pending', max_length=30)),
                ('upload_date', models.DateTimeField(auto_now_add=True)),
                ('rows_total', models.IntegerField(default=0)),
                ('rows_imported', models.IntegerField(default=0)),
                ('rows_failed', models.IntegerField(default=0)),
                ('errors', models.JSONField(blank=True, default=list, help_text='Per-row errors: [{row, field, message}]')),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='csv_uploads', to='projects.project')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='csv_uploads', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'csv_uploads',
                'ordering': ['-upload_date'],
                'indexes': [models.Index(fields=['project', 'upload_date'], name='csv_upload_project_date_idx')],
            },
        ),
    ]
