# Initial migration for DeploymentLog model

import uuid

import django.db.models.deletion
import exports.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('projects', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='DeploymentLog',
            fields=[
                ('error_message', models.TextField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('kind', models.CharField(choices=[('export', 'Export'), ('publish', 'Publish')], default='export', max_length=10)),
                ('deployment_status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In progress'), ('completed', 'Completed'), ('completed_with_errors', 'Completed with errors'), ('failed', 'Failed')], default='pending', max_length=30)),
                ('started_at', models.DateTimeField()),
                ('pages_total', models.IntegerField(default=0)),
                ('pages_bundled', models.IntegerField(default=0)),
                ('artifact', models.FileField(blank=True, max_length=500, upload_to=exports.models.artifact_upload_to)),
                ('site_url', models.URLField(blank=True, default='', max_length=500)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='deployment_logs', to='projects.project')),
            ],
            options={
                'db_table': 'deployment_logs',
                'ordering': ['-started_at'],
                'indexes': [models.Index(fields=['project', 'kind', 'started_at'], name='deploy_project_kind_idx')],
            },
        ),
    ]
