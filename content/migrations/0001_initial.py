# Initial migration for Page and SEOMetadata models

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('projects', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Page',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=500)),
                ('url_slug', models.CharField(max_length=500)),
                ('content', models.TextField(blank=True, default='')),
                ('is_pillar_page', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent_page', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='child_pages', to='content.page')),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pages', to='projects.project')),
            ],
            options={
                'db_table': 'pages',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['project', 'is_pillar_page'], name='pages_project_pillar_idx')],
                'constraints': [models.UniqueConstraint(fields=('project', 'url_slug'), name='unique_page_slug_per_project')],
            },
        ),
        migrations.CreateModel(
            name='SEOMetadata',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('meta_title', models.CharField(blank=True, default='', max_length=500)),
                ('meta_description', models.TextField(blank=True, default='')),
                ('focus_keyword', models.CharField(blank=True, default='', max_length=255)),
                ('secondary_keywords', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('page', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='seo_metadata', to='content.page')),
            ],
            options={
                'db_table': 'seo_metadata',
                'verbose_name_plural': 'SEO metadata',
            },
        ),
    ]
