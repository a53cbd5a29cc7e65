"""
Tests for exports and publishing.
"""
import io
import zipfile
from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from django.core.files.storage import default_storage
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.sessions import issue_token
from content.models import Page, SEOMetadata
from exports.bundler import build_zip, render_site
from exports.models import DeploymentLog
from exports.tasks import build_export
from projects.models import Project

User = get_user_model()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def authenticated_client(api_client):
    user = User.objects.create_user(email='test@example.com', username='test@example.com', password='testpass123')
    token, _ = issue_token(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return api_client, user


@pytest.fixture
def project(authenticated_client):
    _, user = authenticated_client
    project = Project.objects.create(
        user=user,
        name='Acme',
        design_settings={'colors': {'primary': '#123456'}},
    )
    services = Page.objects.create(project=project, title='Services', url_slug='services',
                                   is_pillar_page=True, content='<p>What we do</p>')
    web = Page.objects.create(project=project, title='Web Design', url_slug='services/web-design',
                              parent_page=services, content='<p>Sites</p>')
    SEOMetadata.objects.create(page=web, meta_title='Web Design | Acme', meta_description='We build sites')
    return project


def _read_zip(response):
    data = b''.join(response.streaming_content)
    return zipfile.ZipFile(io.BytesIO(data))


@pytest.mark.django_db
class TestBundler:

    def test_render_site_files(self, project):
        files = render_site(project)
        assert set(files) == {
            'index.html', 'styles.css', 'sitemap.xml',
            'services/index.html', 'services/web-design/index.html',
        }
        page = files['services/web-design/index.html']
        assert '<title>Web Design | Acme</title>' in page
        assert 'content="We build sites"' in page
        assert 'href="../../styles.css"' in page
        assert '#123456' in files['styles.css']
        assert f'/{project.pk}/services/web-design/</loc>' in files['sitemap.xml']

    def test_render_site_reports_progress(self, project):
        seen = []
        render_site(project, on_page=seen.append)
        assert seen == [1, 2]

    def test_build_zip(self):
        archive = zipfile.ZipFile(io.BytesIO(build_zip({'index.html': '<html></html>'})))
        assert archive.namelist() == ['index.html']


@pytest.mark.django_db
class TestExportAPI:

    def test_export_lifecycle(self, authenticated_client, project, django_capture_on_commit_callbacks):
        client, _ = authenticated_client
        base = f'/api/projects/{project.pk}/export'

        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            response = client.post(base)
        assert response.status_code == 202
        assert response.data['status'] == 'pending'
        export_id = response.data['export_id']

        # Before the worker runs
        status_response = client.get(f'{base}/{export_id}')
        assert status_response.data == {
            'export_id': export_id,
            'status': 'pending',
            'progress': 0,
            'download_url': None,
            'error_message': None,
        }
        assert client.get(f'{base}/{export_id}/download').status_code == 404

        for callback in callbacks:
            callback()

        status_response = client.get(f'{base}/{export_id}/status')
        assert status_response.data['status'] == 'completed'
        assert status_response.data['progress'] == 100
        assert status_response.data['download_url'] == f'{base}/{export_id}/download'

        download = client.get(f'{base}/{export_id}/download')
        assert download.status_code == 200
        assert download['Content-Type'] == 'application/zip'
        assert 'attachment' in download['Content-Disposition']
        assert 'services/web-design/index.html' in _read_zip(download).namelist()

        log = DeploymentLog.objects.get(pk=export_id)
        assert log.pages_total == 2
        assert log.pages_bundled == 2
        assert log.completed_at is not None

    def test_failed_export(self, authenticated_client, project, django_capture_on_commit_callbacks):
        client, _ = authenticated_client
        with patch('exports.bundler.render_site', side_effect=RuntimeError('disk full')):
            with django_capture_on_commit_callbacks(execute=True):
                response = client.post(f'/api/projects/{project.pk}/export')

        export_id = response.data['export_id']
        log = DeploymentLog.objects.get(pk=export_id)
        assert log.deployment_status == 'failed'
        assert 'disk full' in log.error_message
        status_response = client.get(f'/api/projects/{project.pk}/export/{export_id}')
        assert 'disk full' in status_response.data['error_message']
        assert client.get(f'/api/projects/{project.pk}/export/{export_id}/download').status_code == 404

    def test_task_for_deleted_job_is_noop(self, project):
        log = DeploymentLog.objects.create(project=project, started_at=timezone.now())
        log_id = str(log.pk)
        log.delete()
        assert build_export(log_id) == {'export_id': log_id, 'status': None}

    def test_redelivered_task_for_running_export_is_skipped(self, project):
        log = DeploymentLog.objects.create(project=project, started_at=timezone.now())
        log.mark_in_progress(pages_total=2)

        assert build_export(str(log.pk)) == {'export_id': str(log.pk), 'status': None}
        log.refresh_from_db()
        assert log.deployment_status == 'in_progress'
        assert not log.artifact

    def test_history(self, authenticated_client, project):
        client, _ = authenticated_client
        client.post(f'/api/projects/{project.pk}/export')
        client.post(f'/api/projects/{project.pk}/export')
        response = client.get(f'/api/projects/{project.pk}/export/history')
        assert response.status_code == 200
        assert response.data['count'] == 2

    def test_unknown_export_is_404(self, authenticated_client, project):
        client, _ = authenticated_client
        response = client.get(f'/api/projects/{project.pk}/export/00000000-0000-0000-0000-000000000000')
        assert response.status_code == 404


@pytest.mark.django_db
class TestPublishAPI:

    def test_publish_lifecycle(self, authenticated_client, project, django_capture_on_commit_callbacks, settings):
        settings.SITEGENIE_PUBLISH_BASE_URL = 'https://sites.example.com'
        client, _ = authenticated_client

        with django_capture_on_commit_callbacks(execute=True):
            response = client.post(f'/api/projects/{project.pk}/publish')
        assert response.status_code == 202
        assert response.data['status'] == 'pending'
        publish_id = response.data['publish_id']

        status_response = client.get(f'/api/projects/{project.pk}/publish/{publish_id}/status')
        assert status_response.data['status'] == 'completed'
        assert status_response.data['progress'] == 100
        assert status_response.data['site_url'] == f'https://sites.example.com/{project.pk}/'

        project.refresh_from_db()
        assert project.status == 'published'
        assert default_storage.exists(f'published/{project.pk}/services/web-design/index.html')

    def test_republish_replaces_files(self, authenticated_client, project, django_capture_on_commit_callbacks):
        client, _ = authenticated_client
        with django_capture_on_commit_callbacks(execute=True):
            client.post(f'/api/projects/{project.pk}/publish')
        Page.objects.filter(url_slug='services/web-design').delete()
        with django_capture_on_commit_callbacks(execute=True):
            client.post(f'/api/projects/{project.pk}/publish')

        assert not default_storage.exists(f'published/{project.pk}/services/web-design/index.html')
        assert default_storage.exists(f'published/{project.pk}/services/index.html')

    def test_export_id_is_not_a_publish_id(self, authenticated_client, project):
        client, _ = authenticated_client
        response = client.post(f'/api/projects/{project.pk}/export')
        status_response = client.get(f"/api/projects/{project.pk}/publish/{response.data['export_id']}/status")
        assert status_response.status_code == 404
