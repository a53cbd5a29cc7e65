"""
Tests for CSV ingestion.
"""
import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from accounts.sessions import issue_token
from content.models import Page, SEOMetadata
from ingestion.csv_import import CSVFormatError, import_rows, parse_csv, validate_rows
from ingestion.models import CSVUpload
from ingestion.tasks import process_csv_upload
from projects.models import Project

User = get_user_model()

GOOD_CSV = (
    "Title,URL_Slug,Content,Is_Pillar_Page,Parent_Slug,Meta_Title,Secondary_Keywords\n"
    "Web Design,services/web-design,Sites that sell,no,services,Web Design | Acme,\"html, css\"\n"
    "Services,services,What we do,yes,,,\n"
    "About,about,,,,,\n"
)


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
    return Project.objects.create(user=user, name='Acme')


def csv_file(text, name='pages.csv'):
    return SimpleUploadedFile(name, text.encode('utf-8'), content_type='text/csv')


class TestParseCSV:

    def test_headers_are_lowercased(self):
        parsed = parse_csv(GOOD_CSV.encode('utf-8'))
        assert parsed.columns[:2] == ['title', 'url_slug']
        assert len(parsed.rows) == 3
        assert parsed.rows[0]['title'] == 'Web Design'

    def test_bom_is_stripped(self):
        parsed = parse_csv('\ufefftitle,url_slug\nHome,home\n'.encode('utf-8'))
        assert parsed.columns == ['title', 'url_slug']

    def test_blank_rows_skipped(self):
        parsed = parse_csv(b"title,url_slug\nHome,home\n,\n")
        assert len(parsed.rows) == 1

    def test_missing_required_column(self):
        with pytest.raises(CSVFormatError):
            parse_csv(b"title,content\nHome,Hi\n")

    def test_not_utf8(self):
        with pytest.raises(CSVFormatError):
            parse_csv(b"title,url_slug\n\xff\xfe,home\n")

    def test_empty_file(self):
        with pytest.raises(CSVFormatError):
            parse_csv(b"")


@pytest.mark.django_db
class TestImportRows:

    def test_creates_pages_seo_and_parents(self, project):
        rows = parse_csv(GOOD_CSV.encode('utf-8')).rows
        result = import_rows(project, rows)

        assert result.rows_total == 3
        assert result.rows_imported == 3
        assert result.rows_failed == 0
        assert result.errors == []

        services = Page.objects.get(project=project, url_slug='services')
        web = Page.objects.get(project=project, url_slug='services/web-design')
        assert services.is_pillar_page
        assert web.parent_page_id == services.pk

        seo = SEOMetadata.objects.get(page=web)
        assert seo.meta_title == 'Web Design | Acme'
        assert seo.secondary_keywords == ['html', 'css']
        assert not SEOMetadata.objects.filter(page=services).exists()

    def test_row_validation(self, project):
        Page.objects.create(project=project, title='Existing', url_slug='existing')
        rows = [
            {'title': '', 'url_slug': 'no-title'},
            {'title': 'No slug', 'url_slug': ''},
            {'title': 'Taken', 'url_slug': 'existing'},
            {'title': 'First', 'url_slug': 'dup'},
            {'title': 'Second', 'url_slug': 'Dup'},
        ]
        errors = validate_rows(project, rows)
        assert [e['row'] for e in errors] == [1, 2, 3, 5]

    def test_row_cap(self, project, settings):
        settings.CSV_MAX_ROWS = 2
        rows = [{'title': f'P{i}', 'url_slug': f'p{i}'} for i in range(3)]
        result = import_rows(project, rows)
        assert result.rows_imported == 2
        assert result.rows_failed == 1
        assert result.errors[0]['row'] == 3

    def test_unknown_parent_is_reported(self, project):
        rows = [{'title': 'Child', 'url_slug': 'child', 'parent_slug': 'missing'}]
        result = import_rows(project, rows)
        assert result.rows_imported == 1
        assert result.errors[0]['field'] == 'parent_slug'
        assert Page.objects.get(url_slug='child').parent_page is None


@pytest.mark.django_db
class TestCSVUploadAPI:

    def test_upload_is_accepted_then_completed(self, authenticated_client, project, django_capture_on_commit_callbacks):
        client, _ = authenticated_client
        url = f'/api/projects/{project.pk}/csv'

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            response = client.post(url, {'file': csv_file(GOOD_CSV)}, format='multipart')

        assert response.status_code == 202
        assert response.data['status'] == 'pending'
        assert response.data['file_name'] == 'pages.csv'
        assert len(callbacks) == 1

        status_response = client.get(f"{url}/{response.data['upload_id']}")
        assert status_response.status_code == 200
        assert status_response.data['status'] == 'completed'
        assert status_response.data['rows_imported'] == 3
        assert status_response.data['completed_at'] is not None
        assert Page.objects.filter(project=project).count() == 3

        # Re-running the finished job changes nothing
        process_csv_upload(response.data['upload_id'])
        assert Page.objects.filter(project=project).count() == 3

    def test_upload_with_bad_rows_completes_with_errors(self, authenticated_client, project, django_capture_on_commit_callbacks):
        client, _ = authenticated_client
        text = "title,url_slug\nHome,home\n,missing-title\n"
        with django_capture_on_commit_callbacks(execute=True):
            response = client.post(f'/api/projects/{project.pk}/csv', {'file': csv_file(text)}, format='multipart')

        upload = CSVUpload.objects.get(pk=response.data['upload_id'])
        assert upload.status == 'completed_with_errors'
        assert upload.rows_imported == 1
        assert upload.rows_failed == 1
        assert upload.errors[0]['field'] == 'title'

    def test_unreadable_upload_fails(self, authenticated_client, project, django_capture_on_commit_callbacks):
        client, _ = authenticated_client
        with django_capture_on_commit_callbacks(execute=True):
            response = client.post(
                f'/api/projects/{project.pk}/csv', {'file': csv_file('name\nfoo\n')}, format='multipart'
            )

        upload = CSVUpload.objects.get(pk=response.data['upload_id'])
        assert upload.status == 'failed'
        assert 'url_slug' in upload.error_message

    def test_upload_bumps_project_updated_at(self, authenticated_client, project):
        client, _ = authenticated_client
        before = project.updated_at
        client.post(f'/api/projects/{project.pk}/csv', {'file': csv_file(GOOD_CSV)}, format='multipart')
        project.refresh_from_db()
        assert project.updated_at > before

    def test_upload_without_file_is_400(self, authenticated_client, project):
        client, _ = authenticated_client
        response = client.post(f'/api/projects/{project.pk}/csv', {}, format='multipart')
        assert response.status_code == 400
        assert response.data['message'] == 'No file uploaded'

    def test_upload_non_csv_is_400(self, authenticated_client, project):
        client, _ = authenticated_client
        response = client.post(
            f'/api/projects/{project.pk}/csv', {'file': csv_file(GOOD_CSV, name='pages.txt')}, format='multipart'
        )
        assert response.status_code == 400

    def test_status_stays_pending_until_worker_runs(self, authenticated_client, project):
        client, _ = authenticated_client
        response = client.post(f'/api/projects/{project.pk}/csv', {'file': csv_file(GOOD_CSV)}, format='multipart')
        status_response = client.get(f"/api/projects/{project.pk}/csv/{response.data['upload_id']}")
        assert status_response.data['status'] == 'pending'

    def test_redelivered_task_does_not_import_twice(self, project):
        upload = CSVUpload.objects.create(user=project.user, project=project, file_name='pages.csv', file=csv_file(GOOD_CSV))
        upload.mark_in_progress()

        result = process_csv_upload(str(upload.pk))

        assert result['status'] == 'in_progress'
        assert not Page.objects.filter(project=project).exists()
        upload.refresh_from_db()
        assert upload.rows_failed == 0
        assert upload.errors == []

    def test_history(self, authenticated_client, project):
        client, _ = authenticated_client
        client.post(f'/api/projects/{project.pk}/csv', {'file': csv_file(GOOD_CSV)}, format='multipart')
        response = client.get(f'/api/projects/{project.pk}/csv')
        assert response.status_code == 200
        assert response.data['count'] == 1

    def test_preview_does_not_persist(self, authenticated_client, project, settings):
        settings.CSV_PREVIEW_ROWS = 2
        client, _ = authenticated_client
        response = client.post(
            f'/api/projects/{project.pk}/csv/preview', {'file': csv_file(GOOD_CSV)}, format='multipart'
        )
        assert response.status_code == 200
        assert response.data['total_rows'] == 3
        assert len(response.data['rows']) == 2
        assert response.data['errors'] == []
        assert not Page.objects.filter(project=project).exists()
        assert not CSVUpload.objects.exists()

    def test_unknown_upload_is_404(self, authenticated_client, project):
        client, _ = authenticated_client
        response = client.get(f'/api/projects/{project.pk}/csv/00000000-0000-0000-0000-000000000000')
        assert response.status_code == 404
