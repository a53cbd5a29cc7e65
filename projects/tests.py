"""
Tests for projects app.
"""
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from accounts.sessions import issue_token
from content.models import Page, SEOMetadata
from projects.models import Project

User = get_user_model()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def create_user():
    def _create_user(email="test@example.com", password="testpass123"):
        return User.objects.create_user(email=email, username=email, password=password)
    return _create_user


@pytest.fixture
def authenticated_client(api_client, create_user):
    user = create_user()
    token, _ = issue_token(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return api_client, user


@pytest.fixture
def create_project():
    def _create_project(user, name="Test Project", **kwargs):
        return Project.objects.create(user=user, name=name, **kwargs)
    return _create_project


@pytest.mark.django_db
class TestProjectCRUD:

    def test_create_project_defaults(self, authenticated_client):
        client, user = authenticated_client
        response = client.post('/api/projects', {'name': 'Bakery', 'description': 'Fresh bread'})
        assert response.status_code == 201
        assert response.data['status'] == 'draft'
        assert response.data['default_language'] == 'en'
        assert response.data['user_id'] == str(user.pk)
        assert response.data['page_count'] == 0

    def test_create_project_blank_name(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/projects', {'name': '   '})
        assert response.status_code == 400
        assert response.data['error_code'] == 'validation_error'
        assert 'name' in response.data['errors']

    def test_create_project_cannot_publish_directly(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/projects', {'name': 'Bakery', 'status': 'published'})
        assert response.status_code == 400

    def test_list_projects_is_paginated_and_scoped(self, authenticated_client, create_user, create_project):
        client, user = authenticated_client
        for i in range(3):
            create_project(user, name=f"Project {i}")
        create_project(create_user(email='other@example.com'), name='Not mine')

        response = client.get('/api/projects', {'limit': 2})
        assert response.status_code == 200
        assert len(response.data['data']) == 2
        assert response.data['pagination'] == {
            'total_items': 3,
            'total_pages': 2,
            'current_page': 1,
            'limit': 2,
        }
        names = [p['name'] for p in response.data['data']]
        assert 'Not mine' not in names

    def test_retrieve_other_users_project_is_404(self, authenticated_client, create_user, create_project):
        client, _ = authenticated_client
        foreign = create_project(create_user(email='other@example.com'))
        response = client.get(f'/api/projects/{foreign.pk}')
        assert response.status_code == 404
        assert response.data['error_code'] == 'not_found'

    def test_malformed_project_id_is_404(self, authenticated_client):
        client, _ = authenticated_client
        response = client.get('/api/projects/' + 'a' * 36)
        assert response.status_code == 404
        assert response.data['error_code'] == 'not_found'

    def test_update_and_archive_project(self, authenticated_client, create_project):
        client, user = authenticated_client
        project = create_project(user)
        response = client.patch(f'/api/projects/{project.pk}', {'name': 'Renamed', 'status': 'archived'})
        assert response.status_code == 200
        project.refresh_from_db()
        assert project.name == 'Renamed'
        assert project.status == 'archived'

    def test_delete_project_cascades(self, authenticated_client, create_project):
        client, user = authenticated_client
        project = create_project(user)
        Page.objects.create(project=project, title='Home', url_slug='home')
        response = client.delete(f'/api/projects/{project.pk}')
        assert response.status_code == 204
        assert not Project.objects.filter(pk=project.pk).exists()
        assert not Page.objects.filter(project_id=project.pk).exists()

    def test_requires_authentication(self, api_client):
        response = api_client.get('/api/projects')
        assert response.status_code == 401


@pytest.mark.django_db
class TestProjectDesign:

    def test_get_design_returns_defaults(self, authenticated_client, create_project):
        client, user = authenticated_client
        project = create_project(user)
        response = client.get(f'/api/projects/{project.pk}/design')
        assert response.status_code == 200
        design = response.data['design_settings']
        assert design['theme'] == 'classic'
        assert design['typography']['base_font_size'] == 16

    def test_update_design_merges_sections(self, authenticated_client, create_project):
        client, user = authenticated_client
        project = create_project(user)
        response = client.put(f'/api/projects/{project.pk}/design', {
            'theme': 'modern',
            'colors': {'primary': '#ff0000'},
        })
        assert response.status_code == 200
        design = response.data['design_settings']
        assert design['theme'] == 'modern'
        assert design['colors']['primary'] == '#ff0000'
        # Untouched keys keep their defaults
        assert design['colors']['background'] == '#ffffff'

        project.refresh_from_db()
        assert project.design_settings['colors'] == {'primary': '#ff0000'}

    def test_update_design_rejects_bad_color(self, authenticated_client, create_project):
        client, user = authenticated_client
        project = create_project(user)
        response = client.put(f'/api/projects/{project.pk}/design', {'colors': {'primary': 'red'}})
        assert response.status_code == 400


@pytest.mark.django_db
class TestProjectStructureAndAnalytics:

    def test_structure_nests_children(self, authenticated_client, create_project):
        client, user = authenticated_client
        project = create_project(user)
        services = Page.objects.create(project=project, title='Services', url_slug='services', is_pillar_page=True)
        Page.objects.create(project=project, title='Web Design', url_slug='services/web-design', parent_page=services)
        Page.objects.create(project=project, title='About', url_slug='about')

        response = client.get(f'/api/projects/{project.pk}/structure')
        assert response.status_code == 200
        assert response.data['total_pages'] == 3
        roots = response.data['pages']
        assert [r['title'] for r in roots] == ['Services', 'About']
        assert [c['title'] for c in roots[0]['children']] == ['Web Design']

    def test_analytics_counts(self, authenticated_client, create_project):
        client, user = authenticated_client
        project = create_project(user)
        home = Page.objects.create(project=project, title='Home', url_slug='home', is_pillar_page=True, content='<p>Hi</p>')
        Page.objects.create(project=project, title='About', url_slug='about')
        SEOMetadata.objects.create(page=home, meta_title='Home')

        response = client.get(f'/api/projects/{project.pk}/analytics')
        assert response.status_code == 200
        assert response.data['pages']['total'] == 2
        assert response.data['pages']['pillar_pages'] == 1
        assert response.data['pages']['with_content'] == 1
        assert response.data['seo']['pages_with_metadata'] == 1
        assert response.data['seo']['coverage'] == 50.0

    def test_analytics_date_window(self, authenticated_client, create_project):
        client, user = authenticated_client
        project = create_project(user)
        Page.objects.create(project=project, title='Home', url_slug='home')

        response = client.get(f'/api/projects/{project.pk}/analytics', {'date_to': '2000-01-01'})
        assert response.status_code == 200
        assert response.data['pages']['total'] == 0

    def test_analytics_rejects_bad_date(self, authenticated_client, create_project):
        client, user = authenticated_client
        project = create_project(user)
        response = client.get(f'/api/projects/{project.pk}/analytics', {'date_from': 'yesterday'})
        assert response.status_code == 400
