"""
Tests for pages, page hierarchy and SEO metadata.
"""
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from accounts.sessions import issue_token
from content.hierarchy import HierarchyError, build_page_tree, validate_parent
from content.models import Page, SEOMetadata
from content.serializers import SEOMetadataSerializer
from content.slugs import normalize_slug
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
def project(authenticated_client):
    _, user = authenticated_client
    return Project.objects.create(user=user, name='Test Project')


@pytest.fixture
def create_page():
    def _create_page(project, title='Page', url_slug='page', **kwargs):
        return Page.objects.create(project=project, title=title, url_slug=url_slug, **kwargs)
    return _create_page


class TestNormalizeSlug:

    def test_segments_are_slugified(self):
        assert normalize_slug('/About Us/') == 'about-us'
        assert normalize_slug('services/Web Design') == 'services/web-design'

    def test_empty_segments_dropped(self):
        assert normalize_slug('a//b/') == 'a/b'

    def test_nothing_usable(self):
        assert normalize_slug('///') == ''
        assert normalize_slug(None) == ''


@pytest.mark.django_db
class TestHierarchy:

    def test_parent_from_other_project_rejected(self, project, create_page):
        other = Project.objects.create(user=project.user, name='Other')
        parent = create_page(other, url_slug='elsewhere')
        with pytest.raises(HierarchyError):
            validate_parent(project, None, parent)

    def test_self_parent_rejected(self, project, create_page):
        page = create_page(project)
        with pytest.raises(HierarchyError):
            validate_parent(project, page.pk, page)

    def test_cycle_rejected(self, project, create_page):
        a = create_page(project, title='A', url_slug='a')
        b = create_page(project, title='B', url_slug='b', parent_page=a)
        c = create_page(project, title='C', url_slug='c', parent_page=b)
        with pytest.raises(HierarchyError):
            validate_parent(project, a.pk, c)

    def test_valid_parent_accepted(self, project, create_page):
        a = create_page(project, title='A', url_slug='a')
        b = create_page(project, title='B', url_slug='b')
        validate_parent(project, b.pk, a)

    def test_tree_orders_pillars_first(self, project, create_page):
        create_page(project, title='Blog', url_slug='blog')
        hub = create_page(project, title='Services', url_slug='services', is_pillar_page=True)
        create_page(project, title='SEO', url_slug='services/seo', parent_page=hub)
        create_page(project, title='Ads', url_slug='services/ads', parent_page=hub)

        tree = build_page_tree(list(project.pages.all()))
        assert [n['title'] for n in tree] == ['Services', 'Blog']
        assert [n['title'] for n in tree[0]['children']] == ['Ads', 'SEO']


@pytest.mark.django_db
class TestPageAPI:

    def test_create_page(self, authenticated_client, project):
        client, _ = authenticated_client
        response = client.post(f'/api/projects/{project.pk}/pages', {
            'title': 'About Us',
            'url_slug': '/About Us',
            'content': '<p>Hello</p>',
        })
        assert response.status_code == 201
        assert response.data['url_slug'] == 'about-us'
        assert response.data['project_id'] == str(project.pk)
        assert response.data['parent_page_id'] is None

    def test_create_page_touches_project(self, authenticated_client, project):
        client, _ = authenticated_client
        Project.objects.filter(pk=project.pk).update(updated_at=project.updated_at - timedelta(days=1))
        before = Project.objects.get(pk=project.pk).updated_at

        client.post(f'/api/projects/{project.pk}/pages', {'title': 'Home', 'url_slug': 'home'})
        assert Project.objects.get(pk=project.pk).updated_at > before

    def test_duplicate_slug_is_conflict(self, authenticated_client, project, create_page):
        client, _ = authenticated_client
        create_page(project, url_slug='home')
        response = client.post(f'/api/projects/{project.pk}/pages', {'title': 'Home 2', 'url_slug': 'Home'})
        assert response.status_code == 409
        assert response.data['error_code'] == 'conflict'

    def test_same_slug_in_other_project_allowed(self, authenticated_client, project, create_page):
        client, user = authenticated_client
        other = Project.objects.create(user=user, name='Other')
        create_page(other, url_slug='home')
        response = client.post(f'/api/projects/{project.pk}/pages', {'title': 'Home', 'url_slug': 'home'})
        assert response.status_code == 201

    def test_parent_from_other_project_is_400(self, authenticated_client, project, create_page):
        client, user = authenticated_client
        other = Project.objects.create(user=user, name='Other')
        foreign = create_page(other, url_slug='foreign')
        response = client.post(f'/api/projects/{project.pk}/pages', {
            'title': 'Child',
            'url_slug': 'child',
            'parent_page_id': str(foreign.pk),
        })
        assert response.status_code == 400
        assert 'parent_page_id' in response.data['errors']

    def test_cycle_via_update_is_400(self, authenticated_client, project, create_page):
        client, _ = authenticated_client
        parent = create_page(project, title='Parent', url_slug='parent')
        child = create_page(project, title='Child', url_slug='child', parent_page=parent)
        response = client.patch(f'/api/projects/{project.pk}/pages/{parent.pk}', {
            'parent_page_id': str(child.pk),
        })
        assert response.status_code == 400
        parent.refresh_from_db()
        assert parent.parent_page_id is None

    def test_update_page(self, authenticated_client, project, create_page):
        client, _ = authenticated_client
        page = create_page(project)
        response = client.put(f'/api/projects/{project.pk}/pages/{page.pk}', {
            'title': 'Renamed',
            'url_slug': 'page',
            'content': 'Body',
        })
        assert response.status_code == 200
        page.refresh_from_db()
        assert page.title == 'Renamed'
        assert page.content == 'Body'

    def test_list_pages_paginated(self, authenticated_client, project, create_page):
        client, _ = authenticated_client
        for i in range(3):
            create_page(project, title=f'Page {i}', url_slug=f'page-{i}')
        response = client.get(f'/api/projects/{project.pk}/pages', {'limit': 2, 'page': 2})
        assert response.status_code == 200
        assert len(response.data['data']) == 1
        assert response.data['pagination']['total_items'] == 3
        assert response.data['pagination']['current_page'] == 2

    def test_delete_page(self, authenticated_client, project, create_page):
        client, _ = authenticated_client
        page = create_page(project)
        response = client.delete(f'/api/projects/{project.pk}/pages/{page.pk}')
        assert response.status_code == 204
        assert not Page.objects.filter(pk=page.pk).exists()

    def test_pages_of_foreign_project_are_404(self, authenticated_client, create_user, create_page):
        client, _ = authenticated_client
        foreign = Project.objects.create(user=create_user(email='other@example.com'), name='Theirs')
        page = create_page(foreign)
        assert client.get(f'/api/projects/{foreign.pk}/pages').status_code == 404
        assert client.get(f'/api/projects/{foreign.pk}/pages/{page.pk}').status_code == 404

    def test_unknown_page_is_404(self, authenticated_client, project):
        client, _ = authenticated_client
        response = client.get(f'/api/projects/{project.pk}/pages/00000000-0000-0000-0000-000000000000')
        assert response.status_code == 404
        assert response.data['message'] == 'Page not found'


@pytest.mark.django_db
class TestSEOMetadata:

    def test_get_missing_is_404(self, authenticated_client, project, create_page):
        client, _ = authenticated_client
        page = create_page(project)
        response = client.get(f'/api/projects/{project.pk}/pages/{page.pk}/seo')
        assert response.status_code == 404

    def test_upsert_creates_then_replaces(self, authenticated_client, project, create_page):
        client, _ = authenticated_client
        page = create_page(project)
        url = f'/api/projects/{project.pk}/pages/{page.pk}/seo'

        response = client.post(url, {
            'meta_title': 'First',
            'meta_description': 'Desc',
            'secondary_keywords': 'bread, cakes , ',
        })
        assert response.status_code == 200
        assert response.data['secondary_keywords'] == ['bread', 'cakes']

        response = client.put(url, {'meta_title': 'Second', 'focus_keyword': 'bakery'})
        assert response.status_code == 200
        assert response.data['meta_title'] == 'Second'
        # Full replacement: omitted fields fall back to their defaults
        assert response.data['meta_description'] == ''

        assert SEOMetadata.objects.filter(page=page).count() == 1
        response = client.get(url)
        assert response.status_code == 200
        assert response.data['focus_keyword'] == 'bakery'

    def test_keyword_string_with_blank_pieces(self):
        serializer = SEOMetadataSerializer(data={'secondary_keywords': 'bread, cakes , ,'})
        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data['secondary_keywords'] == ['bread', 'cakes']

    def test_keyword_list_is_stripped(self):
        serializer = SEOMetadataSerializer(data={'secondary_keywords': [' rye ', 'sourdough']})
        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data['secondary_keywords'] == ['rye', 'sourdough']
