"""
Tests for AI content generation.
"""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from accounts.sessions import issue_token
from ai import providers
from ai.models import AIContentGeneration
from content.models import Page
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
def page(authenticated_client):
    _, user = authenticated_client
    project = Project.objects.create(user=user, name='Bakery')
    return Page.objects.create(project=project, title='About', url_slug='about', content='Original')


def _generate_url(page):
    return f'/api/projects/{page.project_id}/pages/{page.pk}/generate'


@pytest.mark.django_db
class TestGenerateEndpoint:

    @patch('ai.providers.generate_text', return_value='<p>Fresh bread daily.</p>')
    def test_success_writes_page_and_record(self, mock_generate, authenticated_client, page):
        client, _ = authenticated_client
        response = client.post(_generate_url(page), {'prompt': 'Write an about page'})

        assert response.status_code == 200
        assert response.data['status'] == 'completed'
        assert response.data['content'] == '<p>Fresh bread daily.</p>'

        page.refresh_from_db()
        assert page.content == '<p>Fresh bread daily.</p>'

        generation = AIContentGeneration.objects.get(pk=response.data['generation_id'])
        assert generation.status == 'completed'
        assert generation.generated_content == page.content
        assert generation.completed_at is not None

        sent_prompt = mock_generate.call_args[0][0]
        assert 'Write an about page' in sent_prompt
        assert 'Page title: About' in sent_prompt

    @patch('ai.providers.generate_text', side_effect=providers.ProviderError('rate limited', status_code=429))
    def test_provider_failure_marks_failed_and_keeps_page(self, mock_generate, authenticated_client, page):
        client, _ = authenticated_client
        response = client.post(_generate_url(page), {'prompt': 'Write an about page'})

        assert response.status_code == 429
        assert response.data['error_code'] == 'upstream_error'

        page.refresh_from_db()
        assert page.content == 'Original'

        generation = AIContentGeneration.objects.get(page=page)
        assert generation.status == 'failed'
        assert 'rate limited' in generation.error_message

    @patch('ai.providers.generate_text', side_effect=providers.ProviderError('connection reset'))
    def test_provider_failure_without_status_is_502(self, mock_generate, authenticated_client, page):
        client, _ = authenticated_client
        response = client.post(_generate_url(page), {'prompt': 'Write'})
        assert response.status_code == 502

    @patch('ai.providers.generate_text', side_effect=RuntimeError('boom'))
    def test_unexpected_error_marks_failed(self, mock_generate, authenticated_client, page):
        client, _ = authenticated_client
        response = client.post(_generate_url(page), {'prompt': 'Write'})
        assert response.status_code == 500

        generation = AIContentGeneration.objects.get(page=page)
        assert generation.status == 'failed'
        assert 'boom' in generation.error_message

    @patch('projects.models.Project.touch', side_effect=RuntimeError('write failed'))
    @patch('ai.providers.generate_text', return_value='<p>New</p>')
    def test_failed_write_rolls_back_and_marks_failed(self, mock_generate, mock_touch, authenticated_client, page):
        client, _ = authenticated_client
        response = client.post(_generate_url(page), {'prompt': 'Write'})
        assert response.status_code == 500

        page.refresh_from_db()
        assert page.content == 'Original'
        generation = AIContentGeneration.objects.get(page=page)
        assert generation.status == 'failed'
        assert generation.generated_content == ''

    @patch('ai.providers.generate_text')
    def test_empty_prompt_is_400(self, mock_generate, authenticated_client, page):
        client, _ = authenticated_client
        response = client.post(_generate_url(page), {'prompt': '   '})
        assert response.status_code == 400
        mock_generate.assert_not_called()
        assert not AIContentGeneration.objects.exists()

    def test_unknown_page_is_404(self, authenticated_client, page):
        client, _ = authenticated_client
        url = f'/api/projects/{page.project_id}/pages/00000000-0000-0000-0000-000000000000/generate'
        response = client.post(url, {'prompt': 'Write'})
        assert response.status_code == 404

    @patch('ai.providers.generate_text', return_value='Text')
    def test_generation_history(self, mock_generate, authenticated_client, page):
        client, _ = authenticated_client
        client.post(_generate_url(page), {'prompt': 'One'})
        client.post(_generate_url(page), {'prompt': 'Two'})

        response = client.get(f'/api/projects/{page.project_id}/pages/{page.pk}/generations')
        assert response.status_code == 200
        assert response.data['count'] == 2
        assert {g['prompt'] for g in response.data['data']} == {'One', 'Two'}


class TestProvider:

    def test_missing_api_key(self, settings):
        settings.OPENAI_API_KEY = ''
        with pytest.raises(providers.ProviderError) as exc_info:
            providers.generate_text('Hello')
        assert exc_info.value.status_code == 503

    def test_returns_completion_text(self, settings):
        settings.OPENAI_API_KEY = 'sk-test'
        completion = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='  Generated copy  '))]
        )
        client = MagicMock()
        client.chat.completions.create.return_value = completion

        with patch('openai.OpenAI', return_value=client):
            assert providers.generate_text('Hello') == 'Generated copy'

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs['model'] == settings.OPENAI_MODEL
        assert kwargs['messages'][-1] == {'role': 'user', 'content': 'Hello'}

    def test_empty_completion_is_error(self, settings):
        settings.OPENAI_API_KEY = 'sk-test'
        completion = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=''))])
        client = MagicMock()
        client.chat.completions.create.return_value = completion

        with patch('openai.OpenAI', return_value=client):
            with pytest.raises(providers.ProviderError):
                providers.generate_text('Hello')
