"""
API endpoints for AI content generation.
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from content.models import Page
from projects.permissions import owned_project
from sitegenie.exceptions import NotFoundError, UpstreamError, ValidationError
from .generation import generate_page_content
from .models import AIContentGeneration
from .providers import ProviderError

logger = logging.getLogger(__name__)


def _get_page(request, project_id, page_id):
    project = owned_project(request, project_id)
    try:
        return Page.objects.select_related('project').get(pk=page_id, project=project)
    except Page.DoesNotExist:
        raise NotFoundError('Page not found')


def _serialize_generation(gen):
    return {
        'generation_id': str(gen.id),
        'page_id': str(gen.page_id),
        'prompt': gen.prompt,
        'status': gen.status,
        'generated_content': gen.generated_content,
        'model': gen.model,
        'error_message': gen.error_message,
        'created_at': gen.created_at.isoformat() if gen.created_at else None,
        'completed_at': gen.completed_at.isoformat() if gen.completed_at else None,
    }


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def generate(request, project_id, page_id):
    """
    POST /api/projects/{project_id}/pages/{page_id}/generate

    Body: {"prompt": "..."}
    Replaces the page content with the generated text.
    """
    page = _get_page(request, project_id, page_id)

    prompt = request.data.get('prompt')
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValidationError('prompt is required')

    try:
        generation = generate_page_content(page, prompt.strip())
    except ProviderError as e:
        raise UpstreamError(f"AI content generation failed: {e}", status_code=e.status_code)

    return Response({
        'generation_id': str(generation.id),
        'status': generation.status,
        'content': generation.generated_content,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def generations(request, project_id, page_id):
    """GET /api/projects/{project_id}/pages/{page_id}/generations - newest first."""
    page = _get_page(request, project_id, page_id)
    rows = AIContentGeneration.objects.filter(page=page)
    return Response({
        'data': [_serialize_generation(g) for g in rows],
        'count': rows.count(),
    })
