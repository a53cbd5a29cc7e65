"""
Synchronous AI content fill for a page.
"""
import logging

from django.conf import settings
from django.db import transaction

from jobs.status import JobStatus
from . import providers
from .models import AIContentGeneration

logger = logging.getLogger(__name__)


def _fail(generation, message):
    # A rolled-back atomic block can leave the in-memory status ahead of the row
    generation.status = (
        AIContentGeneration.objects.filter(pk=generation.pk)
        .values_list('status', flat=True)
        .first()
    ) or JobStatus.PENDING
    generation.mark_failed(message)


def generate_page_content(page, prompt):
    """
    Generate content for `page` from `prompt` and store it.

    The generation row is committed as pending before the provider is called,
    and the provider call happens outside any transaction. On success the
    page content and the completed generation are written together. On any
    failure the generation is marked failed, the page is left untouched and
    the exception propagates.
    """
    project = page.project
    generation = AIContentGeneration.objects.create(
        project=project,
        page=page,
        prompt=prompt,
        model=settings.OPENAI_MODEL,
    )
    logger.info(f"AI generation {generation.id} started for page {page.id}")

    try:
        content = providers.generate_text(providers.build_prompt(prompt, page))
        with transaction.atomic():
            page.content = content
            page.save(update_fields=['content', 'updated_at'])
            generation.mark_completed(generated_content=content)
            project.touch()
    except providers.ProviderError as e:
        _fail(generation, str(e) or 'AI provider error')
        logger.warning(f"AI generation {generation.id} failed: {e}")
        raise
    except Exception as e:
        logger.exception(f"AI generation {generation.id} failed")
        _fail(generation, f"Generation failed: {e}")
        raise

    logger.info(f"AI generation {generation.id} completed ({len(content)} chars)")
    return generation
