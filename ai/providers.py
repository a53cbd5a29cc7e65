"""
AI provider integration (OpenAI chat completions).
"""
import logging

from django.conf import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You write clear, engaging copy for marketing websites. "
    "Return only the page content, formatted as HTML paragraphs and headings."
)


class ProviderError(Exception):
    """The provider call failed. status_code is the provider's HTTP status, if any."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


def build_prompt(prompt: str, page=None) -> str:
    """Prefix the user's prompt with what we know about the page."""
    if page is None:
        return prompt
    lines = [f"Page title: {page.title}", f"URL: /{page.url_slug}"]
    if page.is_pillar_page:
        lines.append("This is a pillar page that introduces a whole topic.")
    return "\n".join(lines) + "\n\n" + prompt


def generate_text(prompt: str, system_prompt: str = SYSTEM_PROMPT,
                  max_tokens: int = None, temperature: float = None) -> str:
    """
    Ask the configured model for text.

    Returns the completion text. Raises ProviderError on any failure,
    including a missing API key or an empty completion.
    """
    import openai

    api_key = settings.OPENAI_API_KEY
    if not api_key:
        raise ProviderError("No AI provider configured. Set OPENAI_API_KEY.", status_code=503)

    client = openai.OpenAI(api_key=api_key)
    try:
        response = client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            temperature=settings.AI_TEMPERATURE if temperature is None else temperature,
            max_tokens=max_tokens or settings.AI_MAX_TOKENS,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
        )
    except openai.APIStatusError as e:
        logger.error(f"OpenAI call failed with status {e.status_code}: {e}")
        raise ProviderError(str(e), status_code=e.status_code) from e
    except openai.OpenAIError as e:
        logger.error(f"OpenAI call failed: {e}")
        raise ProviderError(str(e)) from e

    text = response.choices[0].message.content if response.choices else None
    if not text or not text.strip():
        raise ProviderError("The AI provider returned an empty response.")
    return text.strip()
