"""
Request-scoped dependencies. Configuration is read once into `settings`
and handed to collaborators through their constructors.
"""

from typing import Optional

from cv_tailor.core.config import settings
from cv_tailor.llm.claude_client import ClaudeClient
from cv_tailor.services.document_converter import DocumentConverter


def get_claude_client() -> Optional[ClaudeClient]:
    """Claude client built from settings, or None when no API key is configured."""
    if not settings.ANTHROPIC_API_KEY:
        return None
    return ClaudeClient(
        api_key=settings.ANTHROPIC_API_KEY,
        model=settings.ANTHROPIC_MODEL,
        max_tokens=settings.ANTHROPIC_MAX_TOKENS,
        timeout=settings.ANTHROPIC_TIMEOUT_SECONDS,
    )


def get_document_converter() -> DocumentConverter:
    return DocumentConverter(
        soffice_path=settings.SOFFICE_PATH,
        timeout=settings.CONVERSION_TIMEOUT_SECONDS,
    )
