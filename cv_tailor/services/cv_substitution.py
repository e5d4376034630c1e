"""
Applies a rewrite payload to the document body of the source CV.

Order: title → summary → bullets → skills → currency cleanup.
Every step is best-effort; a field that cannot be located is skipped and the
remaining steps still run.
"""

import logging
import re
from typing import Optional

from cv_tailor.core.config import settings
from cv_tailor.schemas.cv_tailor import RewritePayload, SourceTemplate
from cv_tailor.services.content_constraints import (
    enforce_bullet,
    enforce_skills,
    enforce_summary,
)
from cv_tailor.services.docx_text_replacer import extract_visible_text, replace_in_xml

logger = logging.getLogger(__name__)

# Run properties that isolate a lone "$" into its own styled run
_STYLED_DOLLAR_RE = re.compile(
    r"<w:rPr>(?:(?!</w:rPr>).)*?</w:rPr>\s*<w:t(?:\s[^>]*)?>\$</w:t>",
    re.DOTALL,
)
_PLAIN_DOLLAR = '<w:t xml:space="preserve">$</w:t>'


def default_template() -> SourceTemplate:
    return SourceTemplate(
        title=settings.CV_TITLE,
        summary=settings.CV_SUMMARY,
        skills=settings.CV_SKILLS,
    )


def build_summary_pattern(summary: str) -> Optional[re.Pattern]:
    """
    Whitespace-tolerant pattern for the summary paragraph.
    The source summary is hard-wrapped, so any whitespace run (or none at the
    wrap point) is accepted between words.
    """
    words = summary.split()
    if not words:
        return None
    parts = [re.escape(word).replace("'", "['’]") for word in words]
    return re.compile(r"\s*".join(parts))


def fix_dollar_formatting(xml: str) -> str:
    return _STYLED_DOLLAR_RE.sub(lambda _: _PLAIN_DOLLAR, xml)


def apply_rewrite(
    xml: str,
    payload: RewritePayload,
    template: Optional[SourceTemplate] = None,
) -> str:
    """Return a new document body with the payload's fields substituted in."""
    template = template or default_template()
    applied = 0
    skipped = 0

    def _replace(label: str, original: str, replacement: str) -> None:
        nonlocal xml, applied, skipped
        updated = replace_in_xml(xml, original, replacement)
        if updated == xml:
            skipped += 1
            logger.warning(f"[SUBSTITUTE] {label}: original text not found, skipped")
        else:
            applied += 1
        xml = updated

    # Title
    if payload.title:
        _replace("title", template.title, payload.title)

    # Summary, located on the visible text since it is hard-wrapped in the source
    pattern = build_summary_pattern(template.summary)
    if payload.summary and pattern is not None:
        match = pattern.search(extract_visible_text(xml))
        if match:
            _replace("summary", match.group(0), enforce_summary(payload.summary))
        else:
            skipped += 1
            logger.warning("[SUBSTITUTE] summary: template paragraph not found, skipped")

    # Bullets
    for i, bullet in enumerate(payload.bullets):
        _replace(f"bullet {i}", bullet.original.strip(), enforce_bullet(bullet.tailored))

    # Skills
    if payload.skills:
        _replace("skills", template.skills, enforce_skills(payload.skills))

    xml = fix_dollar_formatting(xml)

    logger.info(f"[SUBSTITUTE] Applied {applied} substitutions, skipped {skipped}")
    return xml
