"""
Layout constraints for AI-rewritten CV content.
Applied once to each candidate string before it is written into the document;
the rules never look at the document itself.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cv_tailor.core.config import settings

logger = logging.getLogger(__name__)

_DASHES_RE = re.compile("[—–]")  # em-dash, en-dash
_WORD_SPLIT_RE = re.compile(r"\s+")


class Truncation(Enum):
    NONE = "none"
    WORDS = "words"           # keep first N words + "."
    SEGMENTS = "segments"     # keep first N separator-delimited segments


@dataclass
class ConstraintRule:
    max_words: Optional[int] = None
    max_chars: Optional[int] = None
    truncation: Truncation = Truncation.NONE
    separator: str = " | "
    max_segments: Optional[int] = None
    normalize_dashes: bool = False


BULLET_RULE = ConstraintRule(
    max_words=settings.BULLET_MAX_WORDS,
    truncation=Truncation.WORDS,
    normalize_dashes=True,
)

SKILLS_RULE = ConstraintRule(
    max_chars=settings.SKILLS_MAX_CHARS,
    truncation=Truncation.SEGMENTS,
    separator=" | ",
    max_segments=settings.SKILLS_MAX_SEGMENTS,
)

SUMMARY_RULE = ConstraintRule(normalize_dashes=True)


def normalize_dashes(text: str) -> str:
    return _DASHES_RE.sub("-", text)


def _truncate_words(field: str, value: str, max_words: int) -> str:
    words = [w for w in _WORD_SPLIT_RE.split(value) if w]
    if len(words) <= max_words:
        return value
    logger.warning(f"[CONSTRAINT] {field} too long ({len(words)} words), truncating to {max_words} words")
    kept = words[:max_words]
    kept[-1] = kept[-1].rstrip(".,;:")
    return " ".join(kept) + "."


def _truncate_segments(field: str, value: str, rule: ConstraintRule) -> str:
    if rule.max_chars is None or len(value) <= rule.max_chars:
        return value
    logger.warning(f"[CONSTRAINT] {field} too long ({len(value)} chars), truncating to {rule.max_chars}")

    segments = value.split(rule.separator)
    if rule.max_segments is not None:
        segments = segments[:rule.max_segments]
    while len(segments) > 1 and len(rule.separator.join(segments)) > rule.max_chars:
        segments.pop()

    result = rule.separator.join(segments)
    if len(result) > rule.max_chars:
        # Single segment longer than the whole budget
        result = result[:rule.max_chars].rstrip()
    return result


def enforce(field: str, value: str, rule: ConstraintRule) -> str:
    """Return `value` adjusted to satisfy `rule`."""
    if not value:
        return value

    if rule.normalize_dashes:
        value = normalize_dashes(value)

    if rule.truncation is Truncation.WORDS and rule.max_words is not None:
        value = _truncate_words(field, value, rule.max_words)
    elif rule.truncation is Truncation.SEGMENTS:
        value = _truncate_segments(field, value, rule)

    return value


def enforce_bullet(text: str) -> str:
    return enforce("bullet", text.strip(), BULLET_RULE)


def enforce_skills(text: str) -> str:
    return enforce("skills", text, SKILLS_RULE)


def enforce_summary(text: str) -> str:
    return enforce("summary", text, SUMMARY_RULE)
