"""
Shared fixtures: fake collaborators and Word documents built with python-docx.
"""

import asyncio
import io
import json
from typing import List, Optional, Sequence, Tuple, Union

import pytest
from docx import Document
from docx.shared import Pt

from cv_tailor.core.config import settings
from cv_tailor.core.exceptions import ConversionError
from cv_tailor.services.docx_text_replacer import escape_xml

W_NS = 'xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"'

ORIGINAL_BULLET = "Built X, improving Y."
TAILORED_BULLET = "Launched X, driving 40% growth in Y."

Run = Union[str, Tuple[str, str]]


def make_body(*paragraphs: Sequence[Run]) -> str:
    """
    Minimal document.xml. Each paragraph is a list of runs; a run is either
    plain text or (text, rPr inner xml).
    """
    parts = [f"<w:document {W_NS}><w:body>"]
    for runs in paragraphs:
        parts.append("<w:p>")
        for run in runs:
            text, rpr = (run, "") if isinstance(run, str) else run
            props = f"<w:rPr>{rpr}</w:rPr>" if rpr else ""
            parts.append(f'<w:r>{props}<w:t xml:space="preserve">{escape_xml(text)}</w:t></w:r>')
        parts.append("</w:p>")
    parts.append("</w:body></w:document>")
    return "".join(parts)


def build_cv_docx(bullets: Optional[List[str]] = None) -> bytes:
    """A CV laid out like the source template, with the awkward bits real CVs have."""
    document = Document()

    # Title split across two runs with different formatting
    p = document.add_paragraph()
    p.add_run("Product ")
    p.add_run("Leader").bold = True

    # Summary hard-wrapped with a line break after "operational"
    head, tail = settings.CV_SUMMARY.split(" expertise.", 1)
    p = document.add_paragraph()
    p.add_run(head)
    p.add_run().add_break()
    p.add_run("expertise." + tail)

    for bullet in bullets if bullets is not None else [ORIGINAL_BULLET, "Scaled Z to 2M users."]:
        document.add_paragraph(bullet)

    # Dollar sign isolated in its own small run
    p = document.add_paragraph()
    p.add_run("Grew revenue by ")
    p.add_run("$").font.size = Pt(8)
    p.add_run("5M in year one.")

    document.add_paragraph(settings.CV_SKILLS)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class FakeClaudeClient:
    """Stands in for ClaudeClient; answers from a queue and records prompts."""

    def __init__(self, responses: List[str], delay: float = 0.0):
        self.responses = list(responses)
        self.delay = delay
        self.prompts: List[Tuple[str, str]] = []

    async def send_request(self, system_prompt: str, user_prompt: str) -> str:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.prompts.append((system_prompt, user_prompt))
        return self.responses.pop(0)


class FailingConverter:
    def __init__(self):
        self.calls = 0

    async def convert(self, docx_bytes: bytes, target_format: str = "pdf") -> bytes:
        self.calls += 1
        raise ConversionError("soffice exploded")


class FakePdfConverter:
    def __init__(self):
        self.calls = 0

    async def convert(self, docx_bytes: bytes, target_format: str = "pdf") -> bytes:
        self.calls += 1
        return b"%PDF-1.4 fake"


def rewrite_response(bullets=None, title="Senior Product Manager", skills="Python | SQL | Figma") -> str:
    return "```json\n" + json.dumps({
        "title": title,
        "summary": "Product manager who ships AI features — fast.",
        "bullets": bullets if bullets is not None else [
            {"original": ORIGINAL_BULLET, "tailored": "Shipped X, lifting Y by 10%."},
        ],
        "skills": skills,
    }) + "\n```"


def polish_response(bullets=None, title="Senior Product Manager") -> str:
    return json.dumps({
        "title": title,
        "summary": "Product manager who ships AI features – quickly and safely.",
        "bullets": bullets if bullets is not None else [TAILORED_BULLET],
        "skills": "Python | SQL | Figma | A/B Testing",
    })


@pytest.fixture
def cv_docx() -> bytes:
    return build_cv_docx()


@pytest.fixture
def fake_client() -> FakeClaudeClient:
    return FakeClaudeClient([rewrite_response(), polish_response()])
