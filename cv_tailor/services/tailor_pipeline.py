"""
End-to-end tailoring of one CV against one job description.

1. Extract plain text from the CV (for the prompt) + read word/document.xml
2. Rewrite pass → polish pass (sequential, polish depends on rewrite)
3. Substitute the rewrite into the document body
4. Repackage the archive
5. Convert to PDF unless docx was requested; fall back to docx on failure
"""

import logging
from typing import Optional

from cv_tailor.core.exceptions import ConversionError
from cv_tailor.llm.claude_client import ClaudeClient
from cv_tailor.llm.cv_rewriter import generate_rewrite, polish_rewrite
from cv_tailor.schemas.cv_tailor import SourceTemplate, TailoredDocument
from cv_tailor.services.cv_substitution import apply_rewrite, default_template
from cv_tailor.services.docx_archive import DOCX_MEDIA_TYPE, read_document_xml, write_document_xml
from cv_tailor.services.document_converter import PDF_MEDIA_TYPE, DocumentConverter
from cv_tailor.utils.docx_extractor import extract_text_from_docx

logger = logging.getLogger(__name__)


async def tailor_cv(
    docx_bytes: bytes,
    job_description: str,
    client: ClaudeClient,
    converter: DocumentConverter,
    output_format: str = "pdf",
    template: Optional[SourceTemplate] = None,
) -> TailoredDocument:
    template = template or default_template()

    cv_text = extract_text_from_docx(docx_bytes)
    document_xml = read_document_xml(docx_bytes)
    logger.info(f"Loaded CV: {len(cv_text)} chars of text, {len(document_xml)} chars of XML")

    payload = await generate_rewrite(client, cv_text, job_description, template)
    payload = await polish_rewrite(client, payload)

    modified_xml = apply_rewrite(document_xml, payload, template)
    modified_docx = write_document_xml(docx_bytes, modified_xml)

    if output_format == "docx":
        return TailoredDocument(content=modified_docx, media_type=DOCX_MEDIA_TYPE, extension=".docx")

    try:
        pdf_bytes = await converter.convert(modified_docx, "pdf")
    except ConversionError as e:
        logger.warning(f"PDF conversion failed, returning docx: {e}")
        return TailoredDocument(content=modified_docx, media_type=DOCX_MEDIA_TYPE, extension=".docx")

    return TailoredDocument(content=pdf_bytes, media_type=PDF_MEDIA_TYPE, extension=".pdf")
