# File: cv_tailor/utils/docx_extractor.py
import io
import logging

from docx import Document

from cv_tailor.core.exceptions import DocumentStructureError

logger = logging.getLogger(__name__)

def extract_text_from_docx(docx_content: bytes) -> str:
    """Extract plain text from a Word document, one paragraph per line."""
    try:
        document = Document(io.BytesIO(docx_content))
    except Exception as e:
        logger.error(f"Error opening docx: {str(e)}")
        raise DocumentStructureError(f"Could not open Word document: {e}") from e

    lines = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                lines.extend(p.text for p in cell.paragraphs)

    full_text = "\n".join(lines)
    logger.info(f"Successfully extracted {len(full_text)} characters from docx using python-docx")
    return full_text
