"""
Read and rewrite the main document part of a .docx package.
Only word/document.xml is touched; every other member is copied byte for byte.
"""

import io
import logging
import zipfile

from cv_tailor.core.exceptions import DocumentStructureError

logger = logging.getLogger(__name__)

DOCUMENT_XML = "word/document.xml"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def read_document_xml(docx_bytes: bytes) -> str:
    """Return word/document.xml as text. Raises DocumentStructureError."""
    try:
        with zipfile.ZipFile(io.BytesIO(docx_bytes)) as zf:
            if DOCUMENT_XML not in zf.namelist():
                raise DocumentStructureError("Could not read document.xml from docx file")
            return zf.read(DOCUMENT_XML).decode("utf-8")
    except zipfile.BadZipFile as e:
        raise DocumentStructureError(f"Uploaded file is not a valid docx archive: {e}") from e


def write_document_xml(docx_bytes: bytes, document_xml: str) -> bytes:
    """Return a new archive with word/document.xml replaced, DEFLATE-compressed."""
    output = io.BytesIO()
    try:
        with zipfile.ZipFile(io.BytesIO(docx_bytes)) as src, \
                zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as dst:
            for item in src.infolist():
                if item.filename == DOCUMENT_XML:
                    dst.writestr(item, document_xml.encode("utf-8"), compress_type=zipfile.ZIP_DEFLATED)
                else:
                    dst.writestr(item, src.read(item.filename), compress_type=zipfile.ZIP_DEFLATED)
    except zipfile.BadZipFile as e:
        raise DocumentStructureError(f"Uploaded file is not a valid docx archive: {e}") from e

    data = output.getvalue()
    logger.info(f"Repackaged docx archive ({len(docx_bytes)} -> {len(data)} bytes)")
    return data
