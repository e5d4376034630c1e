"""
DOCX → PDF conversion through headless LibreOffice.
"""

import asyncio
import logging
import os
import shutil
import subprocess
import tempfile
from typing import Optional

from cv_tailor.core.config import settings
from cv_tailor.core.exceptions import ConversionError

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


class DocumentConverter:
    def __init__(self, soffice_path: Optional[str] = None, timeout: Optional[float] = None):
        self.soffice_path = soffice_path or settings.SOFFICE_PATH
        self.timeout = timeout or settings.CONVERSION_TIMEOUT_SECONDS

    def _convert_to_pdf(self, docx_bytes: bytes) -> bytes:
        soffice = shutil.which(self.soffice_path)
        if soffice is None:
            raise ConversionError(f"LibreOffice not found in PATH ({self.soffice_path})")

        with tempfile.TemporaryDirectory() as tmpdir:
            input_path = os.path.join(tmpdir, "input.docx")
            output_path = os.path.join(tmpdir, "input.pdf")

            with open(input_path, "wb") as f:
                f.write(docx_bytes)

            cmd = [
                soffice,
                "--headless",
                "--convert-to", "pdf",
                "--outdir", tmpdir,
                input_path,
            ]

            try:
                subprocess.run(
                    cmd,
                    check=True,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    timeout=self.timeout,
                )
            except subprocess.CalledProcessError as e:
                stderr_text = e.stderr.decode(errors="ignore") if e.stderr else ""
                raise ConversionError(f"LibreOffice conversion failed: {stderr_text}") from e
            except subprocess.TimeoutExpired as e:
                raise ConversionError(f"LibreOffice conversion timed out after {self.timeout}s") from e

            if not os.path.exists(output_path):
                raise ConversionError("LibreOffice did not produce a PDF file.")

            with open(output_path, "rb") as f:
                return f.read()

    async def convert(self, docx_bytes: bytes, target_format: str = "pdf") -> bytes:
        """Convert docx bytes to `target_format`. Only "pdf" is supported."""
        if target_format != "pdf":
            raise ConversionError(f"Unsupported target format: {target_format}")
        logger.info(f"Converting {len(docx_bytes)} bytes of docx to PDF")
        pdf_bytes = await asyncio.to_thread(self._convert_to_pdf, docx_bytes)
        logger.info(f"PDF conversion produced {len(pdf_bytes)} bytes")
        return pdf_bytes
