# File: cv_tailor/api/endpoints/tailor_cv.py
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse, Response
from pathlib import Path
from typing import Any, Optional
import asyncio
import logging

from cv_tailor.api.deps import get_claude_client, get_document_converter
from cv_tailor.core.config import settings
from cv_tailor.llm.claude_client import ClaudeClient
from cv_tailor.services.document_converter import DocumentConverter
from cv_tailor.services.tailor_pipeline import tailor_cv

router = APIRouter()
logger = logging.getLogger(__name__)


def _download_name(upload_name: Optional[str], extension: str) -> str:
    stem = Path(upload_name or "").stem
    stem = stem.encode("ascii", "ignore").decode().replace('"', "").strip()
    return f"{stem or 'CV'}{extension}"


@router.post("/tailor-cv")
async def tailor_cv_endpoint(
    job_description: Optional[str] = Form(None, alias="jobDescription"),
    cv_file: Optional[UploadFile] = File(None, alias="cvFile"),
    output_format: str = Form("pdf", alias="format"),
    client: Optional[ClaudeClient] = Depends(get_claude_client),
    converter: DocumentConverter = Depends(get_document_converter),
) -> Any:
    """Tailor an uploaded .docx CV to a job description and return the file."""
    logger.info(f"Received jobDescription: {'Yes' if job_description else 'No'}")
    logger.info(f"Received cvFile: {cv_file.filename if cv_file else 'No'}")

    if not job_description or not cv_file:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Job description and CV file are required",
                "debug": {"hasJob": bool(job_description), "hasFile": bool(cv_file)},
            },
        )

    if client is None:
        return JSONResponse(status_code=500, content={"error": "ANTHROPIC_API_KEY not configured"})

    try:
        docx_bytes = await cv_file.read()
        logger.info(f"Read {len(docx_bytes)} bytes from uploaded file {cv_file.filename}")

        document = await asyncio.wait_for(
            tailor_cv(docx_bytes, job_description, client, converter, output_format=output_format or "pdf"),
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        logger.error(f"Tailoring timed out after {settings.REQUEST_TIMEOUT_SECONDS}s")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to tailor CV",
                "details": f"Request timed out after {settings.REQUEST_TIMEOUT_SECONDS:g} seconds",
            },
        )
    except Exception as e:
        logger.error(f"Error tailoring CV: {str(e)}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Failed to tailor CV", "details": str(e)})

    filename = _download_name(cv_file.filename, document.extension)
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
