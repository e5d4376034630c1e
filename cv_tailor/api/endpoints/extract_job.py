# File: cv_tailor/api/endpoints/extract_job.py
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from typing import Any
import logging

from cv_tailor.core.exceptions import JobFetchError
from cv_tailor.schemas.cv_tailor import ExtractJobRequest, ExtractJobResponse
from cv_tailor.services.web_scraper import fetch_job_description

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/extract-job", response_model=ExtractJobResponse)
async def extract_job(request: ExtractJobRequest) -> Any:
    """Fetch a job posting URL and return its plain-text description."""
    if not request.url:
        return JSONResponse(status_code=400, content={"error": "URL is required"})

    try:
        job_description = await fetch_job_description(request.url)
        return ExtractJobResponse(jobDescription=job_description)
    except JobFetchError as e:
        logger.error(f"Error fetching job posting: {str(e)}")
        return JSONResponse(status_code=400, content={"error": "Failed to fetch job posting"})
    except Exception as e:
        logger.error(f"Error extracting job description: {str(e)}")
        return JSONResponse(status_code=500, content={"error": "Failed to extract job description"})
