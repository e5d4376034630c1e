# File: cv_tailor/api/api.py
from fastapi import APIRouter

from cv_tailor.api.endpoints import extract_job, tailor_cv

api_router = APIRouter(prefix="/api")
api_router.include_router(extract_job.router, tags=["extract-job"])
api_router.include_router(tailor_cv.router, tags=["tailor-cv"])
