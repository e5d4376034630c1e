# File: cv_tailor/schemas/cv_tailor.py
from dataclasses import dataclass
from pydantic import BaseModel
from typing import Dict, List, Optional


class BulletReplacement(BaseModel):
    original: str
    tailored: str


class RewritePayload(BaseModel):
    title: str = ""
    summary: str = ""
    bullets: List[BulletReplacement] = []
    skills: str = ""


class PolishedContent(BaseModel):
    title: str
    summary: str
    bullets: List[str]  # positional, no "original" retained
    skills: str


class ExtractJobRequest(BaseModel):
    url: Optional[str] = None


class ExtractJobResponse(BaseModel):
    jobDescription: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
    debug: Optional[Dict[str, bool]] = None


@dataclass
class SourceTemplate:
    """Known fixed text spans of the source CV that get swapped wholesale."""
    title: str
    summary: str
    skills: str


@dataclass
class TailoredDocument:
    content: bytes
    media_type: str
    extension: str
