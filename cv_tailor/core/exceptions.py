"""
Error types raised by the tailoring services.
Endpoints translate these into JSON error responses.
"""

from typing import Optional


class CVTailorError(Exception):
    """Base class for all expected failures in a tailor request."""


class JobExtractionError(CVTailorError):
    """The job description could not be obtained from a URL."""


class JobFetchError(JobExtractionError):
    """The job page could not be downloaded (network error or non-2xx)."""


class JobParseError(JobExtractionError):
    """The job page was downloaded but no text could be extracted."""


class ClaudeAPIError(CVTailorError):
    """The Anthropic API returned an error response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RewriteParseError(CVTailorError):
    """The rewrite response was not valid JSON in the expected shape."""


class DocumentStructureError(CVTailorError):
    """The uploaded file is not a docx archive with a word/document.xml member."""


class ConversionError(CVTailorError):
    """DOCX to PDF conversion failed."""
