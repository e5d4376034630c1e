"""
Fetch a job listing URL and extract the job description text.
Strips script/style/nav/header/footer and collapses the page to one
non-empty line per line of text.
"""

import httpx
import logging
from typing import Optional
from bs4 import BeautifulSoup

from cv_tailor.core.config import settings
from cv_tailor.core.exceptions import JobFetchError, JobParseError

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

STRIPPED_TAGS = ["script", "style", "nav", "footer", "header"]


async def fetch_job_description(url: str, timeout: Optional[float] = None) -> str:
    """
    Fetch a URL and return its visible text.
    Raises: JobFetchError when the page can't be downloaded,
            JobParseError when no text can be extracted.
    """
    html = await _fetch_html(url, timeout or settings.JOB_FETCH_TIMEOUT_SECONDS)
    return html_to_text(html)


async def _fetch_html(url: str, timeout: float) -> str:
    try:
        async with httpx.AsyncClient(follow_redirects=True, timeout=timeout) as client:
            resp = await client.get(url, headers=HEADERS)
    except httpx.HTTPError as e:
        logger.error(f"Error fetching job posting {url}: {str(e)}")
        raise JobFetchError(f"Failed to fetch URL: {e}") from e

    if not resp.is_success:
        logger.error(f"Job posting {url} returned HTTP {resp.status_code}")
        raise JobFetchError(f"Failed to fetch URL (HTTP {resp.status_code})")

    return resp.text


def html_to_text(html: str) -> str:
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        raise JobParseError(f"Could not parse job posting HTML: {e}") from e

    for tag in soup(STRIPPED_TAGS):
        tag.decompose()

    content_element = soup.body or soup
    text = content_element.get_text()

    lines = [line.strip() for line in text.split("\n")]
    job_description = "\n".join(line for line in lines if line)

    if not job_description:
        raise JobParseError("Could not extract any text from the page")

    logger.info(f"Extracted {len(job_description)} characters of job description")
    return job_description
