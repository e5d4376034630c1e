"""
Command-line entry point: tailor a local .docx CV without running the API.

Usage:
  cv-tailor --cv "My CV.docx" --job-url https://example.com/jobs/123
  cv-tailor --cv "My CV.docx" --job-file job.txt --format docx --output out.docx
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cv_tailor.api.deps import get_claude_client, get_document_converter
from cv_tailor.core.config import settings
from cv_tailor.core.exceptions import CVTailorError
from cv_tailor.services.tailor_pipeline import tailor_cv
from cv_tailor.services.web_scraper import fetch_job_description

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cv-tailor", description="Tailor a Word CV to a job posting.")
    parser.add_argument("--cv", required=True, help="Path to the source .docx CV")
    job = parser.add_mutually_exclusive_group(required=True)
    job.add_argument("--job-url", help="URL of the job posting")
    job.add_argument("--job-file", help="Text file holding the job description")
    parser.add_argument("--format", choices=["pdf", "docx"], default="pdf")
    parser.add_argument("--output", help="Output path (defaults to '<cv name> (tailored).<ext>')")
    return parser


async def run(args: argparse.Namespace) -> Path:
    client = get_claude_client()
    if client is None:
        raise CVTailorError("ANTHROPIC_API_KEY not configured")

    cv_path = Path(args.cv)
    if args.job_url:
        job_description = await fetch_job_description(args.job_url)
    else:
        job_description = Path(args.job_file).read_text(encoding="utf-8")

    document = await asyncio.wait_for(
        tailor_cv(cv_path.read_bytes(), job_description, client, get_document_converter(), output_format=args.format),
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
    )

    if args.output:
        # Conversion may have fallen back to docx
        output = Path(args.output).with_suffix(document.extension)
    else:
        output = cv_path.with_name(f"{cv_path.stem} (tailored){document.extension}")
    output.write_bytes(document.content)
    return output


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(message)s")
    args = build_parser().parse_args(argv)
    try:
        output = asyncio.run(run(args))
    except (CVTailorError, OSError, asyncio.TimeoutError) as e:
        logger.error(f"ERROR: {e}")
        return 1
    print(f"Output saved: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
