# File: cv_tailor/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_CV_TITLE = "Product Leader"

DEFAULT_CV_SUMMARY = (
    "I build products that improve people's lives by combining strategic thinking with hands-on design and operational "
    "expertise. Over the past decade, I've led product strategy for companies generating $100M+ revenue, from early-stage "
    "hardware ventures to global platforms serving billions. I focus on creating seamless experiences that solve real problems "
    "while driving business impact."
)

DEFAULT_CV_SKILLS = (
    "Generative AI | LLM Integration | Personalization Algorithms | Customer Data Platforms | Machine Learning | "
    "Data Analytics | Go-to-Market (GTM) Strategy | Marketplaces | UX/UI Design | Agile Methodologies | "
    "Wireframing | Python | SQL"
)


class Settings:
    PROJECT_NAME: str = "CV Tailor API"
    PROJECT_VERSION: str = "0.1.0"

    # Claude API settings
    ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")
    ANTHROPIC_MODEL: str = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-5-20250929")
    ANTHROPIC_MAX_TOKENS: int = int(os.getenv("ANTHROPIC_MAX_TOKENS", "4000"))
    ANTHROPIC_TIMEOUT_SECONDS: float = float(os.getenv("ANTHROPIC_TIMEOUT_SECONDS", "55"))

    # Request budget (whole tailor pipeline)
    REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "60"))

    # Job page scraping
    JOB_FETCH_TIMEOUT_SECONDS: float = float(os.getenv("JOB_FETCH_TIMEOUT_SECONDS", "20"))

    # PDF conversion
    SOFFICE_PATH: str = os.getenv("SOFFICE_PATH", "soffice")
    CONVERSION_TIMEOUT_SECONDS: float = float(os.getenv("CONVERSION_TIMEOUT_SECONDS", "45"))

    # Known anchors of the source CV template
    CV_TITLE: str = os.getenv("CV_TITLE", DEFAULT_CV_TITLE)
    CV_SUMMARY: str = os.getenv("CV_SUMMARY", DEFAULT_CV_SUMMARY)
    CV_SKILLS: str = os.getenv("CV_SKILLS", DEFAULT_CV_SKILLS)

    # Layout constraints for AI output
    BULLET_MAX_WORDS: int = int(os.getenv("BULLET_MAX_WORDS", "30"))
    SKILLS_MAX_CHARS: int = int(os.getenv("SKILLS_MAX_CHARS", "140"))
    SKILLS_MAX_SEGMENTS: int = int(os.getenv("SKILLS_MAX_SEGMENTS", "10"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings
    CORS_ORIGINS: list = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

settings = Settings()
