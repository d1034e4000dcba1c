"""Runtime settings resolved from environment variables."""

import os
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings read once at import time."""

    # Fetching
    FETCH_TIMEOUT: float = float(os.getenv("SEO_FETCH_TIMEOUT", "15"))
    MAX_CONTENT_SIZE: int = int(os.getenv("SEO_MAX_CONTENT_SIZE", str(10 * 1024 * 1024)))
    MAX_REDIRECTS: int = int(os.getenv("SEO_MAX_REDIRECTS", "10"))
    USER_AGENT: str = os.getenv(
        "SEO_USER_AGENT",
        "Mozilla/5.0 (compatible; SEOAnalyzer/2.0)",
    )

    # Link classification policy: count www.example.com and example.com as one host
    TREAT_WWW_AS_SAME_HOST: bool = _env_bool("SEO_TREAT_WWW_AS_SAME_HOST", False)

    # Scan history
    HISTORY_CAPACITY: int = int(os.getenv("SEO_HISTORY_CAPACITY", "10"))
    HISTORY_PATH: Optional[str] = os.getenv("SEO_HISTORY_PATH") or None

    LOG_LEVEL: str = os.getenv("SEO_LOG_LEVEL", "INFO")


settings = Settings()
