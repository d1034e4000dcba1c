"""Scan orchestration: fetch → extract → score → classify."""

import logging
from typing import Tuple

from app.models.fetch import PageFetchResult
from app.models.request import RenderMode
from app.models.scan import ScanResult
from app.services.browser_fetcher import fetch_page_with_browser
from app.services.detector import PlatformType, detect_platform
from app.services.extractor import extract_signals
from app.services.fetcher import FetchError, fetch_page
from app.services.issues import classify_issues
from app.services.scoring import compute_score

logger = logging.getLogger(__name__)


def analyze(fetch: PageFetchResult) -> ScanResult:
    """Run the pure analysis pipeline over an already fetched page."""
    bundle = extract_signals(fetch.html, fetch.url, fetch)
    score = compute_score(bundle)
    issues = classify_issues(bundle, score)
    return ScanResult(**dict(bundle), score=score, issues=issues)


async def scan_url(url: str, render_mode: RenderMode = "http") -> Tuple[ScanResult, PlatformType]:
    """Fetch *url* and analyse it.

    In ``"auto"`` mode a page that looks like an un-rendered SPA shell is
    fetched again with the headless browser; if that fails the HTTP result is
    kept. Any fetch failure in the primary mode propagates as :class:`FetchError`
    and nothing is extracted.
    """
    if render_mode == "browser":
        fetch = await fetch_page_with_browser(url)
    else:
        fetch = await fetch_page(url)

    result = analyze(fetch)
    platform = detect_platform(fetch.html, result.content.word_count)

    if render_mode == "auto" and platform == "spa":
        logger.info("SPA detected for %s – retrying with browser rendering", url)
        try:
            rendered = await fetch_page_with_browser(url)
        except FetchError as exc:
            logger.warning("Browser rendering failed for %s (%s) – using HTTP result", url, exc)
        else:
            result = analyze(rendered)
            platform = detect_platform(rendered.html, result.content.word_count)

    return result, platform
