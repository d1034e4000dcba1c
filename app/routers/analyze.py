import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.models.request import AnalyzeRequest, MetaRequest
from app.models.response import AnalyzeResponse, MetaResponse
from app.services.analyzer import scan_url
from app.services.extractor import extract_meta_tags
from app.services.fetcher import (
    ContentTooLargeError,
    FetchError,
    FetchStatusError,
    FetchTimeoutError,
    InvalidURLError,
    fetch_page,
)
from app.services.history import HistoryStore, get_history_store
from app.services.issues import classify_meta_tags
from app.services.previews import build_previews
from app.services.report import record_scan
from app.services.sanitizer import parse

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["Analysis"])


def fetch_error_to_http(url: str, exc: FetchError) -> HTTPException:
    """Map a fetch failure to an HTTP error with a short, specific message."""
    if isinstance(exc, InvalidURLError):
        logger.warning("Invalid or blocked URL: %s – %s", url, exc)
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, FetchTimeoutError):
        logger.error("Timeout fetching URL: %s", url)
        return HTTPException(status_code=504, detail="The target URL timed out.")
    if isinstance(exc, FetchStatusError):
        logger.error("HTTP error fetching URL %s: %s", url, exc)
        return HTTPException(
            status_code=502, detail=f"Target URL returned HTTP {exc.status_code}."
        )
    if isinstance(exc, ContentTooLargeError):
        logger.error("Oversized response from %s", url)
        return HTTPException(status_code=413, detail=str(exc))
    logger.error("Error fetching URL %s: %s", url, exc)
    return HTTPException(status_code=502, detail="Could not reach the target URL.")


@router.post("/analyze", response_model=AnalyzeResponse, summary="Run a full SEO analysis of a page")
@limiter.limit("10/minute")
async def analyze_page(
    request: Request,
    body: AnalyzeRequest,
    store: HistoryStore = Depends(get_history_store),
) -> AnalyzeResponse:
    """Fetch *url*, extract its SEO signals, score them and list the issues found.

    The scan is added to the history unless ``save`` is false.
    """
    url = str(body.url)
    logger.info("Analyze request received", extra={"url": url, "render_mode": body.render_mode})

    try:
        result, platform_type = await scan_url(url, body.render_mode)
    except FetchError as exc:
        raise fetch_error_to_http(url, exc)

    record = record_scan(url, result)
    if body.save:
        store.append(record)

    logger.info(
        "Analysis finished for %s: score %d",
        url,
        result.score.overall,
        extra={"errors": len(result.issues.errors), "warnings": len(result.issues.warnings)},
    )
    return AnalyzeResponse(
        id=record.id,
        url=record.url,
        created_at=record.created_at,
        platform_type=platform_type,
        saved=body.save,
        result=result,
    )


@router.post("/meta", response_model=MetaResponse, summary="Check a page's meta tags and social previews")
@limiter.limit("20/minute")
async def check_meta(request: Request, body: MetaRequest) -> MetaResponse:
    """Lightweight lookup: meta tags, meta-only findings and per-platform link previews."""
    url = str(body.url)
    logger.info("Meta request received", extra={"url": url})

    try:
        fetch = await fetch_page(url)
    except FetchError as exc:
        raise fetch_error_to_http(url, exc)

    meta = extract_meta_tags(parse(fetch.html))
    return MetaResponse(
        url=url,
        meta_tags=meta,
        issues=classify_meta_tags(meta),
        previews=build_previews(meta, url),
    )
