"""Transport-level signals: security posture and performance heuristics.

Both need the fetch metadata (scheme, headers, timing) in addition to the
parsed document, so they live together.
"""

from typing import Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from app.models.fetch import PageFetchResult
from app.models.signals import PerformanceInfo, SecurityInfo

# Recognised security headers, in reporting order
SECURITY_HEADERS = (
    "Strict-Transport-Security",
    "Content-Security-Policy",
    "X-Content-Type-Options",
    "X-Frame-Options",
    "X-XSS-Protection",
    "Referrer-Policy",
    "Permissions-Policy",
)

# (tag, attribute) pairs that load a sub-resource
_SUBRESOURCE_ATTRS = (
    ("script", "src"),
    ("img", "src"),
    ("link", "href"),
    ("iframe", "src"),
    ("source", "src"),
)

COMPRESSION_ENCODINGS = ("gzip", "br", "deflate", "zstd")

# Fewer newlines per byte than this and the document looks minified
MINIFIED_NEWLINE_RATIO = 0.001

# Assumed transfer rate for the load-time estimate
_BYTES_PER_SECOND = 100_000


def _has_mixed_content(soup: BeautifulSoup, page_url: str) -> bool:
    for tag_name, attr in _SUBRESOURCE_ATTRS:
        for tag in soup.find_all(tag_name, attrs={attr: True}):
            target = str(tag[attr]).strip()
            if not target:
                continue
            try:
                resolved = urljoin(page_url, target)
            except ValueError:
                continue
            if resolved.lower().startswith("http://"):
                return True
    return False


def analyze_security(
    soup: BeautifulSoup, page_url: str, fetch: Optional[PageFetchResult] = None
) -> SecurityInfo:
    is_https = urlparse(page_url).scheme.lower() == "https"
    present = []
    if fetch is not None:
        present = [name for name in SECURITY_HEADERS if fetch.has_header(name)]

    return SecurityInfo(
        is_https=is_https,
        has_hsts="Strict-Transport-Security" in present,
        mixed_content=is_https and _has_mixed_content(soup, page_url),
        secure_headers=present,
    )


def looks_minified(html: str, html_size: Optional[int] = None) -> bool:
    """Heuristic only: very few line breaks relative to the document's UTF-8 size."""
    if html_size is None:
        html_size = len(html.encode("utf-8"))
    if not html_size:
        return False
    return html.count("\n") / html_size < MINIFIED_NEWLINE_RATIO


def analyze_performance(html: str, fetch: Optional[PageFetchResult] = None) -> PerformanceInfo:
    """Page weight and transfer hints.

    Without a fetch result the response time is unknown (``None``) and adds
    nothing to the load-time estimate.
    """
    html_size = len(html.encode("utf-8")) if html else 0
    response_time_ms = fetch.response_time_ms if fetch is not None else None

    encoding = (fetch.header("content-encoding") or "") if fetch is not None else ""
    encoding = encoding.lower()
    compression_enabled = any(name in encoding for name in COMPRESSION_ENCODINGS)

    estimated = (response_time_ms or 0.0) / 1000 + html_size / _BYTES_PER_SECOND

    return PerformanceInfo(
        html_size=html_size,
        response_time_ms=response_time_ms,
        looks_minified=looks_minified(html, html_size),
        compression_enabled=compression_enabled,
        estimated_load_time=round(estimated, 2),
    )
