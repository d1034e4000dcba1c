"""Platform / technology detection from page HTML.

Given the raw HTML of a fetched page and the word count produced by the
content analysis, :func:`detect_platform` classifies the page so the analyzer
can decide whether a plain HTTP fetch saw the real content.

Platform types
--------------
``"wordpress"``
    WordPress-powered site (``/wp-content/`` paths, the REST-API link
    relation, or the ``<meta name="generator">`` tag).

``"spa"``
    JavaScript single-page application shell: SPA framework fingerprints
    **and** almost no readable text. Meta tags and content for such pages
    are usually injected client-side, so an HTTP-only SEO scan is misleading.

``"ssr"``
    Anything else: the HTTP response already carries readable content.
"""

import re
from typing import Literal

PlatformType = Literal["wordpress", "spa", "ssr"]

_WP_PATTERN = re.compile(
    r"/wp-content/"
    r"|/wp-includes/"
    r'|rel=["\']https://api\.w\.org/'
    r'|<meta[^>]+name=["\']generator["\'][^>]+content=["\']WordPress',
    re.IGNORECASE,
)

_SPA_PATTERN = re.compile(
    # React / Next.js / Vue / Nuxt mount targets
    r'<div\s[^>]*\bid=["\'](?:root|__next|app|__nuxt)["\']'
    r"|window\.__NUXT__"
    r"|__NEXT_DATA__"
    r"|ng-version="
    r"|data-reactroot"
    r"|<svelte:",
    re.IGNORECASE,
)

# Below this many words an SPA fingerprint means "content not rendered yet"
SPA_MIN_WORDS = 20


def detect_platform(html: str, word_count: int) -> PlatformType:
    """Classify the platform/technology type of a web page."""
    if _WP_PATTERN.search(html):
        return "wordpress"

    if word_count < SPA_MIN_WORDS and _SPA_PATTERN.search(html):
        return "spa"

    return "ssr"
