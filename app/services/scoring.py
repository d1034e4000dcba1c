"""Scoring engine: signal bundle → weighted 0-100 :class:`SEOScore`.

Pure and deterministic. Each category adds up rubric points and is then
clamped to its maximum from :data:`CATEGORY_MAX`; the overall score is the
plain sum of the clamped categories.
"""

from typing import Optional

from app.models.score import CATEGORY_MAX, SEOScore
from app.models.signals import SignalBundle

TITLE_MIN, TITLE_MAX = 30, 60
DESCRIPTION_MIN, DESCRIPTION_MAX = 50, 160

MIN_WORDS = 300
THIN_WORDS = 100
MIN_READABILITY = 60
FAIR_READABILITY = 30
MIN_PARAGRAPHS = 3

FAST_RESPONSE_MS = 1000
SLOW_RESPONSE_MS = 3000
SMALL_HTML_BYTES = 100_000
LARGE_HTML_BYTES = 200_000

_BLOCKING_ROBOTS = ("noindex", "none")


def _clamp(value: int, category: str) -> int:
    return max(0, min(CATEGORY_MAX[category], value))


def _length_points(value: Optional[str], low: int, high: int, full: int, partial: int) -> int:
    if not value:
        return 0
    return full if low <= len(value) <= high else partial


def is_indexable(robots: Optional[str]) -> bool:
    """True unless the robots directive blocks indexing."""
    if not robots:
        return True
    directives = {d.strip() for d in robots.lower().split(",")}
    return not directives.intersection(_BLOCKING_ROBOTS)


def score_meta_tags(bundle: SignalBundle) -> int:
    meta = bundle.meta_tags
    points = _length_points(meta.title, TITLE_MIN, TITLE_MAX, 7, 3)
    points += _length_points(meta.description, DESCRIPTION_MIN, DESCRIPTION_MAX, 7, 3)
    if meta.canonical:
        points += 4
    if meta.viewport:
        points += 4
    if meta.robots:
        points += 3
    return _clamp(points, "meta_tags")


def score_content(bundle: SignalBundle) -> int:
    content, headings = bundle.content, bundle.headings
    points = 0
    if content.word_count >= MIN_WORDS:
        points += 8
    elif content.word_count >= THIN_WORDS:
        points += 4

    if len(headings.h1) == 1:
        points += 6
    elif len(headings.h1) > 1:
        points += 2
    if headings.total() > len(headings.h1):
        points += 3

    if content.readability_score >= MIN_READABILITY:
        points += 5
    elif content.readability_score >= FAIR_READABILITY:
        points += 2

    if content.paragraph_count >= MIN_PARAGRAPHS:
        points += 3
    return _clamp(points, "content")


def score_technical(bundle: SignalBundle) -> int:
    security = bundle.security
    points = 0
    if security.is_https:
        points += 5
    if bundle.schema_info.detected:
        points += 5
    if bundle.meta_tags.canonical:
        points += 3
    if is_indexable(bundle.meta_tags.robots):
        points += 3
    if not security.mixed_content:
        points += 2
    if len(security.secure_headers) >= 2:
        points += 2
    return _clamp(points, "technical")


def score_performance(bundle: SignalBundle) -> int:
    perf = bundle.performance
    points = 0
    # Unknown timing earns nothing
    if perf.response_time_ms is not None:
        if perf.response_time_ms < FAST_RESPONSE_MS:
            points += 5
        elif perf.response_time_ms < SLOW_RESPONSE_MS:
            points += 2

    if perf.html_size < SMALL_HTML_BYTES:
        points += 4
    elif perf.html_size < LARGE_HTML_BYTES:
        points += 2

    if perf.looks_minified:
        points += 3
    if perf.compression_enabled:
        points += 3
    return _clamp(points, "performance")


def score_social(bundle: SignalBundle) -> int:
    meta = bundle.meta_tags
    points = 0
    if meta.og_title:
        points += 3
    if meta.og_description:
        points += 3
    if meta.og_image:
        points += 3
    if meta.og_type:
        points += 1
    if meta.og_url:
        points += 1
    if meta.twitter_card:
        points += 4
    return _clamp(points, "social")


def compute_score(bundle: SignalBundle) -> SEOScore:
    """Score *bundle*. Missing optional signals simply earn no points."""
    categories = {
        "meta_tags": score_meta_tags(bundle),
        "content": score_content(bundle),
        "technical": score_technical(bundle),
        "performance": score_performance(bundle),
        "social": score_social(bundle),
    }
    return SEOScore(overall=sum(categories.values()), **categories)
