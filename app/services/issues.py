"""Issue classifier: derives errors, warnings and suggestions from a signal bundle.

Checks run in a fixed order and each appends its finding to the matching
list, so identical input always yields identically ordered output.
"""

from typing import Callable, List, Optional

from app.models.score import IssueReport, SEOScore
from app.models.signals import MetaTagSet, SignalBundle
from app.services.scoring import (
    DESCRIPTION_MAX,
    DESCRIPTION_MIN,
    LARGE_HTML_BYTES,
    MIN_READABILITY,
    MIN_WORDS,
    TITLE_MAX,
    TITLE_MIN,
    is_indexable,
)

MAX_KEYWORDS = 10
MIN_SECURE_HEADERS = 2
LOW_OVERALL_SCORE = 50

Check = Callable[[SignalBundle, IssueReport], None]


# ---------------------------------------------------------------------------
# Meta tag checks
# ---------------------------------------------------------------------------

def _check_title(bundle: SignalBundle, report: IssueReport) -> None:
    title = bundle.meta_tags.title
    if not title:
        report.errors.append("No title found - Critical for SEO")
    elif len(title) < TITLE_MIN:
        report.suggestions.append(
            f"Title is short ({len(title)} chars). Recommended: {TITLE_MIN}-{TITLE_MAX} characters"
        )
    elif len(title) > TITLE_MAX:
        report.warnings.append(
            f"Title is too long ({len(title)} chars). May be truncated in search results"
        )


def _check_description(bundle: SignalBundle, report: IssueReport) -> None:
    description = bundle.meta_tags.description
    if not description:
        report.warnings.append("No meta description found. Search engines will generate their own snippet")
    elif len(description) < DESCRIPTION_MIN:
        report.warnings.append(
            f"Description is short ({len(description)} chars). "
            f"Recommended: {DESCRIPTION_MIN}-{DESCRIPTION_MAX} characters"
        )
    elif len(description) > DESCRIPTION_MAX:
        report.warnings.append(
            f"Description is too long ({len(description)} chars). May be truncated in search results"
        )


def _check_social_image(bundle: SignalBundle, report: IssueReport) -> None:
    meta = bundle.meta_tags
    if not meta.og_image and not meta.twitter_image:
        report.warnings.append("No social image found. Shared links may not display properly")


def _check_canonical(bundle: SignalBundle, report: IssueReport) -> None:
    if not bundle.meta_tags.canonical:
        report.suggestions.append(
            'No canonical URL specified. Add <link rel="canonical"> to avoid duplicate content issues'
        )


def _check_robots(bundle: SignalBundle, report: IssueReport) -> None:
    robots = bundle.meta_tags.robots
    if robots and (not is_indexable(robots) or "nofollow" in robots.lower()):
        report.warnings.append(
            f"Robots directive: {robots}. This may prevent search engine indexing"
        )


def _check_viewport(bundle: SignalBundle, report: IssueReport) -> None:
    if not bundle.meta_tags.viewport:
        report.warnings.append("No viewport meta tag. Page may not be mobile-friendly")


def _check_language(bundle: SignalBundle, report: IssueReport) -> None:
    if not bundle.meta_tags.language:
        report.suggestions.append("No language specified. Add lang attribute to <html> tag")


def _check_open_graph(bundle: SignalBundle, report: IssueReport) -> None:
    meta = bundle.meta_tags
    if meta.og_image and not meta.og_title:
        report.suggestions.append("OG image found but no OG title specified")
    elif meta.og_title and not meta.og_image:
        report.suggestions.append(
            "OG title found but no OG image. Add og:image for better social sharing"
        )


def _check_twitter_card(bundle: SignalBundle, report: IssueReport) -> None:
    meta = bundle.meta_tags
    if not meta.twitter_card:
        report.suggestions.append(
            'No Twitter Card type specified. Add <meta name="twitter:card" content="summary_large_image">'
        )
    elif meta.twitter_card == "summary_large_image" and not (meta.twitter_image or meta.og_image):
        report.warnings.append("Twitter Card type is 'summary_large_image' but no image specified")


def _check_keywords(bundle: SignalBundle, report: IssueReport) -> None:
    keywords = bundle.meta_tags.keywords
    if keywords and len(keywords.split(",")) > MAX_KEYWORDS:
        report.suggestions.append("Too many keywords. Focus on 5-10 relevant keywords")


# ---------------------------------------------------------------------------
# Page structure, security and performance checks
# ---------------------------------------------------------------------------

def _check_h1(bundle: SignalBundle, report: IssueReport) -> None:
    count = len(bundle.headings.h1)
    if count == 0:
        report.errors.append("No H1 heading found. Every page should have exactly one H1")
    elif count > 1:
        report.warnings.append(f"Multiple H1 headings found ({count}). Use only one H1 per page")


def _check_word_count(bundle: SignalBundle, report: IssueReport) -> None:
    words = bundle.content.word_count
    if words < MIN_WORDS:
        report.warnings.append(f"Content is short ({words} words). Aim for at least {MIN_WORDS} words")


def _check_readability(bundle: SignalBundle, report: IssueReport) -> None:
    content = bundle.content
    if content.word_count and content.readability_score < MIN_READABILITY:
        report.suggestions.append(
            f"Readability score is low ({content.readability_score:g}/100). Simplify sentence structure"
        )


def _check_image_alt(bundle: SignalBundle, report: IssueReport) -> None:
    images = bundle.images
    if images.total and images.without_alt:
        share = round(images.without_alt / images.total * 100)
        report.warnings.append(f"{images.without_alt} images missing alt text ({share}%)")


def _check_links(bundle: SignalBundle, report: IssueReport) -> None:
    links = bundle.links
    if links.total == 0:
        report.suggestions.append("No links found. Add internal and external links to improve SEO")
    elif links.internal == 0:
        report.suggestions.append("No internal links found. Add links to other pages on your site")


def _check_schema(bundle: SignalBundle, report: IssueReport) -> None:
    if not bundle.schema_info.detected:
        report.suggestions.append(
            "No structured data (Schema.org) found. Add JSON-LD for better search results"
        )


def _check_https(bundle: SignalBundle, report: IssueReport) -> None:
    if not bundle.security.is_https:
        report.errors.append("Site is not using HTTPS. This is a critical security and SEO issue")


def _check_mixed_content(bundle: SignalBundle, report: IssueReport) -> None:
    if bundle.security.mixed_content:
        report.warnings.append(
            "Mixed content detected. Some resources are loaded over HTTP instead of HTTPS"
        )


def _check_security_headers(bundle: SignalBundle, report: IssueReport) -> None:
    if len(bundle.security.secure_headers) < MIN_SECURE_HEADERS:
        report.suggestions.append("Few security headers detected. Add X-Frame-Options, CSP, etc.")


def _check_html_size(bundle: SignalBundle, report: IssueReport) -> None:
    size = bundle.performance.html_size
    if size > LARGE_HTML_BYTES:
        report.warnings.append(f"HTML size is large ({round(size / 1024)}KB). Consider minification")


def _check_compression(bundle: SignalBundle, report: IssueReport) -> None:
    if not bundle.performance.compression_enabled:
        report.warnings.append("Compression not enabled. Enable gzip or brotli compression")


META_CHECKS: List[Check] = [
    _check_title,
    _check_description,
    _check_social_image,
    _check_canonical,
    _check_robots,
    _check_viewport,
    _check_language,
    _check_open_graph,
    _check_twitter_card,
    _check_keywords,
]

PAGE_CHECKS: List[Check] = [
    _check_h1,
    _check_word_count,
    _check_readability,
    _check_image_alt,
    _check_links,
    _check_schema,
    _check_https,
    _check_mixed_content,
    _check_security_headers,
    _check_html_size,
    _check_compression,
]


def classify_meta_tags(meta: MetaTagSet) -> IssueReport:
    """Run only the meta tag checks (used for the lightweight /meta lookup)."""
    bundle = SignalBundle(meta_tags=meta)
    report = IssueReport()
    for check in META_CHECKS:
        check(bundle, report)
    return report


def classify_issues(bundle: SignalBundle, score: Optional[SEOScore] = None) -> IssueReport:
    report = IssueReport()
    for check in META_CHECKS + PAGE_CHECKS:
        check(bundle, report)

    if score is not None and score.overall < LOW_OVERALL_SCORE:
        report.suggestions.append(
            f"Overall SEO score is low ({score.overall}/100). Start with the errors listed above"
        )
    return report
