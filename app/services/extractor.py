"""HTML feature extraction: turns a fetched page into a :class:`SignalBundle`.

Extraction is best-effort. Malformed markup, broken JSON-LD and unresolvable
URLs degrade the affected field to its empty/zero value; nothing here raises
for bad input, because a badly optimised page is the normal case, not an
exceptional one.
"""

from typing import Dict, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from app.config import settings
from app.models.fetch import PageFetchResult
from app.models.signals import HeadingOutline, ImageStats, LinkStats, MetaTagSet, SignalBundle
from app.services.content import analyze_content
from app.services.sanitizer import parse, visible_tree
from app.services.schema import detect_schema
from app.services.security import analyze_performance, analyze_security

# <meta name=...> / <meta property=...> key → MetaTagSet field
_META_FIELDS: Dict[str, str] = {
    "description": "description",
    "keywords": "keywords",
    "robots": "robots",
    "viewport": "viewport",
    "author": "author",
    "og:title": "og_title",
    "og:description": "og_description",
    "og:image": "og_image",
    "og:url": "og_url",
    "og:type": "og_type",
    "og:site_name": "og_site_name",
    "og:locale": "og_locale",
    "twitter:card": "twitter_card",
    "twitter:title": "twitter_title",
    "twitter:description": "twitter_description",
    "twitter:image": "twitter_image",
    "twitter:site": "twitter_site",
    "twitter:creator": "twitter_creator",
}

_SKIPPED_HREF_PREFIXES = ("#", "javascript:")


def _attr(tag: Tag, name: str) -> str:
    """Return attribute *name* of *tag* matched case-insensitively, stripped."""
    for key, value in tag.attrs.items():
        if key.lower() == name:
            if isinstance(value, list):
                value = " ".join(value)
            return str(value).strip()
    return ""


def _text(tag: Tag) -> str:
    return " ".join(tag.get_text().split())


def extract_meta_tags(soup: BeautifulSoup) -> MetaTagSet:
    values: Dict[str, str] = {}

    title_tag = soup.find("title")
    if title_tag is not None:
        title = _text(title_tag)
        if title:
            values["title"] = title

    content_language = ""
    for meta in soup.find_all("meta"):
        content = _attr(meta, "content")
        if not content:
            continue
        if _attr(meta, "http-equiv").lower() == "content-language":
            content_language = content_language or content
            continue
        # OG uses property=, Twitter uses name=; accept either for both
        for key in (_attr(meta, "name").lower(), _attr(meta, "property").lower()):
            field = _META_FIELDS.get(key)
            if field and field not in values:
                values[field] = content

    for link in soup.find_all("link"):
        if "canonical" in _attr(link, "rel").lower().split():
            href = _attr(link, "href")
            if href:
                values["canonical"] = href
                break

    html_tag = soup.find("html")
    language = _attr(html_tag, "lang") if isinstance(html_tag, Tag) else ""
    if language or content_language:
        values["language"] = language or content_language

    return MetaTagSet(**values)


def extract_headings(soup: BeautifulSoup) -> HeadingOutline:
    outline: Dict[str, list] = {f"h{level}": [] for level in range(1, 7)}
    for heading in soup.find_all(list(outline)):
        text = _text(heading)
        if text:
            outline[heading.name].append(text)
    return HeadingOutline(**outline)


def _host(url: str, treat_www_as_same_host: bool) -> str:
    host = (urlparse(url).hostname or "").lower().rstrip(".")
    if treat_www_as_same_host and host.startswith("www."):
        host = host[4:]
    return host


def extract_links(soup: BeautifulSoup, page_url: str, treat_www_as_same_host: bool) -> LinkStats:
    """Count anchors; links without a resolvable web target count toward neither side."""
    try:
        page_host = _host(page_url, treat_www_as_same_host)
    except ValueError:
        page_host = ""

    stats = LinkStats()
    for anchor in soup.find_all("a", href=True):
        stats.total += 1
        if "nofollow" in _attr(anchor, "rel").lower().split():
            stats.nofollow += 1

        href = str(anchor["href"]).strip()
        if not href or href.lower().startswith(_SKIPPED_HREF_PREFIXES):
            continue
        try:
            resolved = urljoin(page_url, href)
            parsed = urlparse(resolved)
            host = _host(resolved, treat_www_as_same_host)
        except ValueError:
            continue
        if parsed.scheme not in ("http", "https") or not host:
            continue
        if page_host and host == page_host:
            stats.internal += 1
        else:
            stats.external += 1
    return stats


def image_format(src: str) -> str:
    """Lowercased file extension of *src*, or ``"unknown"``."""
    src = src.strip()
    if src.lower().startswith("data:"):
        mime = src[5:].split(";", 1)[0].split(",", 1)[0]
        subtype = mime.split("/", 1)[-1].split("+", 1)[0].lower() if "/" in mime else ""
        return subtype or "unknown"
    try:
        path = urlparse(src).path
    except ValueError:
        return "unknown"
    filename = path.rsplit("/", 1)[-1]
    if "." not in filename:
        return "unknown"
    ext = filename.rsplit(".", 1)[-1].lower()
    if not ext or not ext.isalnum() or len(ext) > 5:
        return "unknown"
    return ext


def extract_images(soup: BeautifulSoup) -> ImageStats:
    stats = ImageStats()
    for img in soup.find_all("img"):
        stats.total += 1
        if _attr(img, "alt"):
            stats.with_alt += 1
        else:
            stats.without_alt += 1
        fmt = image_format(_attr(img, "src") or _attr(img, "data-src"))
        stats.formats[fmt] = stats.formats.get(fmt, 0) + 1
    return stats


def extract_signals(
    html: str,
    url: str,
    fetch: Optional[PageFetchResult] = None,
    *,
    treat_www_as_same_host: Optional[bool] = None,
) -> SignalBundle:
    """Extract the full signal bundle from *html* fetched from *url*.

    *fetch* supplies response timing and headers for the security and
    performance sections; without it those fields fall back to their
    neutral values.
    """
    if treat_www_as_same_host is None:
        treat_www_as_same_host = settings.TREAT_WWW_AS_SAME_HOST
    html = html or ""

    soup = parse(html)
    return SignalBundle(
        meta_tags=extract_meta_tags(soup),
        headings=extract_headings(soup),
        links=extract_links(soup, url, treat_www_as_same_host),
        images=extract_images(soup),
        content=analyze_content(visible_tree(html)),
        schema_info=detect_schema(soup),
        security=analyze_security(soup, url, fetch),
        performance=analyze_performance(html, fetch),
    )
