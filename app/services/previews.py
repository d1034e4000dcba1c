"""Resolve how a shared link would render on each social platform.

Each platform reads a different subset of the meta tags and falls back
differently when its preferred tags are missing.
"""

from typing import List, Optional

from app.models.response import Platform, PlatformPreview
from app.models.signals import MetaTagSet

PLATFORMS: List[Platform] = ["facebook", "twitter", "discord", "reddit", "linkedin", "whatsapp"]

_OPEN_GRAPH_PLATFORMS = {"facebook", "discord", "reddit"}


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def preview_title(meta: MetaTagSet, platform: str) -> str:
    if platform == "twitter":
        title = _first(meta.twitter_title, meta.og_title, meta.title)
    elif platform in _OPEN_GRAPH_PLATFORMS:
        title = _first(meta.og_title, meta.title)
    else:
        title = meta.title
    return title or "No title"


def preview_description(meta: MetaTagSet, platform: str) -> str:
    if platform == "twitter":
        description = _first(meta.twitter_description, meta.og_description, meta.description)
    elif platform in _OPEN_GRAPH_PLATFORMS:
        description = _first(meta.og_description, meta.description)
    else:
        description = meta.description
    return description or "No description"


def preview_image(meta: MetaTagSet, platform: str) -> Optional[str]:
    if platform == "twitter":
        return _first(meta.twitter_image, meta.og_image)
    # Every other platform scrapes og:image
    return meta.og_image


def build_previews(meta: MetaTagSet, url: str) -> List[PlatformPreview]:
    return [
        PlatformPreview(
            platform=platform,
            title=preview_title(meta, platform),
            description=preview_description(meta, platform),
            image=preview_image(meta, platform),
            url=meta.og_url or meta.canonical or url,
        )
        for platform in PLATFORMS
    ]
