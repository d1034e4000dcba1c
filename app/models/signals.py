"""Signal bundle extracted from a single page.

Every optional field is modelled as ``Optional[...] = None``; absence is a
valid state, never an error.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

ContentLength = Literal["short", "medium", "long"]


class MetaTagSet(BaseModel):
    # Basic
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None
    canonical: Optional[str] = None
    robots: Optional[str] = None
    viewport: Optional[str] = None
    author: Optional[str] = None
    language: Optional[str] = None

    # Open Graph
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    og_url: Optional[str] = None
    og_type: Optional[str] = None
    og_site_name: Optional[str] = None
    og_locale: Optional[str] = None

    # Twitter Card
    twitter_card: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None
    twitter_site: Optional[str] = None
    twitter_creator: Optional[str] = None


class HeadingOutline(BaseModel):
    h1: List[str] = Field(default_factory=list)
    h2: List[str] = Field(default_factory=list)
    h3: List[str] = Field(default_factory=list)
    h4: List[str] = Field(default_factory=list)
    h5: List[str] = Field(default_factory=list)
    h6: List[str] = Field(default_factory=list)

    def total(self) -> int:
        return sum(len(getattr(self, f"h{level}")) for level in range(1, 7))


class LinkStats(BaseModel):
    total: int = 0
    internal: int = 0
    external: int = 0
    nofollow: int = 0


class ImageStats(BaseModel):
    total: int = 0
    with_alt: int = 0
    without_alt: int = 0
    formats: Dict[str, int] = Field(default_factory=dict)


class ContentStats(BaseModel):
    word_count: int = 0
    paragraph_count: int = 0
    readability_score: float = 0.0
    content_length: ContentLength = "short"
    keyword_density: Dict[str, float] = Field(default_factory=dict)


class SchemaInfo(BaseModel):
    detected: bool = False
    count: int = 0
    types: List[str] = Field(default_factory=list)


class SecurityInfo(BaseModel):
    is_https: bool = False
    has_hsts: bool = False
    mixed_content: bool = False
    secure_headers: List[str] = Field(default_factory=list)


class PerformanceInfo(BaseModel):
    html_size: int = 0
    response_time_ms: Optional[float] = None
    looks_minified: bool = False
    compression_enabled: bool = False
    estimated_load_time: float = 0.0


class SignalBundle(BaseModel):
    """Everything the extractor learns about a page."""

    meta_tags: MetaTagSet = Field(default_factory=MetaTagSet)
    headings: HeadingOutline = Field(default_factory=HeadingOutline)
    links: LinkStats = Field(default_factory=LinkStats)
    images: ImageStats = Field(default_factory=ImageStats)
    content: ContentStats = Field(default_factory=ContentStats)
    schema_info: SchemaInfo = Field(default_factory=SchemaInfo, alias="schema")
    security: SecurityInfo = Field(default_factory=SecurityInfo)
    performance: PerformanceInfo = Field(default_factory=PerformanceInfo)

    model_config = {"populate_by_name": True}
