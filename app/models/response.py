from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

from app.models.scan import ScanRecord, ScanResult
from app.models.score import IssueReport
from app.models.signals import MetaTagSet

Platform = Literal["facebook", "twitter", "discord", "reddit", "linkedin", "whatsapp"]


class PlatformPreview(BaseModel):
    platform: Platform
    title: str
    description: str
    image: Optional[str] = None
    url: str


class AnalyzeResponse(BaseModel):
    id: str
    url: str
    created_at: datetime
    platform_type: str
    """Detected platform / rendering technology: ``"wordpress"``, ``"spa"`` or ``"ssr"``."""
    saved: bool
    result: ScanResult


class MetaResponse(BaseModel):
    url: str
    meta_tags: MetaTagSet
    issues: IssueReport
    previews: List[PlatformPreview]


class HistoryResponse(BaseModel):
    capacity: int
    count: int
    records: List[ScanRecord]
