from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.score import IssueReport, SEOScore
from app.models.signals import SignalBundle


class ScanResult(SignalBundle):
    """Signal bundle plus the score and findings derived from it."""

    score: SEOScore = Field(default_factory=SEOScore)
    issues: IssueReport = Field(default_factory=IssueReport)


class ScanRecord(BaseModel):
    """One completed scan as kept in history.

    ``frozen`` only blocks reassigning top-level fields; history stores keep
    their own deep copies so nested lists cannot be changed through a caller.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    created_at: datetime
    result: ScanResult
