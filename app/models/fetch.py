from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class PageFetchResult(BaseModel):
    """Raw outcome of fetching a page: body plus the response metadata."""

    url: str
    status_code: int = 200
    response_time_ms: float = 0.0
    html: str = ""
    headers: List[Tuple[str, str]] = Field(default_factory=list)

    def header(self, name: str) -> Optional[str]:
        """Return the first value of header *name* (case-insensitive), or None."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    def has_header(self, name: str) -> bool:
        return self.header(name) is not None
