from typing import Dict, List

from pydantic import BaseModel, Field

# Maximum points per scoring category. Must sum to 100.
CATEGORY_MAX: Dict[str, int] = {
    "meta_tags": 25,
    "content": 25,
    "technical": 20,
    "performance": 15,
    "social": 15,
}


class SEOScore(BaseModel):
    overall: int = 0
    meta_tags: int = 0
    content: int = 0
    technical: int = 0
    performance: int = 0
    social: int = 0

    def categories(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in CATEGORY_MAX}


class IssueReport(BaseModel):
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors and not self.warnings
