from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceCitation(BaseModel):
    model_config = ConfigDict(frozen=True)

    filename: str
    relevance_score: float = Field(ge=0.0, le=1.0)
    page_number: Optional[int] = Field(default=None, gt=0)


class KnowledgeEntry(BaseModel):
    """One row of the keyword-to-answer table used by the demo resolver."""

    model_config = ConfigDict(frozen=True)

    keywords: Tuple[str, ...] = Field(min_length=1)
    response: str
    sources: Tuple[SourceCitation, ...] = ()

    @field_validator("keywords")
    @classmethod
    def check_keywords(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        for kw in v:
            if not kw:
                raise ValueError("keywords must be non-empty")
            if kw != kw.lower():
                raise ValueError(f"keyword {kw!r} must be lowercase")
        return v


class ChatQuery(BaseModel):
    text: str = ""


class ChatRequest(BaseModel):
    message: str
    stream: bool = False


class ChatAnswer(BaseModel):
    response: str
    sources: List[SourceCitation] = Field(default_factory=list)
