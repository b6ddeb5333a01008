from __future__ import annotations

from pydantic import BaseModel, Field


class GrammarMistakeItem(BaseModel):
    text: str = Field(min_length=1)
    type: str | None = None
    suggestion: str | None = None
    explanation: str | None = None


class PlagiarismSentenceItem(BaseModel):
    text: str | None = None
    original: str | None = None
    score: float = 0.0
    copied: bool = False
    source: str | None = None


class AiSectionItem(BaseModel):
    text: str = Field(min_length=1)
    score: float = Field(ge=0, le=100)
    reason: str | None = None


class AiChunkVerdict(BaseModel):
    score: float
    reason: str | None = None


class GenericFindingItem(BaseModel):
    excerpt: str = Field(min_length=1)
    category: str | None = None
    suggestion: str | None = None
    confidence: float = 0.0
    explanation: str | None = None


class CorrectionsRequest(BaseModel):
    accepted: list[int] | None = Field(default=None, max_length=10_000)
