from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any

from docscan.domain.enums import CheckKind


@dataclass(frozen=True)
class Chunk:
    text: str
    document_offset: int

    @property
    def end_offset(self) -> int:
        return self.document_offset + len(self.text)


@dataclass(frozen=True)
class CandidateFinding:
    """A finding as reported by the oracle: chunk-local text, no offsets yet."""

    excerpt: str
    category: str
    confidence: float
    suggestion: str | None = None
    explanation: str | None = None


@dataclass(frozen=True)
class Finding:
    text: str
    start_index: int
    end_index: int
    category: str
    confidence: float
    suggestion: str | None = None
    explanation: str | None = None


@dataclass(frozen=True)
class ChunkOutcome:
    candidates: list[CandidateFinding]
    corrected_text: str | None = None
    internal_matches: list[InternalMatch] = field(default_factory=list)


@dataclass(frozen=True)
class ScoreCard:
    counts: dict[str, int]
    overall_score: float
    verdict: str


@dataclass(frozen=True)
class InternalMatch:
    """An earlier upload sharing sentences with the scanned document."""

    document_id: int
    match_percentage: int
    match_count: int
    matched_sentences: list[str]
    uploaded_at: str


@dataclass(frozen=True)
class AnalysisResult:
    check_kind: CheckKind
    findings: list[Finding]
    counts: dict[str, int]
    overall_score: float
    verdict: str
    summary: str
    sampled_units: int
    corrected_text: str | None = None
    internal_matches: list[InternalMatch] = field(default_factory=list)


@dataclass(frozen=True)
class DisplaySegment:
    text: str
    is_highlighted: bool
    finding: Any = field(default=None, compare=False)


def findings_to_json(findings: list[Finding]) -> str:
    return json.dumps([asdict(f) for f in findings], ensure_ascii=False)


def findings_from_json(raw: str | None) -> list[Finding]:
    if not raw:
        return []
    return [Finding(**item) for item in json.loads(raw)]


def internal_matches_to_json(matches: list[InternalMatch]) -> str:
    return json.dumps([asdict(m) for m in matches], ensure_ascii=False)


def internal_matches_from_json(raw: str | None) -> list[InternalMatch]:
    if not raw:
        return []
    return [InternalMatch(**item) for item in json.loads(raw)]
