"""Per-kind interpretation of oracle replies.

Each check kind shares the same skeleton (parse the reply, extract candidates,
score) and differs in the reply schema it reads and the verdict bands it uses.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError

from docscan.analysis import scoring
from docscan.analysis.models import CandidateFinding, Chunk, ChunkOutcome, Finding, ScoreCard
from docscan.analysis.parsing import parse_json_object, validate_items
from docscan.analysis.schemas import (
    AiChunkVerdict,
    AiSectionItem,
    GenericFindingItem,
    GrammarMistakeItem,
    PlagiarismSentenceItem,
)
from docscan.domain.enums import CheckKind

logger = logging.getLogger(__name__)

AI_FLAG_THRESHOLD = 35.0
PLAGIARISM_MIN_SCORE = 40.0
PLAGIARISM_COPIED_SCORE = 50.0
DEFAULT_SOURCE = "Educational/Online Source"


class Check(ABC):
    kind: CheckKind
    default_category: str

    @property
    def bands(self) -> scoring.VerdictBands:
        return scoring.BANDS[self.kind]

    def interpret(self, chunk: Chunk, reply: str) -> ChunkOutcome:
        payload = parse_json_object(reply)
        if payload is None:
            logger.warning(
                "%s: unreadable oracle reply for chunk at offset %d, treating as no findings",
                self.kind.value,
                chunk.document_offset,
            )
            return ChunkOutcome(candidates=[])

        candidates = self.candidates(chunk, payload) + self._generic_candidates(payload)
        return ChunkOutcome(candidates=candidates, corrected_text=self.corrected_text(payload))

    @abstractmethod
    def candidates(self, chunk: Chunk, payload: dict[str, Any]) -> list[CandidateFinding]:
        raise NotImplementedError

    def corrected_text(self, payload: dict[str, Any]) -> str | None:
        return None

    def score(self, findings: list[Finding], word_count: int, sampled_units: int) -> ScoreCard:
        return scoring.score(findings, word_count, self.kind, sampled_units)

    def summarize(self, card: ScoreCard, findings: list[Finding]) -> str:
        return scoring.summarize(self.kind, card, findings)

    def _generic_candidates(self, payload: dict[str, Any]) -> list[CandidateFinding]:
        return [
            CandidateFinding(
                excerpt=item.excerpt,
                category=item.category or self.default_category,
                confidence=scoring.clamp(item.confidence),
                suggestion=item.suggestion,
                explanation=item.explanation,
            )
            for item in validate_items(payload.get("findings"), GenericFindingItem)
        ]


class GrammarCheck(Check):
    kind = CheckKind.grammar
    default_category = "grammar"

    def candidates(self, chunk: Chunk, payload: dict[str, Any]) -> list[CandidateFinding]:
        return [
            CandidateFinding(
                excerpt=item.text,
                category=(item.type or self.default_category).strip().lower(),
                confidence=100.0,
                suggestion=item.suggestion or item.text,
                explanation=item.explanation or "Error detected",
            )
            for item in validate_items(payload.get("mistakes"), GrammarMistakeItem)
        ]

    def corrected_text(self, payload: dict[str, Any]) -> str | None:
        corrected = payload.get("correctedText")
        if isinstance(corrected, str) and corrected:
            return corrected
        return None


class PlagiarismCheck(Check):
    kind = CheckKind.plagiarism
    default_category = "medium"

    def candidates(self, chunk: Chunk, payload: dict[str, Any]) -> list[CandidateFinding]:
        out: list[CandidateFinding] = []
        for item in validate_items(payload.get("sentences"), PlagiarismSentenceItem):
            similarity = scoring.clamp(item.score)
            copied = item.copied or similarity > PLAGIARISM_COPIED_SCORE
            if not copied or similarity <= PLAGIARISM_MIN_SCORE:
                continue
            excerpt = item.text or item.original or ""
            if not excerpt:
                continue
            out.append(
                CandidateFinding(
                    excerpt=excerpt,
                    category=match_band(similarity),
                    confidence=similarity,
                    suggestion=item.source or DEFAULT_SOURCE,
                    explanation=f"Similarity {similarity:.0f}%",
                )
            )
        return out


class AiDetectionCheck(Check):
    kind = CheckKind.ai_detection
    default_category = "mixed"

    def candidates(self, chunk: Chunk, payload: dict[str, Any]) -> list[CandidateFinding]:
        sections = validate_items(payload.get("sections"), AiSectionItem)
        if sections:
            return [
                CandidateFinding(
                    excerpt=s.text,
                    category=self.bands.verdict(s.score),
                    confidence=s.score,
                    explanation=s.reason or "No specific patterns detected",
                )
                for s in sections
                if s.score > AI_FLAG_THRESHOLD
            ]

        try:
            verdict = AiChunkVerdict.model_validate(payload)
        except ValidationError:
            return []

        probability = scoring.clamp(verdict.score)
        excerpt = chunk.text.strip()
        if probability <= AI_FLAG_THRESHOLD or not excerpt:
            return []
        return [
            CandidateFinding(
                excerpt=excerpt,
                category=self.bands.verdict(probability),
                confidence=probability,
                explanation=verdict.reason or "No specific patterns detected",
            )
        ]


def match_band(similarity: float) -> str:
    if similarity >= 70:
        return "high"
    if similarity >= 50:
        return "medium"
    return "low"


CHECKS: dict[CheckKind, Check] = {
    CheckKind.grammar: GrammarCheck(),
    CheckKind.plagiarism: PlagiarismCheck(),
    CheckKind.ai_detection: AiDetectionCheck(),
}


def get_check(kind: CheckKind) -> Check:
    return CHECKS[kind]
