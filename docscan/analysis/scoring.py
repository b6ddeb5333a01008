import math
from collections import Counter
from dataclasses import dataclass

from docscan.analysis.models import Finding, ScoreCard
from docscan.domain.enums import CheckKind

# A fully flagged fifth of the words already saturates the grammar score to 0.
GRAMMAR_ERROR_WEIGHT = 500.0


@dataclass(frozen=True)
class VerdictBands:
    """Ascending upper bounds, each compared with a strict ``<``.

    A score equal to a bound belongs to the band above it; scores past the last
    bound get ``top``.
    """

    thresholds: tuple[tuple[float, str], ...]
    top: str

    def verdict(self, score: float) -> str:
        for upper, label in self.thresholds:
            if score < upper:
                return label
        return self.top


GRAMMAR_BANDS = VerdictBands(
    thresholds=((70.0, "Needs Improvement"), (90.0, "Good")),
    top="Excellent",
)
PLAGIARISM_BANDS = VerdictBands(
    thresholds=((15.0, "original"), (30.0, "low"), (50.0, "moderate")),
    top="high",
)
AI_BANDS = VerdictBands(
    thresholds=((20.0, "human"), (40.0, "likely_human"), (60.0, "mixed"), (80.0, "likely_ai")),
    top="ai",
)

BANDS: dict[CheckKind, VerdictBands] = {
    CheckKind.grammar: GRAMMAR_BANDS,
    CheckKind.plagiarism: PLAGIARISM_BANDS,
    CheckKind.ai_detection: AI_BANDS,
}


def clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def count_by_category(findings: list[Finding]) -> dict[str, int]:
    counts = Counter(f.category for f in findings)
    return {category: counts[category] for category in sorted(counts)}


def grammar_score(total_findings: int, word_count: int) -> float:
    error_rate = total_findings / max(word_count, 1)
    return clamp(100.0 - error_rate * GRAMMAR_ERROR_WEIGHT)


def coverage_score(findings: list[Finding], sampled_units: int) -> float:
    """Average confidence weighted by how much of the sample was flagged.

    The ratio is capped at 1: several findings inside one sampled unit must not
    push the score past the average confidence.
    """
    if not findings:
        return 0.0
    average = math.fsum(f.confidence for f in findings) / len(findings)
    ratio = min(1.0, len(findings) / max(sampled_units, 1))
    return clamp(average * ratio)


def score(findings: list[Finding], word_count: int, kind: CheckKind, sampled_units: int = 1) -> ScoreCard:
    if kind is CheckKind.grammar:
        overall = grammar_score(len(findings), word_count)
    else:
        overall = coverage_score(findings, sampled_units)
    return ScoreCard(
        counts=count_by_category(findings),
        overall_score=overall,
        verdict=BANDS[kind].verdict(overall),
    )


def summarize(kind: CheckKind, card: ScoreCard, findings: list[Finding]) -> str:
    n = len(findings)

    if kind is CheckKind.grammar:
        if n == 0:
            return "No grammar, spelling, punctuation or style issues were found."
        parts = ", ".join(f"{count} {category}" for category, count in card.counts.items())
        return f"Found {n} issue(s): {parts}."

    if kind is CheckKind.plagiarism:
        if n == 0:
            return "No significant plagiarism detected. The content appears to be original."
        if card.overall_score < 30:
            return f"Found {n} section(s) that may benefit from citations. Overall originality is acceptable."
        if card.overall_score < 50:
            return (
                f"Found {n} section(s) matching common sources. "
                "Consider adding citations or rewriting these sections."
            )
        return f"High similarity detected in {n} section(s). These sections require significant revision."

    reasons = "; ".join(f.explanation for f in findings[:3] if f.explanation)
    verdict = card.verdict
    if verdict == "human":
        return "This content appears to be written by a human."
    if verdict == "likely_human":
        return "This content is likely human-written but shows minor AI-like patterns."
    if verdict == "mixed":
        return f"This content shows mixed signals and may be AI-assisted. Key observations: {reasons}"
    if verdict == "likely_ai":
        return f"This content is likely AI-generated. Patterns detected include: {reasons}"
    return f"This content strongly appears to be AI-generated. Strong indicators include: {reasons}"
