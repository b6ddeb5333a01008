from docscan.analysis.models import CandidateFinding, Chunk, Finding


def resolve_finding(chunk: Chunk, candidate: CandidateFinding, search_from: int = 0) -> Finding | None:
    """Anchor a chunk-local candidate to absolute document offsets.

    Returns None when the excerpt does not occur verbatim in the chunk at or after
    ``search_from`` (the oracle paraphrased or invented it); such findings are never stored.
    """
    if not candidate.excerpt:
        return None
    local = chunk.text.find(candidate.excerpt, search_from)
    if local < 0:
        return None

    start = chunk.document_offset + local
    return Finding(
        text=candidate.excerpt,
        start_index=start,
        end_index=start + len(candidate.excerpt),
        category=candidate.category,
        confidence=candidate.confidence,
        suggestion=candidate.suggestion,
        explanation=candidate.explanation,
    )


def resolve_chunk(chunk: Chunk, candidates: list[CandidateFinding]) -> list[Finding]:
    # A repeated excerpt anchors to its next occurrence, not the first one again.
    next_from: dict[str, int] = {}
    resolved: list[Finding] = []
    for candidate in candidates:
        finding = resolve_finding(chunk, candidate, next_from.get(candidate.excerpt, 0))
        if finding is not None:
            next_from[candidate.excerpt] = finding.end_index - chunk.document_offset
            resolved.append(finding)
    return resolved
