import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from docscan.analysis.checks import Check, get_check
from docscan.analysis.chunker import count_words
from docscan.analysis.models import AnalysisResult, Chunk, ChunkOutcome, Finding
from docscan.analysis.oracle import Oracle
from docscan.analysis.resolver import resolve_chunk
from docscan.domain.enums import CheckKind

logger = logging.getLogger(__name__)


class AnalysisOrchestrator:
    def __init__(self, oracle: Oracle, *, concurrency: int = 1) -> None:
        self._oracle = oracle
        self._concurrency = max(1, concurrency)

    def analyze(
        self,
        document_text: str,
        kind: CheckKind,
        chunks: list[Chunk],
        *,
        max_chunks: int,
    ) -> AnalysisResult:
        """Run one check over the leading ``max_chunks`` chunks of a document.

        Findings come back in chunk order, and in oracle order within a chunk. A chunk
        whose oracle call fails or whose reply cannot be read contributes nothing;
        the remaining chunks are still analysed.
        """
        check = get_check(kind)
        sampled = chunks[:max_chunks]
        if len(chunks) > len(sampled):
            logger.info(
                "%s: analysing %d of %d chunks, trailing %d skipped",
                kind.value,
                len(sampled),
                len(chunks),
                len(chunks) - len(sampled),
            )

        outcomes = self._run(check, sampled)

        findings: list[Finding] = []
        corrected_parts: list[str] = []
        for chunk, outcome in zip(sampled, outcomes):
            findings.extend(resolve_chunk(chunk, outcome.candidates))
            corrected_parts.append(outcome.corrected_text if outcome.corrected_text is not None else chunk.text)
        corrected_parts.extend(c.text for c in chunks[len(sampled):])

        card = check.score(findings, count_words(document_text), len(sampled))
        return AnalysisResult(
            check_kind=kind,
            findings=findings,
            counts=card.counts,
            overall_score=card.overall_score,
            verdict=card.verdict,
            summary=check.summarize(card, findings),
            sampled_units=len(sampled),
            corrected_text="".join(corrected_parts) if kind is CheckKind.grammar else None,
        )

    def _run(self, check: Check, chunks: list[Chunk]) -> list[ChunkOutcome]:
        if self._concurrency == 1 or len(chunks) <= 1:
            return [self._analyze_chunk(check, c) for c in chunks]
        # map() yields in submission order, so offsets and ordering match the sequential path.
        with ThreadPoolExecutor(max_workers=min(self._concurrency, len(chunks))) as pool:
            return list(pool.map(partial(self._analyze_chunk, check), chunks))

    def _analyze_chunk(self, check: Check, chunk: Chunk) -> ChunkOutcome:
        try:
            reply = self._oracle.analyze(check.kind, chunk.text)
        except Exception:  # network, timeout, non-2xx, unexpected completion shape
            logger.warning(
                "%s: oracle call failed for chunk at offset %d, treating as no findings",
                check.kind.value,
                chunk.document_offset,
                exc_info=True,
            )
            return ChunkOutcome(candidates=[])
        return check.interpret(chunk, reply)
