import logging
import sqlite3
import time
from pathlib import Path

from docscan.analysis.chunker import chunk_text, count_words
from docscan.analysis.fingerprint import apply_internal_matches, find_matches, make_fingerprint
from docscan.analysis.models import AnalysisResult
from docscan.analysis.orchestrator import AnalysisOrchestrator
from docscan.config import AppConfig
from docscan.domain.enums import CheckKind, ScanStatus
from docscan.infra.repo_documents import Document, DocumentRepo
from docscan.infra.repo_fingerprints import FingerprintRepo
from docscan.infra.repo_jobs import JobRepo
from docscan.infra.repo_results import ResultRepo
from docscan.infra.repo_scans import ScanStateRepo
from docscan.infra.text_extract import extract_text

logger = logging.getLogger(__name__)

SCAN_JOB_TYPE = "scan"


class ScanJob:
    """Background body of one scan: extract, chunk, analyse, persist, finish."""

    def __init__(self, *, conn: sqlite3.Connection, cfg: AppConfig, orchestrator: AnalysisOrchestrator) -> None:
        self._conn = conn
        self._cfg = cfg
        self._orchestrator = orchestrator

    def execute(self, *, job_id: int, document_id: int, kind: CheckKind) -> None:
        jobs = JobRepo(self._conn)
        states = ScanStateRepo(self._conn)
        jobs.lock(job_id)
        started = time.monotonic()

        try:
            doc = self._ensure_text(DocumentRepo(self._conn).get(document_id))
            text = doc.text or ""
            profile = self._cfg.profile(kind)
            chunks = chunk_text(text, profile.max_length)
            result = self._orchestrator.analyze(text, kind, chunks, max_chunks=profile.max_chunks)
            if kind is CheckKind.plagiarism:
                result = self._check_internal(document_id, text, result)
            duration_ms = int((time.monotonic() - started) * 1000)
            stored = ResultRepo(self._conn).create(document_id, result, duration_ms=duration_ms)
            states.set_status(document_id, kind, ScanStatus.completed)
        except Exception as e:
            logger.exception("%s scan of document %d failed", kind.value, document_id)
            jobs.mark_failed(job_id, f"{type(e).__name__}: {e}")
            states.set_status(document_id, kind, ScanStatus.failed)
            return

        jobs.mark_succeeded(job_id)
        logger.info(
            "%s scan of document %d completed: %d findings, score %.1f (%s) in %d ms",
            kind.value,
            document_id,
            len(stored.findings),
            stored.overall_score,
            stored.verdict,
            duration_ms,
        )

    def _ensure_text(self, doc: Document) -> Document:
        if doc.text is not None:
            return doc
        text = extract_text(Path(doc.file_path), doc.mime_type)
        logger.info("extracted %d chars from document %d", len(text), doc.id)
        return DocumentRepo(self._conn).set_text(doc.id, text, count_words(text))

    def _check_internal(self, document_id: int, text: str, result: AnalysisResult) -> AnalysisResult:
        """Compare against earlier uploads, then record this document for later ones."""
        repo = FingerprintRepo(self._conn)
        try:
            matches = find_matches(text, repo.list_excluding(document_id, limit=self._cfg.fingerprint_window))
            repo.upsert(document_id, make_fingerprint(text))
        except (sqlite3.Error, ValueError):
            logger.warning("internal fingerprint check failed for document %d", document_id, exc_info=True)
            return result

        if matches:
            logger.info(
                "document %d matches %d earlier upload(s), highest %d%%",
                document_id,
                len(matches),
                matches[0].match_percentage,
            )
        return apply_internal_matches(result, matches)
