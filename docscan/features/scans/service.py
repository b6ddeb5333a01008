from dataclasses import asdict
from typing import Any

from fastapi import HTTPException

from docscan.analysis.corrections import apply_corrections, select_findings
from docscan.analysis.errors import OverlappingCorrectionsError, ScanConflictError
from docscan.analysis.highlights import render_highlights
from docscan.domain.enums import CheckKind, ScanStatus
from docscan.features.scans.runner import SCAN_JOB_TYPE, ScanJob
from docscan.infra.repo_documents import Document, DocumentRepo
from docscan.infra.repo_jobs import JobRepo
from docscan.infra.repo_results import ResultRepo, StoredResult
from docscan.infra.repo_scans import ScanStateRepo
from docscan.infra.tasks import TaskRunner


def document_to_dict(doc: Document) -> dict[str, Any]:
    return {
        "id": doc.id,
        "filename": doc.filename,
        "mime_type": doc.mime_type,
        "size_bytes": doc.size_bytes,
        "length": doc.length,
        "word_count": doc.word_count,
        "created_at": doc.created_at,
    }


def result_to_dict(result: StoredResult) -> dict[str, Any]:
    return {
        "id": result.id,
        "check_kind": result.check_kind.value,
        "overall_score": result.overall_score,
        "verdict": result.verdict,
        "counts": result.counts,
        "findings": [asdict(f) for f in result.findings],
        "summary": result.summary,
        "sampled_units": result.sampled_units,
        "corrected_text": result.corrected_text,
        "internal_matches": [asdict(m) for m in result.internal_matches],
        "duration_ms": result.duration_ms,
        "created_at": result.created_at,
    }


class ScanService:
    def __init__(self, *, conn, runner: TaskRunner | None = None, job: ScanJob | None = None) -> None:
        self._conn = conn
        self._runner = runner
        self._job = job

    def _get_document(self, document_id: int) -> Document:
        try:
            return DocumentRepo(self._conn).get(document_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="document_not_found")

    async def start_scan(self, *, document_id: int, kind: CheckKind) -> dict[str, object]:
        if self._runner is None or self._job is None:
            raise RuntimeError("ScanService needs a runner and a job to start scans")
        self._get_document(document_id)

        try:
            ScanStateRepo(self._conn).begin(document_id, kind)
        except ScanConflictError:
            raise HTTPException(status_code=409, detail="scan_in_progress")

        job_id = JobRepo(self._conn).enqueue(SCAN_JOB_TYPE, {"document_id": document_id, "check_kind": kind.value})
        self._runner.submit(self._job.execute, job_id=job_id, document_id=document_id, kind=kind)

        return {
            "document_id": document_id,
            "check_kind": kind.value,
            "status": ScanStatus.scanning.value,
            "job_id": job_id,
            "message": "scan_started",
        }

    async def poll(self, *, document_id: int, kind: CheckKind) -> dict[str, object]:
        doc = self._get_document(document_id)
        status = ScanStateRepo(self._conn).get_status(document_id, kind)
        latest = ResultRepo(self._conn).get_latest(document_id, kind)
        return {
            "document": document_to_dict(doc),
            "check_kind": kind.value,
            "status": status.value,
            "result": result_to_dict(latest) if latest is not None else None,
        }

    async def highlights(self, *, document_id: int, kind: CheckKind) -> dict[str, object]:
        doc = self._get_document(document_id)
        text = doc.text or ""
        latest = ResultRepo(self._conn).get_latest(document_id, kind)
        findings = latest.findings if latest is not None else []
        segments = render_highlights(text, findings)
        return {
            "document_id": document_id,
            "check_kind": kind.value,
            "ready": latest is not None,
            "segments": [
                {
                    "text": s.text,
                    "is_highlighted": s.is_highlighted,
                    "finding": asdict(s.finding) if s.finding is not None else None,
                }
                for s in segments
            ],
        }

    async def corrections(self, *, document_id: int, accepted: list[int] | None) -> dict[str, object]:
        doc = self._get_document(document_id)
        latest = ResultRepo(self._conn).get_latest(document_id, CheckKind.grammar)
        if latest is None or doc.text is None:
            raise HTTPException(status_code=404, detail="no_corrections_available")

        try:
            selected = select_findings(latest.findings, accepted)
            corrected = apply_corrections(doc.text, selected)
        except IndexError:
            raise HTTPException(status_code=422, detail="finding_index_out_of_range")
        except OverlappingCorrectionsError:
            raise HTTPException(status_code=409, detail="overlapping_corrections")
        except ValueError:
            raise HTTPException(status_code=422, detail="finding_does_not_match_document")

        return {
            "document_id": document_id,
            "result_id": latest.id,
            "applied": len(selected),
            "corrected_text": corrected,
        }
