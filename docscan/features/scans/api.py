from fastapi import APIRouter, Request

from docscan.analysis.orchestrator import AnalysisOrchestrator
from docscan.analysis.schemas import CorrectionsRequest
from docscan.domain.enums import CheckKind
from docscan.features.scans.runner import ScanJob
from docscan.features.scans.service import ScanService

router = APIRouter(prefix="/documents", tags=["scans"])


def _service(request: Request) -> ScanService:
    state = request.app.state
    orchestrator = AnalysisOrchestrator(state.oracle, concurrency=state.cfg.oracle.concurrency)
    job = ScanJob(conn=state.db, cfg=state.cfg, orchestrator=orchestrator)
    return ScanService(conn=state.db, runner=state.runner, job=job)


@router.post("/{document_id}/checks/{kind}", status_code=202)
async def start_scan(request: Request, document_id: int, kind: CheckKind) -> dict[str, object]:
    return await _service(request).start_scan(document_id=document_id, kind=kind)


@router.get("/{document_id}/checks/{kind}")
async def poll_scan(request: Request, document_id: int, kind: CheckKind) -> dict[str, object]:
    return await ScanService(conn=request.app.state.db).poll(document_id=document_id, kind=kind)


@router.get("/{document_id}/checks/{kind}/highlights")
async def get_highlights(request: Request, document_id: int, kind: CheckKind) -> dict[str, object]:
    return await ScanService(conn=request.app.state.db).highlights(document_id=document_id, kind=kind)


@router.post("/{document_id}/checks/grammar/corrections")
async def apply_corrections(
    request: Request, document_id: int, body: CorrectionsRequest | None = None
) -> dict[str, object]:
    accepted = body.accepted if body is not None else None
    return await ScanService(conn=request.app.state.db).corrections(document_id=document_id, accepted=accepted)
