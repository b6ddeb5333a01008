from fastapi import APIRouter, Request, UploadFile

from docscan.features.documents.service import DocumentsService

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("/upload")
async def upload_document(request: Request, file: UploadFile) -> dict[str, object]:
    cfg = request.app.state.cfg
    conn = request.app.state.db
    return await DocumentsService(conn=conn, blobs_dir=cfg.blobs_dir).upload(file=file)


@router.get("/{document_id}")
async def get_document(request: Request, document_id: int) -> dict[str, object]:
    conn = request.app.state.db
    return await DocumentsService(conn=conn).get_document(document_id=document_id)
