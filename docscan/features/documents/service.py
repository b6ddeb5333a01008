from pathlib import Path

from fastapi import HTTPException, UploadFile

from docscan.features.scans.service import document_to_dict
from docscan.infra.repo_documents import DocumentRepo
from docscan.infra.repo_scans import ScanStateRepo
from docscan.infra.storage import BlobStore
from docscan.infra.text_extract import mime_for_filename


class DocumentsService:
    def __init__(self, *, conn, blobs_dir: Path | None = None) -> None:
        self._conn = conn
        self._blobs_dir = blobs_dir

    async def upload(self, *, file: UploadFile) -> dict[str, object]:
        data = await file.read()
        if not data:
            raise HTTPException(status_code=400, detail="empty_file")

        filename = file.filename or "upload"
        mime_type = mime_for_filename(filename)
        if mime_type is None:
            raise HTTPException(status_code=400, detail="unsupported_file_type")

        if self._blobs_dir is None:
            raise RuntimeError("DocumentsService needs blobs_dir to accept uploads")
        blob = BlobStore(Path(self._blobs_dir)).put_bytes(data, ext=Path(filename).suffix.lower())

        doc = DocumentRepo(self._conn).create(
            filename=filename,
            mime_type=mime_type,
            file_path=str(blob.path),
            sha256=blob.sha256,
            size_bytes=blob.size_bytes,
        )
        return {
            "document_id": doc.id,
            "filename": doc.filename,
            "mime_type": doc.mime_type,
            "sha256": doc.sha256,
            "size_bytes": doc.size_bytes,
        }

    async def get_document(self, *, document_id: int) -> dict[str, object]:
        try:
            doc = DocumentRepo(self._conn).get(document_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="document_not_found")

        statuses = ScanStateRepo(self._conn).list_for_document(document_id)
        return {
            "document": document_to_dict(doc),
            "scans": {kind.value: status.value for kind, status in statuses.items()},
        }
