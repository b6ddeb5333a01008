from pathlib import Path

import fitz  # PyMuPDF
from docx import Document

from docscan.analysis.errors import UnsupportedDocumentError

PDF_MIME = "application/pdf"
TEXT_MIME = "text/plain"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

SUPPORTED_EXTENSIONS: dict[str, str] = {
    ".pdf": PDF_MIME,
    ".txt": TEXT_MIME,
    ".docx": DOCX_MIME,
}


def mime_for_filename(filename: str) -> str | None:
    return SUPPORTED_EXTENSIONS.get(Path(filename).suffix.lower())


def extract_text(path: Path, mime_type: str) -> str:
    if mime_type == PDF_MIME:
        return _extract_pdf(path)
    if mime_type == DOCX_MIME:
        return _extract_docx(path)
    if mime_type == TEXT_MIME:
        return path.read_bytes().decode("utf-8", errors="replace").strip()
    raise UnsupportedDocumentError(mime_type)


def _extract_pdf(path: Path) -> str:
    with fitz.open(path) as doc:
        pages = [doc.load_page(i).get_text("text") or "" for i in range(doc.page_count)]
    return "\n".join(pages).strip()


def _extract_docx(path: Path) -> str:
    paragraphs = [p.text for p in Document(str(path)).paragraphs if p.text and p.text.strip()]
    return "\n".join(paragraphs).strip()
