from pathlib import Path

import docx
import fitz  # PyMuPDF
import pytest

from docscan.analysis.errors import UnsupportedDocumentError
from docscan.infra.text_extract import DOCX_MIME, extract_text, mime_for_filename


def test_mime_from_extension() -> None:
    assert mime_for_filename("Essay.PDF") == "application/pdf"
    assert mime_for_filename("notes.txt") == "text/plain"
    assert mime_for_filename("report.DOCX") == DOCX_MIME
    assert mime_for_filename("slides.pptx") is None


def test_plain_text_is_decoded_and_trimmed(tmp_path: Path) -> None:
    path = tmp_path / "essay.txt"
    path.write_bytes("\n  Straße ist naß.  \n".encode("utf-8"))

    assert extract_text(path, "text/plain") == "Straße ist naß."


def test_pdf_text_is_extracted(tmp_path: Path) -> None:
    path = tmp_path / "essay.pdf"
    doc = fitz.open()
    doc.new_page().insert_text((72, 72), "First page text")
    doc.new_page().insert_text((72, 72), "Second page text")
    doc.save(str(path))
    doc.close()

    text = extract_text(path, "application/pdf")

    assert "First page text" in text
    assert "Second page text" in text
    assert text.index("First") < text.index("Second")


def test_docx_paragraphs_are_extracted_in_order(tmp_path: Path) -> None:
    path = tmp_path / "essay.docx"
    doc = docx.Document()
    doc.add_paragraph("Helo wrld.")
    doc.add_paragraph("   ")
    doc.add_paragraph("This is fine.")
    doc.save(str(path))

    assert extract_text(path, DOCX_MIME) == "Helo wrld.\nThis is fine."


def test_unsupported_type(tmp_path: Path) -> None:
    with pytest.raises(UnsupportedDocumentError):
        extract_text(tmp_path / "x.pptx", "application/vnd.ms-powerpoint")
