import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone

from docscan.infra.db import write_lock


@dataclass(frozen=True)
class Document:
    id: int
    filename: str
    mime_type: str
    file_path: str
    sha256: str
    size_bytes: int
    text: str | None
    length: int | None
    word_count: int | None
    created_at: str


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_document(row: sqlite3.Row) -> Document:
    return Document(
        id=int(row["id"]),
        filename=str(row["filename"]),
        mime_type=str(row["mime_type"]),
        file_path=str(row["file_path"]),
        sha256=str(row["sha256"]),
        size_bytes=int(row["size_bytes"]),
        text=row["text"],
        length=row["length"],
        word_count=row["word_count"],
        created_at=str(row["created_at"]),
    )


class DocumentRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(self, filename: str, mime_type: str, file_path: str, sha256: str, size_bytes: int) -> Document:
        with write_lock:
            cur = self._conn.execute(
                """
                INSERT INTO documents(filename, mime_type, file_path, sha256, size_bytes, created_at)
                VALUES(?, ?, ?, ?, ?, ?)
                """,
                (filename, mime_type, file_path, sha256, size_bytes, utc_now_iso()),
            )
            self._conn.commit()
        if cur.lastrowid is None:
            raise RuntimeError("Failed to create document: missing lastrowid")
        return self.get(int(cur.lastrowid))

    def get(self, document_id: int) -> Document:
        row = self._conn.execute("SELECT * FROM documents WHERE id = ?", (document_id,)).fetchone()
        if row is None:
            raise KeyError(f"Document not found: {document_id}")
        return _row_to_document(row)

    def set_text(self, document_id: int, text: str, word_count: int) -> Document:
        """Store extracted text once; later calls leave the first extraction in place."""
        with write_lock:
            self._conn.execute(
                """
                UPDATE documents SET text = ?, length = ?, word_count = ?
                WHERE id = ? AND text IS NULL
                """,
                (text, len(text), word_count, document_id),
            )
            self._conn.commit()
        return self.get(document_id)
