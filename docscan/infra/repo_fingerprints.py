import json
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone

from docscan.analysis.fingerprint import Fingerprint
from docscan.infra.db import write_lock


@dataclass(frozen=True)
class StoredFingerprint:
    document_id: int
    fingerprint: Fingerprint
    created_at: str


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_fingerprint(row: sqlite3.Row) -> StoredFingerprint:
    return StoredFingerprint(
        document_id=int(row["document_id"]),
        fingerprint=Fingerprint(
            text_hash=str(row["text_hash"]),
            sentence_hashes=list(json.loads(row["sentence_hashes_json"])),
            word_count=int(row["word_count"]),
        ),
        created_at=str(row["created_at"]),
    )


class FingerprintRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def upsert(self, document_id: int, fingerprint: Fingerprint) -> StoredFingerprint:
        """Store a document's fingerprint; a rescan refreshes the hashes, not ``created_at``."""
        with write_lock:
            self._conn.execute(
                """
                INSERT INTO fingerprints(document_id, text_hash, sentence_hashes_json, word_count, created_at)
                VALUES(?, ?, ?, ?, ?)
                ON CONFLICT(document_id) DO UPDATE SET
                  text_hash = excluded.text_hash,
                  sentence_hashes_json = excluded.sentence_hashes_json,
                  word_count = excluded.word_count
                """,
                (
                    document_id,
                    fingerprint.text_hash,
                    json.dumps(fingerprint.sentence_hashes),
                    fingerprint.word_count,
                    utc_now_iso(),
                ),
            )
            self._conn.commit()
        return self.get(document_id)

    def get(self, document_id: int) -> StoredFingerprint:
        row = self._conn.execute("SELECT * FROM fingerprints WHERE document_id = ?", (document_id,)).fetchone()
        if row is None:
            raise KeyError(f"Fingerprint not found: {document_id}")
        return _row_to_fingerprint(row)

    def list_excluding(self, document_id: int, limit: int = 500) -> list[StoredFingerprint]:
        rows = self._conn.execute(
            """
            SELECT * FROM fingerprints
            WHERE document_id != ?
            ORDER BY created_at DESC, document_id DESC
            LIMIT ?
            """,
            (document_id, limit),
        ).fetchall()
        return [_row_to_fingerprint(r) for r in rows]
