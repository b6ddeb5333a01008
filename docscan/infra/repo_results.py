import json
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone

from docscan.analysis.models import (
    AnalysisResult,
    Finding,
    InternalMatch,
    findings_from_json,
    findings_to_json,
    internal_matches_from_json,
    internal_matches_to_json,
)
from docscan.domain.enums import CheckKind
from docscan.infra.db import write_lock


@dataclass(frozen=True)
class StoredResult:
    id: int
    document_id: int
    check_kind: CheckKind
    overall_score: float
    verdict: str
    counts: dict[str, int]
    findings: list[Finding]
    summary: str
    sampled_units: int
    corrected_text: str | None
    internal_matches: list[InternalMatch]
    duration_ms: int | None
    created_at: str


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_result(row: sqlite3.Row) -> StoredResult:
    return StoredResult(
        id=int(row["id"]),
        document_id=int(row["document_id"]),
        check_kind=CheckKind(str(row["check_kind"])),
        overall_score=float(row["overall_score"]),
        verdict=str(row["verdict"]),
        counts=json.loads(row["counts_json"]),
        findings=findings_from_json(row["findings_json"]),
        summary=str(row["summary"]),
        sampled_units=int(row["sampled_units"]),
        corrected_text=row["corrected_text"],
        internal_matches=internal_matches_from_json(row["internal_matches_json"]),
        duration_ms=row["duration_ms"],
        created_at=str(row["created_at"]),
    )


class ResultRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(self, document_id: int, result: AnalysisResult, duration_ms: int | None = None) -> StoredResult:
        with write_lock:
            cur = self._conn.execute(
                """
                INSERT INTO analysis_results(
                  document_id, check_kind, overall_score, verdict, counts_json, findings_json,
                  summary, sampled_units, corrected_text, internal_matches_json, duration_ms, created_at
                )
                VALUES(?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    document_id,
                    result.check_kind.value,
                    result.overall_score,
                    result.verdict,
                    json.dumps(result.counts, ensure_ascii=False),
                    findings_to_json(result.findings),
                    result.summary,
                    result.sampled_units,
                    result.corrected_text,
                    internal_matches_to_json(result.internal_matches),
                    duration_ms,
                    utc_now_iso(),
                ),
            )
            self._conn.commit()
        if cur.lastrowid is None:
            raise RuntimeError("Failed to create analysis result: missing lastrowid")
        return self.get(int(cur.lastrowid))

    def get(self, result_id: int) -> StoredResult:
        row = self._conn.execute("SELECT * FROM analysis_results WHERE id = ?", (result_id,)).fetchone()
        if row is None:
            raise KeyError(f"Analysis result not found: {result_id}")
        return _row_to_result(row)

    def get_latest(self, document_id: int, kind: CheckKind) -> StoredResult | None:
        row = self._conn.execute(
            """
            SELECT * FROM analysis_results
            WHERE document_id = ? AND check_kind = ?
            ORDER BY id DESC
            LIMIT 1
            """,
            (document_id, kind.value),
        ).fetchone()
        if row is None:
            return None
        return _row_to_result(row)

    def count_for_document(self, document_id: int, kind: CheckKind) -> int:
        row = self._conn.execute(
            "SELECT COUNT(*) AS n FROM analysis_results WHERE document_id = ? AND check_kind = ?",
            (document_id, kind.value),
        ).fetchone()
        return int(row["n"])
