import sqlite3
from datetime import datetime, timezone

from docscan.analysis.errors import IllegalTransitionError, ScanConflictError
from docscan.domain.enums import CheckKind, ScanStatus
from docscan.domain.scan_state import sources_of, transition
from docscan.infra.db import write_lock


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ScanStateRepo:
    """Scan status per (document, check kind); a missing row means ``uninitiated``."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get_status(self, document_id: int, kind: CheckKind) -> ScanStatus:
        row = self._conn.execute(
            "SELECT status FROM scan_states WHERE document_id = ? AND check_kind = ?",
            (document_id, kind.value),
        ).fetchone()
        if row is None:
            return ScanStatus.uninitiated
        return ScanStatus(str(row["status"]))

    def list_for_document(self, document_id: int) -> dict[CheckKind, ScanStatus]:
        rows = self._conn.execute(
            "SELECT check_kind, status FROM scan_states WHERE document_id = ?", (document_id,)
        ).fetchall()
        found = {CheckKind(str(r["check_kind"])): ScanStatus(str(r["status"])) for r in rows}
        return {kind: found.get(kind, ScanStatus.uninitiated) for kind in CheckKind}

    def begin(self, document_id: int, kind: CheckKind) -> None:
        """Enter ``scanning``, raising ScanConflictError if this (document, kind) already is.

        The guard is a single conditional UPDATE, so two concurrent requests can't
        both win.
        """
        allowed = [s.value for s in sources_of(ScanStatus.scanning)]
        placeholders = ", ".join("?" for _ in allowed)
        now = utc_now_iso()
        with write_lock:
            self._conn.execute(
                """
                INSERT OR IGNORE INTO scan_states(document_id, check_kind, status, updated_at)
                VALUES(?, ?, ?, ?)
                """,
                (document_id, kind.value, ScanStatus.uninitiated.value, now),
            )
            cur = self._conn.execute(
                f"""
                UPDATE scan_states SET status = ?, updated_at = ?
                WHERE document_id = ? AND check_kind = ? AND status IN ({placeholders})
                """,
                (ScanStatus.scanning.value, now, document_id, kind.value, *allowed),
            )
            self._conn.commit()
        if cur.rowcount != 1:
            raise ScanConflictError(document_id, kind)

    def set_status(self, document_id: int, kind: CheckKind, target: ScanStatus) -> None:
        with write_lock:
            current = self.get_status(document_id, kind)
            transition(current, target)
            self._conn.execute(
                """
                INSERT OR IGNORE INTO scan_states(document_id, check_kind, status, updated_at)
                VALUES(?, ?, ?, ?)
                """,
                (document_id, kind.value, current.value, utc_now_iso()),
            )
            cur = self._conn.execute(
                """
                UPDATE scan_states SET status = ?, updated_at = ?
                WHERE document_id = ? AND check_kind = ? AND status = ?
                """,
                (target.value, utc_now_iso(), document_id, kind.value, current.value),
            )
            self._conn.commit()
        if cur.rowcount != 1:
            raise IllegalTransitionError(current, target)
