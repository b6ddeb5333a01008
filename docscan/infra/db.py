import sqlite3
import threading
from dataclasses import dataclass
from pathlib import Path

# One connection is shared by request handlers and scan worker threads; writes that
# span several statements (insert + lastrowid, insert-or-ignore + update) hold this.
write_lock = threading.RLock()


@dataclass(frozen=True)
class DbConfig:
    path: Path


def connect(cfg: DbConfig) -> sqlite3.Connection:
    cfg.path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(cfg.path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def migrate(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS documents (
          id INTEGER PRIMARY KEY,
          filename TEXT NOT NULL,
          mime_type TEXT NOT NULL,
          file_path TEXT NOT NULL,
          sha256 TEXT NOT NULL,
          size_bytes INTEGER NOT NULL,
          text TEXT,
          length INTEGER,
          word_count INTEGER,
          created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS scan_states (
          document_id INTEGER NOT NULL,
          check_kind TEXT NOT NULL,
          status TEXT NOT NULL,
          updated_at TEXT NOT NULL,
          PRIMARY KEY (document_id, check_kind),
          FOREIGN KEY (document_id) REFERENCES documents(id)
        );

        CREATE TABLE IF NOT EXISTS analysis_results (
          id INTEGER PRIMARY KEY,
          document_id INTEGER NOT NULL,
          check_kind TEXT NOT NULL,
          overall_score REAL NOT NULL,
          verdict TEXT NOT NULL,
          counts_json TEXT NOT NULL,
          findings_json TEXT NOT NULL,
          summary TEXT NOT NULL,
          sampled_units INTEGER NOT NULL,
          corrected_text TEXT,
          internal_matches_json TEXT NOT NULL DEFAULT '[]',
          duration_ms INTEGER,
          created_at TEXT NOT NULL,
          FOREIGN KEY (document_id) REFERENCES documents(id)
        );

        CREATE INDEX IF NOT EXISTS idx_results_document_kind
          ON analysis_results(document_id, check_kind, id);

        CREATE TABLE IF NOT EXISTS fingerprints (
          document_id INTEGER PRIMARY KEY,
          text_hash TEXT NOT NULL,
          sentence_hashes_json TEXT NOT NULL,
          word_count INTEGER NOT NULL,
          created_at TEXT NOT NULL,
          FOREIGN KEY (document_id) REFERENCES documents(id)
        );

        CREATE INDEX IF NOT EXISTS idx_fingerprints_text_hash ON fingerprints(text_hash);

        CREATE TABLE IF NOT EXISTS jobs (
          id INTEGER PRIMARY KEY,
          type TEXT NOT NULL,
          payload_json TEXT NOT NULL,
          status TEXT NOT NULL,
          attempts INTEGER NOT NULL,
          scheduled_at TEXT NOT NULL,
          locked_at TEXT,
          finished_at TEXT,
          last_error TEXT
        );
        """
    )
    conn.commit()
