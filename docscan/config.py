import os
from dataclasses import dataclass, field
from pathlib import Path

from docscan.domain.enums import CheckKind


@dataclass(frozen=True)
class ChunkProfile:
    max_length: int
    max_chunks: int


def _default_profiles() -> dict[CheckKind, ChunkProfile]:
    return {
        CheckKind.grammar: ChunkProfile(max_length=2500, max_chunks=5),
        CheckKind.plagiarism: ChunkProfile(max_length=2000, max_chunks=6),
        CheckKind.ai_detection: ChunkProfile(max_length=3000, max_chunks=8),
    }


@dataclass(frozen=True)
class OracleConfig:
    base_url: str = "https://api.openai.com/v1"
    api_key: str = ""
    model: str = "gpt-4o"
    timeout: float = 60.0
    concurrency: int = 1


@dataclass(frozen=True)
class AppConfig:
    data_dir: Path
    log_level: str = "INFO"
    scan_workers: int = 4
    fingerprint_window: int = 500
    oracle: OracleConfig = field(default_factory=OracleConfig)
    profiles: dict[CheckKind, ChunkProfile] = field(default_factory=_default_profiles)

    @property
    def db_path(self) -> Path:
        return self.data_dir / "docscan.sqlite3"

    @property
    def blobs_dir(self) -> Path:
        return self.data_dir

    def profile(self, kind: CheckKind) -> ChunkProfile:
        return self.profiles[kind]


def load_config() -> AppConfig:
    env = os.environ
    oracle = OracleConfig(
        base_url=env.get("DOCSCAN_ORACLE_BASE_URL", OracleConfig.base_url),
        api_key=env.get("DOCSCAN_ORACLE_API_KEY", ""),
        model=env.get("DOCSCAN_ORACLE_MODEL", OracleConfig.model),
        timeout=float(env.get("DOCSCAN_ORACLE_TIMEOUT", OracleConfig.timeout)),
        concurrency=int(env.get("DOCSCAN_ORACLE_CONCURRENCY", OracleConfig.concurrency)),
    )
    return AppConfig(
        data_dir=Path(env.get("DOCSCAN_DATA_DIR", "data")),
        log_level=env.get("DOCSCAN_LOG_LEVEL", "INFO"),
        scan_workers=int(env.get("DOCSCAN_SCAN_WORKERS", "4")),
        fingerprint_window=int(env.get("DOCSCAN_FINGERPRINT_WINDOW", "500")),
        oracle=oracle,
    )
