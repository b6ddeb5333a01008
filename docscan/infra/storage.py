import hashlib
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class BlobRef:
    sha256: str
    path: Path
    size_bytes: int


class BlobStore:
    def __init__(self, root: Path) -> None:
        self._root = root

    def put_bytes(self, data: bytes, ext: str) -> BlobRef:
        sha = hashlib.sha256(data).hexdigest()
        base = self._root / "blobs" / sha
        base.mkdir(parents=True, exist_ok=True)
        original = base / f"original{ext}"
        if not original.exists():
            original.write_bytes(data)
        return BlobRef(sha256=sha, path=original, size_bytes=len(data))
