import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure `import docscan...` works without installing the package.
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture()
def conn(tmp_path: Path):
    from docscan.infra.db import DbConfig, connect, migrate

    c = connect(DbConfig(path=tmp_path / "test.sqlite3"))
    migrate(c)
    yield c
    c.close()
