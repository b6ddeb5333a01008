import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from docscan.analysis.oracle import ChatCompletionsOracle, Oracle
from docscan.config import AppConfig, load_config
from docscan.features.documents.api import router as documents_router
from docscan.features.scans.api import router as scans_router
from docscan.infra.db import DbConfig, connect, migrate
from docscan.infra.tasks import TaskRunner
from docscan.web.health import router as health_router


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    app.state.runner.shutdown(wait=False)


def create_app(
    cfg: AppConfig | None = None,
    *,
    oracle: Oracle | None = None,
    runner: TaskRunner | None = None,
) -> FastAPI:
    cfg = cfg or load_config()
    logging.basicConfig(
        level=cfg.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    conn = connect(DbConfig(path=cfg.db_path))
    migrate(conn)

    app = FastAPI(title="Document Check Service", version="0.1.0", lifespan=_lifespan)
    app.state.cfg = cfg
    app.state.db = conn
    app.state.oracle = oracle or ChatCompletionsOracle(cfg.oracle)
    app.state.runner = runner or TaskRunner(max_workers=cfg.scan_workers)
    app.include_router(health_router)
    app.include_router(documents_router)
    app.include_router(scans_router)
    return app


app = create_app()
