# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ecoquest.api.routes import register_routes
from ecoquest.bootstrap import BootError, StartupOrchestrator
from ecoquest.common.logging import setup_logging
from ecoquest.common.middlewares import DiagnosticMiddleware
from ecoquest.infra import db
from ecoquest.infra.config import Settings, settings
from ecoquest.infra.server import listen
from ecoquest.infra.storage import DbStorage
from ecoquest.seeding import SeedCoordinator
from ecoquest.web.assets import close_dev_pipeline, serve_static_assets, setup_dev_pipeline

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # 开发环境下 ASSET_SERVING_SETUP 创建的 vite 代理 client
    await close_dev_pipeline(app)


def create_app(cfg: Settings = settings) -> FastAPI:
    app = FastAPI(
        title="ecoquest",
        version="1.0.0",
        lifespan=lifespan,
    )

    # ---------- middlewares ----------

    app.add_middleware(
        DiagnosticMiddleware,
        api_prefix=cfg.API_PREFIX,
        limit=cfg.LOG_LINE_LIMIT,
    )
    return app


def build_orchestrator(app: FastAPI, cfg: Settings = settings) -> StartupOrchestrator:
    store = DbStorage(db.engine, db.SessionLocal)
    seeder = SeedCoordinator(
        store,
        admin_username=cfg.ADMIN_USERNAME,
        admin_password=cfg.ADMIN_PASSWORD,
        development=cfg.is_development,
    )
    return StartupOrchestrator(
        app,
        cfg,
        init_persistence=db.init_persistence,
        seeder=seeder,
        register_routes=register_routes,
        setup_dev_pipeline=setup_dev_pipeline,
        serve_static_assets=serve_static_assets,
        listen=listen,
        sample_seeder=seeder if cfg.is_development else None,
    )


async def start(cfg: Settings = settings) -> None:
    app = create_app(cfg)
    await build_orchestrator(app, cfg).run()


def main() -> int:
    setup_logging()
    try:
        asyncio.run(start())
    except BootError as e:
        logger.error("startup aborted at %s: %s", e.phase.name if e.phase else "-", e, exc_info=e.__cause__)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
