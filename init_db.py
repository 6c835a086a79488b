# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import asyncio

from ecoquest.common.logging import setup_logging
from ecoquest.infra import db
from ecoquest.infra.config import settings
from ecoquest.infra.log import log
from ecoquest.infra.storage import DbStorage
from ecoquest.seeding import SeedCoordinator


async def init_db(storage: DbStorage | None = None) -> bool:
    """建表并确保默认管理员存在，不启动服务；返回是否新建了管理员"""
    if storage is None:
        db.init_persistence()
        storage = DbStorage(db.engine, db.SessionLocal)

    seeder = SeedCoordinator(
        storage,
        admin_username=settings.ADMIN_USERNAME,
        admin_password=settings.ADMIN_PASSWORD,
        development=settings.is_development,
    )
    log("Creating tables...")
    await seeder.ensure_schema()
    created = await seeder.ensure_admin_account()
    log("Done.")
    return created


if __name__ == "__main__":
    setup_logging()
    asyncio.run(init_db())
