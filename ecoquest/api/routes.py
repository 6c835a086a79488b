# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from fastapi import APIRouter, FastAPI

from ecoquest.api import auth as auth_api, games as games_api, tasks as tasks_api
from ecoquest.infra.config import settings
from ecoquest.infra.server import AppServer, build_server


def create_api_router() -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    def health_check() -> dict:
        return {"status": "ok"}

    # 登录
    router.include_router(auth_api.router)

    # 小游戏目录
    router.include_router(games_api.router)

    # 老师任务
    router.include_router(tasks_api.router)
    return router


async def register_routes(app: FastAPI) -> AppServer:
    """挂载全部 API 路由，返回承载该 app 的 server（尚未监听）"""
    app.include_router(create_api_router(), prefix=settings.API_PREFIX)
    return build_server(app)
