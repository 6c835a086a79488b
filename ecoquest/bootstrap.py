# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""启动编排

阶段严格按顺序执行，每个阶段 await 完成后才进入下一个：

PERSISTENCE_INIT -> SEEDING -> ROUTE_REGISTRATION -> ERROR_HANDLER_INSTALL
-> ASSET_SERVING_SETUP -> LISTENING

前端资源的 catch-all 路由在 ASSET_SERVING_SETUP 注册，永远晚于 API 路由，
因此不会遮住 API。除开发环境的示例数据外，任何阶段失败都终止启动，不会监听端口。
"""

from __future__ import annotations

import enum
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Sequence

from fastapi import FastAPI

from ecoquest.common.exception_handlers import install_error_handler
from ecoquest.infra.config import Settings
from ecoquest.infra.log import log
from ecoquest.seeding import SAMPLE_TASKS, SeedCoordinator, SeedOutcome, SeedResult

logger = logging.getLogger(__name__)


class BootPhase(int, enum.Enum):
    PERSISTENCE_INIT = 1
    SEEDING = 2
    ROUTE_REGISTRATION = 3
    ERROR_HANDLER_INSTALL = 4
    ASSET_SERVING_SETUP = 5
    LISTENING = 6


class SampleSeeder(Protocol):
    async def ensure_sample_data(self, owner_id: str, sample_set: Sequence[Dict[str, Any]]) -> SeedResult: ...


class BootError(RuntimeError):
    def __init__(self, phase: Optional[BootPhase], message: str) -> None:
        super().__init__(message)
        self.phase = phase


@dataclass
class BootReport:
    completed: List[BootPhase] = field(default_factory=list)
    sample_result: Optional[SeedResult] = None


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class StartupOrchestrator:
    def __init__(
        self,
        app: FastAPI,
        settings: Settings,
        *,
        init_persistence: Callable[[], Any],
        seeder: SeedCoordinator,
        register_routes: Callable[[FastAPI], Awaitable[Any]],
        setup_dev_pipeline: Callable[[FastAPI, Any], Awaitable[None]],
        serve_static_assets: Callable[[FastAPI], Any],
        listen: Callable[[Any, str, int], Awaitable[None]],
        sample_seeder: Optional[SampleSeeder] = None,
        sample_set: Sequence[Dict[str, Any]] = SAMPLE_TASKS,
        error_handler_installer: Callable[[FastAPI], None] = install_error_handler,
    ) -> None:
        self.app = app
        self.settings = settings
        self._init_persistence = init_persistence
        self._register_routes = register_routes
        self._setup_dev_pipeline = setup_dev_pipeline
        self._serve_static_assets = serve_static_assets
        self._listen = listen
        self._install_error_handler = error_handler_installer
        self._sample_set = sample_set

        self.seeder = seeder
        self._sample_seeder = sample_seeder
        self.phase: Optional[BootPhase] = None
        self.report = BootReport()
        self.server: Any = None

    def _enter(self, phase: BootPhase) -> None:
        expected = BootPhase.PERSISTENCE_INIT if self.phase is None else BootPhase(self.phase + 1)
        if phase is not expected:
            raise BootError(phase, f"boot phase {phase.name} out of order, expected {expected.name}")
        self.phase = phase
        logger.info("boot phase: %s", phase.name)

    def _done(self, phase: BootPhase) -> None:
        self.report.completed.append(phase)

    async def _run_phase(self, phase: BootPhase, step: Callable[[], Awaitable[Any]]) -> Any:
        self._enter(phase)
        try:
            result = await step()
        except BootError:
            raise
        except Exception as e:
            raise BootError(phase, f"boot failed during {phase.name}: {e}") from e
        self._done(phase)
        return result

    async def run(self) -> BootReport:
        if self.phase is not None:
            raise BootError(self.phase, "boot sequence already executed")

        await self._run_phase(BootPhase.PERSISTENCE_INIT, self._persistence_init)
        await self._run_phase(BootPhase.SEEDING, self._seeding)
        self.server = await self._run_phase(BootPhase.ROUTE_REGISTRATION, self._route_registration)
        await self._run_phase(BootPhase.ERROR_HANDLER_INSTALL, self._error_handler_install)
        await self._run_phase(BootPhase.ASSET_SERVING_SETUP, self._asset_serving_setup)
        await self._run_phase(BootPhase.LISTENING, self._listening)
        return self.report

    # ---------- phases ----------

    async def _persistence_init(self) -> None:
        await _maybe_await(self._init_persistence())

    async def _seeding(self) -> None:
        await self.seeder.ensure_schema()
        await self.seeder.ensure_admin_account()

    async def _route_registration(self) -> Any:
        return await self._register_routes(self.app)

    async def _error_handler_install(self) -> None:
        self._install_error_handler(self.app)

    async def _asset_serving_setup(self) -> None:
        if self.settings.is_development:
            await self._setup_dev_pipeline(self.app, self.server)
            await self._seed_samples()
        else:
            await _maybe_await(self._serve_static_assets(self.app))

    async def _seed_samples(self) -> None:
        # 示例数据只是开发便利，失败只记日志
        if self._sample_seeder is None:
            return
        try:
            result = await self._sample_seeder.ensure_sample_data(self.settings.SAMPLE_TEACHER_ID, self._sample_set)
        except Exception as e:  # noqa: BLE001
            result = SeedResult(SeedOutcome.FAILED, reason=f"{type(e).__name__}: {e}")
        self.report.sample_result = result

        if result.outcome is SeedOutcome.FAILED:
            logger.warning("sample data seeding failed: %s", result.reason)
        elif result.outcome is SeedOutcome.SEEDED:
            log(f"seeded {result.created} sample tasks for {self.settings.SAMPLE_TEACHER_ID}")

    async def _listening(self) -> None:
        await self._listen(self.server, self.settings.HOST, self.settings.PORT)
