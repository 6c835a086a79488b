# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""启动播种

顺序固定：ensure_schema -> ensure_admin_account -> ensure_sample_data（仅开发环境）。
每一步都可重复执行，不会产生重复数据。
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from sqlalchemy.exc import IntegrityError
from starlette.concurrency import run_in_threadpool

from ecoquest.application.auth.passwords import hash_password
from ecoquest.domain.models import ROLE_ADMIN

logger = logging.getLogger(__name__)

SAMPLE_TASKS: List[Dict[str, Any]] = [
    {
        "title": "Recycle Drive",
        "description": "Collect and sort recyclables.",
        "max_points": 8,
        "proof_type": "photo",
        "group_mode": "group",
        "max_group_size": 4,
    },
    {
        "title": "Plant a Tree",
        "description": "Plant a sapling in your neighborhood.",
        "max_points": 10,
        "proof_type": "photo",
        "group_mode": "solo",
    },
]


class SeedStore(Protocol):
    def ensure_schema(self) -> None: ...

    def find_admin(self, username: str) -> Optional[Any]: ...

    def create_admin(self, username: str, password_hash: str, role: str = ROLE_ADMIN) -> Any: ...

    def list_records_by_owner(self, owner_id: str) -> Any: ...

    def create_record(self, owner_id: str, payload: Dict[str, Any]) -> Any: ...


class SeedState(str, enum.Enum):
    NOT_STARTED = "not_started"
    SCHEMA_ENSURED = "schema_ensured"
    ADMIN_ENSURED = "admin_ensured"
    SAMPLES_ENSURED = "samples_ensured"
    SAMPLES_SKIPPED = "samples_skipped"


class SeedOutcome(str, enum.Enum):
    SEEDED = "seeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class SeedResult:
    outcome: SeedOutcome
    created: int = 0
    reason: Optional[str] = None


class SeedOrderError(RuntimeError):
    """播种步骤调用顺序错误"""


class SeedCoordinator:
    def __init__(
        self,
        store: SeedStore,
        *,
        admin_username: str,
        admin_password: str,
        development: bool,
    ) -> None:
        self._store = store
        self._admin_username = admin_username
        self._admin_password = admin_password
        self._development = development
        self.state = SeedState.NOT_STARTED

    async def ensure_schema(self) -> None:
        await run_in_threadpool(self._store.ensure_schema)
        if self.state is SeedState.NOT_STARTED:
            self.state = SeedState.SCHEMA_ENSURED

    async def ensure_admin_account(self) -> bool:
        """返回 True 表示本次新建了管理员"""
        if self.state is SeedState.NOT_STARTED:
            raise SeedOrderError("ensure_schema must run before ensure_admin_account")

        created = False
        existing = await run_in_threadpool(self._store.find_admin, self._admin_username)
        if existing is None:
            password_hash = hash_password(self._admin_password)
            try:
                await run_in_threadpool(
                    self._store.create_admin, self._admin_username, password_hash, ROLE_ADMIN
                )
                created = True
                logger.info("admin account created: %s", self._admin_username)
            except IntegrityError:
                # 并发启动时另一个进程先建好了
                logger.info("admin account already exists: %s", self._admin_username)

        if self.state is SeedState.SCHEMA_ENSURED:
            self.state = SeedState.ADMIN_ENSURED
        return created

    async def ensure_sample_data(self, owner_id: str, sample_set: Sequence[Dict[str, Any]]) -> SeedResult:
        if self.state in (SeedState.NOT_STARTED, SeedState.SCHEMA_ENSURED):
            raise SeedOrderError("ensure_admin_account must run before ensure_sample_data")
        if self.state in (SeedState.SAMPLES_ENSURED, SeedState.SAMPLES_SKIPPED):
            return SeedResult(SeedOutcome.SKIPPED, reason="already handled")

        if not self._development:
            self.state = SeedState.SAMPLES_SKIPPED
            return SeedResult(SeedOutcome.SKIPPED, reason="not in development")

        try:
            existing = await run_in_threadpool(self._store.list_records_by_owner, owner_id)
            if not isinstance(existing, (list, tuple)):
                raise TypeError(f"unexpected listing result: {type(existing).__name__}")
            if len(existing) > 0:
                self.state = SeedState.SAMPLES_SKIPPED
                return SeedResult(SeedOutcome.SKIPPED, reason=f"{owner_id} already has {len(existing)} records")

            created = 0
            for payload in sample_set:
                await run_in_threadpool(self._store.create_record, owner_id, dict(payload))
                created += 1
        except Exception as e:  # noqa: BLE001
            self.state = SeedState.SAMPLES_SKIPPED
            return SeedResult(SeedOutcome.FAILED, reason=f"{type(e).__name__}: {e}")

        self.state = SeedState.SAMPLES_ENSURED
        return SeedResult(SeedOutcome.SEEDED, created=created)
