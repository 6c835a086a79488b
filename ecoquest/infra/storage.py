# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session, sessionmaker

from ecoquest.domain import models
from ecoquest.infra.db import Base


class DbStorage:
    """基于 SQLAlchemy 的持久化实现

    启动播种只依赖这里的五个方法（ensure_schema / find_admin / create_admin /
    list_records_by_owner / create_record），record 即老师发布的任务。
    """

    def __init__(self, engine: Engine, session_factory: sessionmaker[Session]) -> None:
        self._engine = engine
        self._session_factory = session_factory

    def ensure_schema(self) -> None:
        # create_all 只建缺失的表，重复调用无副作用
        Base.metadata.create_all(bind=self._engine)

    # ---------- users ----------

    def find_admin(self, username: str) -> Optional[models.User]:
        with self._session_factory() as db:
            stmt = select(models.User).where(models.User.username == username)
            return db.scalars(stmt).first()

    def create_admin(self, username: str, password_hash: str, role: str = models.ROLE_ADMIN) -> models.User:
        with self._session_factory() as db:
            user = models.User(username=username, password_hash=password_hash, role=role)
            db.add(user)
            db.commit()
            db.refresh(user)
            return user

    # ---------- tasks ----------

    def list_records_by_owner(self, owner_id: str) -> List[models.Task]:
        with self._session_factory() as db:
            stmt = (
                select(models.Task)
                .where(models.Task.teacher_id == owner_id)
                .order_by(models.Task.id.asc())
            )
            return list(db.scalars(stmt).all())

    def create_record(self, owner_id: str, payload: Dict[str, Any]) -> models.Task:
        with self._session_factory() as db:
            task = models.Task(teacher_id=owner_id, **payload)
            db.add(task)
            db.commit()
            db.refresh(task)
            return task
