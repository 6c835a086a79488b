# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import time
from typing import Optional

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ecoquest.infra.db import Base

ROLE_ADMIN = "admin"
ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"


def _ts() -> int:
    return int(time.time())


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ROLE_STUDENT,
        doc="admin / teacher / student",
    )

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=_ts)


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    max_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    proof_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="photo",
        doc="提交凭证类型：photo / text",
    )
    group_mode: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="solo",
        doc="solo / group",
    )
    max_group_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=_ts)
