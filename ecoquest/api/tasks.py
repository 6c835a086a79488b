# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ecoquest.api.deps import get_current_user, get_task_usecase
from ecoquest.application.tasks.usecase import TaskUsecase
from ecoquest.domain import models, schemas
from ecoquest.infra.db import get_db


router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=schemas.TaskListResponse)
def list_tasks(
    teacher_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    uc: TaskUsecase = Depends(get_task_usecase),
):
    return uc.list_tasks(db, teacher_id=teacher_id)


@router.post("", response_model=schemas.TaskOut, status_code=201)
def create_task(
    req: schemas.TaskCreateRequest,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
    uc: TaskUsecase = Depends(get_task_usecase),
):
    return uc.create_task(db, user=user, req=req)
