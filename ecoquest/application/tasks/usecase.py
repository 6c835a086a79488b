# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ecoquest.common.errors import BadRequestError, ForbiddenError
from ecoquest.domain import models, schemas

_PUBLISHER_ROLES = (models.ROLE_ADMIN, models.ROLE_TEACHER)


class TaskUsecase:
    """老师发布的环保任务"""

    def list_tasks(self, db: Session, *, teacher_id: Optional[str] = None) -> schemas.TaskListResponse:
        stmt = select(models.Task).order_by(models.Task.id.asc())
        if teacher_id is not None:
            stmt = stmt.where(models.Task.teacher_id == teacher_id)
        tasks: List[models.Task] = list(db.scalars(stmt).all())
        return schemas.TaskListResponse(tasks=[schemas.TaskOut.model_validate(t) for t in tasks])

    def create_task(
        self,
        db: Session,
        *,
        user: models.User,
        req: schemas.TaskCreateRequest,
    ) -> schemas.TaskOut:
        if user.role not in _PUBLISHER_ROLES:
            raise ForbiddenError(code="TASK_FORBIDDEN", message="only teachers can publish tasks")

        if req.group_mode == "solo" and req.max_group_size is not None:
            raise BadRequestError(code="TASK_INVALID", message="solo tasks cannot set maxGroupSize")

        task = models.Task(
            teacher_id=user.username,
            title=req.title,
            description=req.description,
            max_points=req.max_points,
            proof_type=req.proof_type,
            group_mode=req.group_mode,
            max_group_size=req.max_group_size,
        )
        db.add(task)
        db.commit()
        db.refresh(task)
        return schemas.TaskOut.model_validate(task)
