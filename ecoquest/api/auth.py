# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ecoquest.api.deps import get_auth_usecase
from ecoquest.application.auth.usecase import AuthUsecase
from ecoquest.domain import schemas
from ecoquest.infra.db import get_db


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=schemas.TokenResponse)
def login(
    req: schemas.LoginRequest,
    db: Session = Depends(get_db),
    uc: AuthUsecase = Depends(get_auth_usecase),
):
    return uc.login(db, username=req.username, password=req.password)
