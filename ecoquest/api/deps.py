# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ecoquest.application.auth.token_service import TokenService
from ecoquest.application.auth.usecase import AuthUsecase
from ecoquest.application.tasks.usecase import TaskUsecase
from ecoquest.common.errors import UnauthorizedError
from ecoquest.domain import models
from ecoquest.infra.db import get_db

_token_singleton = TokenService()
_auth_uc_singleton = AuthUsecase(_token_singleton)
_task_uc_singleton = TaskUsecase()


def get_token_service() -> TokenService:
    return _token_singleton


def get_auth_usecase() -> AuthUsecase:
    return _auth_uc_singleton


def get_task_usecase() -> TaskUsecase:
    return _task_uc_singleton


_bearer = HTTPBearer(auto_error=False)


def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    tokens: TokenService = Depends(get_token_service),
) -> models.User:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(code="TOKEN_MISSING", message="missing access token")

    payload = tokens.decode_access_token(credentials.credentials)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError) as e:
        raise UnauthorizedError(code="TOKEN_INVALID", message="invalid access token") from e

    user = db.get(models.User, user_id)
    if user is None:
        raise UnauthorizedError(code="TOKEN_USER_NOT_FOUND", message="user not found")
    return user
