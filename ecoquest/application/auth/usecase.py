# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ecoquest.application.auth.passwords import verify_password
from ecoquest.application.auth.token_service import TokenService
from ecoquest.common.errors import UnauthorizedError
from ecoquest.domain import models, schemas


class AuthUsecase:
    def __init__(self, token_service: TokenService) -> None:
        self._tokens = token_service

    def login(self, db: Session, *, username: str, password: str) -> schemas.TokenResponse:
        user = db.scalars(select(models.User).where(models.User.username == username)).first()
        # 用户不存在与密码错误返回同一个错误
        if user is None or not verify_password(password, user.password_hash):
            raise UnauthorizedError(code="LOGIN_FAILED", message="invalid username or password")

        issued = self._tokens.make_access_token(user_id=user.id, username=user.username, role=user.role)
        return schemas.TokenResponse(
            access_token=issued.access_token,
            expires_in=issued.expires_in,
            role=user.role,
        )
