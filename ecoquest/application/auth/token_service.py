# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict

import jwt

from ecoquest.common.errors import UnauthorizedError
from ecoquest.infra.config import settings


@dataclass
class AccessToken:
    access_token: str
    expires_in: int


class TokenService:
    def __init__(self, secret: str | None = None, expire_minutes: int | None = None) -> None:
        self._jwt_secret = secret or settings.JWT_SECRET_KEY
        self._jwt_alg = "HS256"
        self._expire_minutes = int(expire_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def make_access_token(self, *, user_id: int, username: str, role: str) -> AccessToken:
        now = int(time.time())
        access_exp = now + self._expire_minutes * 60

        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "username": username,
            "role": role,
            "type": "access",
            "iat": now,
            "exp": access_exp,
        }
        access = jwt.encode(payload, self._jwt_secret, algorithm=self._jwt_alg)
        return AccessToken(access_token=access, expires_in=max(access_exp - now, 0))

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        try:
            payload = jwt.decode(token, self._jwt_secret, algorithms=[self._jwt_alg])
        except jwt.PyJWTError as e:
            raise UnauthorizedError(code="TOKEN_INVALID", message="invalid access token") from e

        if payload.get("type") != "access":
            raise UnauthorizedError(code="TOKEN_INVALID", message="invalid access token")
        return payload
