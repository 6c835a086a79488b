# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class AppError(Exception):
    """异常统一：全局错误处理读取 status_code / message"""
    code: str
    message: str
    status_code: int = 400


class BadRequestError(AppError):
    def __init__(self, code: str = "BAD_REQUEST", message: str = "bad request") -> None:
        super().__init__(code=code, message=message, status_code=400)


class NotFoundError(AppError):
    def __init__(self, code: str = "NOT_FOUND", message: str = "not found") -> None:
        super().__init__(code=code, message=message, status_code=404)


class UnauthorizedError(AppError):
    def __init__(self, code: str = "UNAUTHORIZED", message: str = "unauthorized") -> None:
        super().__init__(code=code, message=message, status_code=401)


class ForbiddenError(AppError):
    def __init__(self, code: str = "FORBIDDEN", message: str = "forbidden") -> None:
        super().__init__(code=code, message=message, status_code=403)
