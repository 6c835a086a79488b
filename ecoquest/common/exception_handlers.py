# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Any, Dict, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware import Middleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

DEFAULT_MESSAGE = "Internal Server Error"


def error_payload(exc: BaseException) -> Tuple[int, Dict[str, Any]]:
    """status 依次取 exc.status / exc.status_code，缺省 500；message 缺省 Internal Server Error"""
    status = getattr(exc, "status", None) or getattr(exc, "status_code", None) or 500
    message = getattr(exc, "message", None) or str(exc) or DEFAULT_MESSAGE
    try:
        status = int(status)
    except (TypeError, ValueError):
        status = 500
    # 异常走到这里一定是失败响应，声明成 2xx/3xx 之类的状态码不可信，统一按 500
    if not 400 <= status <= 599:
        status = 500
    return status, {"message": str(message)}


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    msg = first.get("msg", "")
    return f"invalid request: {loc}: {msg}" if loc else f"invalid request: {msg}"


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(status_code=422, content={"message": _validation_message(exc)})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # noqa: ARG001
    message = exc.detail if isinstance(exc.detail, str) and exc.detail else DEFAULT_MESSAGE
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


class ErrorResponseMiddleware:
    """全局兜底错误处理

    handler 抛出的任何异常：先给客户端返回 {"message": ...}，再继续向上抛，
    由 uvicorn 的错误日志记录（进程级故障通道）。
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def _send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, _send)
        except Exception as exc:
            if not response_started:
                status, body = error_payload(exc)
                response = JSONResponse(status_code=status, content=body)
                await response(scope, receive, send)
            raise


def install_error_handler(app: FastAPI) -> None:
    # 放在最内层，诊断中间件才能看到错误响应
    if any(m.cls is ErrorResponseMiddleware for m in app.user_middleware):
        raise RuntimeError("error handler already installed")
    app.user_middleware.append(Middleware(ErrorResponseMiddleware))
    # 框架自己处理的 422 / 404 / 405 也统一成 {"message": ...}
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
