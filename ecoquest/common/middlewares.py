# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ecoquest.infra.log import log

ELLIPSIS = "…"
_MISSING = object()


def _now_ms() -> int:
    return time.monotonic_ns() // 1_000_000


def truncate_line(line: str, limit: int = 80) -> str:
    """超过 limit 时截成 limit-1 个字符 + 一个省略号"""
    if len(line) > limit:
        return line[: limit - 1] + ELLIPSIS
    return line


@dataclass
class RequestTrace:
    """单次请求的诊断记录，只属于一个请求"""
    method: str
    path: str
    started_at: int
    status_code: int = 0
    captured_body: Any = _MISSING

    @property
    def has_body(self) -> bool:
        return self.captured_body is not _MISSING and self.captured_body is not None

    def format_line(self, finished_at: int, limit: int = 80) -> str:
        duration = finished_at - self.started_at
        line = f"{self.method} {self.path} {self.status_code} in {duration}ms"
        if self.has_body:
            line += f" :: {json.dumps(self.captured_body, separators=(',', ':'), ensure_ascii=False)}"
        return truncate_line(line, limit)


@dataclass
class ResponseInterceptor:
    """包一层 ASGI send：记录状态码、只读地收集 JSON 响应体，消息原样转发"""
    send: Send
    trace: RequestTrace
    on_complete: Callable[[RequestTrace], None]
    _chunks: List[bytes] = field(default_factory=list)
    _is_json: bool = False
    _completed: bool = False

    async def __call__(self, message: Message) -> None:
        try:
            self._observe(message)
        except Exception:  # noqa: BLE001
            # 采集失败不能影响响应
            self._is_json = False
            self._chunks.clear()
        await self.send(message)
        if _is_final_body(message) and not self._completed:
            self._completed = True
            self.on_complete(self.trace)

    def _observe(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.trace.status_code = message["status"]
            content_type = Headers(raw=message.get("headers", [])).get("content-type", "")
            self._is_json = content_type.split(";")[0].strip().lower() == "application/json"
        elif message["type"] == "http.response.body":
            if self._is_json:
                self._chunks.append(bytes(message.get("body", b"")))
            if _is_final_body(message):
                self.trace.captured_body = self._decode()

    def _decode(self) -> Any:
        if not self._is_json or not self._chunks:
            return _MISSING
        try:
            return json.loads(b"".join(self._chunks).decode("utf-8"))
        except (ValueError, RecursionError):
            # 非法 / 嵌套过深的 JSON 都当作没有响应体
            return _MISSING
        finally:
            self._chunks.clear()


def _is_final_body(message: Message) -> bool:
    return message["type"] == "http.response.body" and not message.get("more_body", False)


class DiagnosticMiddleware:
    """API 请求诊断日志：一次请求一行

    GET /api/tasks 200 in 12ms :: {"tasks":[]}
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        api_prefix: str = "/api",
        limit: int = 80,
        sink: Callable[[str], None] = log,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.app = app
        self.api_prefix = api_prefix
        self.limit = limit
        self.sink = sink
        self.clock = clock

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        # 只有 API 请求打日志，其余请求不拦截响应
        if scope["type"] != "http" or not scope["path"].startswith(self.api_prefix):
            await self.app(scope, receive, send)
            return

        trace = RequestTrace(
            method=scope["method"],
            path=scope["path"],
            started_at=self.clock(),
        )
        interceptor = ResponseInterceptor(send=send, trace=trace, on_complete=self._finish)
        await self.app(scope, receive, interceptor)

    def _finish(self, trace: RequestTrace) -> None:
        self.sink(trace.format_line(self.clock(), self.limit))
