# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""前端资源

- 开发环境：非 /api 请求转发到 Vite dev server，HMR 的 websocket 也一并桥接
- 生产环境：直接读构建产物目录，找不到文件时回落 index.html（前端路由）

两者都会注册一个 catch-all 路由，必须在所有 API 路由之后调用。
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Optional

import httpx
import websockets
from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse, JSONResponse, Response
from starlette.websockets import WebSocketState

from ecoquest.infra.config import settings
from ecoquest.infra.log import log

logger = logging.getLogger(__name__)

# 转发时不透传的 hop-by-hop 头
_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
    "content-encoding",
    "content-length",
    "host",
}

_PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _is_api_path(path: str, api_prefix: str) -> bool:
    return path == api_prefix or path.startswith(api_prefix.rstrip("/") + "/")


def _api_not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": "Not Found"})


def _ws_url(http_url: str) -> str:
    if http_url.startswith("https://"):
        return "wss://" + http_url[len("https://"):]
    if http_url.startswith("http://"):
        return "ws://" + http_url[len("http://"):]
    return http_url


async def _pipe_websocket(client: WebSocket, upstream: Any) -> None:
    """双向转发，任一端结束就收尾"""

    async def client_to_upstream() -> None:
        while True:
            message = await client.receive()
            if message["type"] == "websocket.disconnect":
                return
            if message.get("text") is not None:
                await upstream.send(message["text"])
            elif message.get("bytes") is not None:
                await upstream.send(message["bytes"])

    async def upstream_to_client() -> None:
        async for data in upstream:
            if isinstance(data, str):
                await client.send_text(data)
            else:
                await client.send_bytes(data)

    tasks = [asyncio.create_task(client_to_upstream()), asyncio.create_task(upstream_to_client())]
    done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
    for task in done:
        exc = task.exception()
        if exc is not None and not isinstance(exc, (WebSocketDisconnect, websockets.ConnectionClosed)):
            raise exc


async def setup_dev_pipeline(
    app: FastAPI,
    server: Any,
    *,
    dev_server_url: Optional[str] = None,
    api_prefix: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    target = (dev_server_url or settings.VITE_DEV_SERVER_URL).rstrip("/")
    ws_target = _ws_url(target)
    prefix = api_prefix or settings.API_PREFIX

    # 由 app 的 lifespan 在退出时关闭，见 close_dev_pipeline
    client = httpx.AsyncClient(base_url=target, timeout=httpx.Timeout(30.0, connect=5.0), transport=transport)
    app.state.vite_client = client
    app.state.server = server

    @app.api_route("/{full_path:path}", methods=_PROXY_METHODS, include_in_schema=False)
    async def vite_proxy(request: Request, full_path: str) -> Response:
        if _is_api_path(request.url.path, prefix):
            return _api_not_found()

        headers = {k: v for k, v in request.headers.items() if k.lower() not in _HOP_HEADERS}
        url = request.url.path + (f"?{request.url.query}" if request.url.query else "")
        try:
            upstream = await client.request(request.method, url, headers=headers, content=await request.body())
        except httpx.HTTPError as e:
            logger.warning("vite dev server unreachable: %s", e)
            return Response(
                content=f"Vite dev server is not reachable at {target}",
                status_code=502,
                media_type="text/plain",
            )

        out_headers = {k: v for k, v in upstream.headers.items() if k.lower() not in _HOP_HEADERS}
        return Response(content=upstream.content, status_code=upstream.status_code, headers=out_headers)

    # Vite HMR 走 websocket（子协议 vite-hmr）
    @app.websocket("/{full_path:path}")
    async def vite_hmr(websocket: WebSocket, full_path: str) -> None:
        if _is_api_path(websocket.url.path, prefix):
            await websocket.close()
            return

        url = ws_target + websocket.url.path + (f"?{websocket.url.query}" if websocket.url.query else "")
        subprotocols = websocket.scope.get("subprotocols") or []
        try:
            upstream = await websockets.connect(url, subprotocols=subprotocols or None)
        except (OSError, websockets.WebSocketException) as e:
            logger.warning("vite hmr unreachable: %s", e)
            await websocket.close(code=1011)
            return

        try:
            await websocket.accept(subprotocol=upstream.subprotocol)
            await _pipe_websocket(websocket, upstream)
        finally:
            await upstream.close()
        if websocket.application_state is WebSocketState.CONNECTED and websocket.client_state is WebSocketState.CONNECTED:
            await websocket.close()

    log(f"dev assets proxied to {target}", source="vite")


async def close_dev_pipeline(app: FastAPI) -> None:
    client = getattr(app.state, "vite_client", None)
    if client is not None:
        await client.aclose()


def serve_static_assets(
    app: FastAPI,
    *,
    static_dir: Optional[str] = None,
    api_prefix: Optional[str] = None,
) -> None:
    dist = os.path.abspath(static_dir or settings.STATIC_DIR)
    prefix = api_prefix or settings.API_PREFIX
    index_file = os.path.join(dist, "index.html")

    if not os.path.isdir(dist):
        raise FileNotFoundError(
            f"Could not find the build directory: {dist}, make sure to build the client first"
        )

    @app.get("/{full_path:path}", include_in_schema=False)
    async def static_assets(request: Request, full_path: str) -> Response:
        if _is_api_path(request.url.path, prefix):
            return _api_not_found()

        candidate = os.path.abspath(os.path.join(dist, full_path))
        inside = os.path.commonpath([dist, candidate]) == dist
        if full_path and inside and os.path.isfile(candidate):
            return FileResponse(candidate)

        if not os.path.isfile(index_file):
            return _api_not_found()
        return FileResponse(index_file)
