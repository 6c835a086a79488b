# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import socket
from typing import List, Optional

import uvicorn
from fastapi import FastAPI

from ecoquest.infra.log import log


class AppServer(uvicorn.Server):
    """uvicorn Server，启动成功后输出一行 serving on port N"""

    def __init__(self, config: uvicorn.Config) -> None:
        super().__init__(config)
        self.port: Optional[int] = None

    async def startup(self, sockets: Optional[List[socket.socket]] = None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            log(f"serving on port {self.port if self.port is not None else self.config.port}")


def build_server(app: FastAPI) -> AppServer:
    config = uvicorn.Config(
        app,
        log_config=None,
        access_log=False,
        lifespan="on",
    )
    return AppServer(config)


def bind_socket(host: str, port: int) -> socket.socket:
    """监听前自己绑定 socket，打开地址/端口复用，进程重启不会撞上 TIME_WAIT"""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if hasattr(socket, "SO_REUSEPORT"):
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
        sock.bind((host, port))
        sock.set_inheritable(True)
    except OSError:
        sock.close()
        raise
    return sock


async def listen(server: AppServer, host: str, port: int) -> None:
    sock = bind_socket(host, port)
    server.config.host = host
    server.config.port = port
    server.port = sock.getsockname()[1]
    try:
        await server.serve(sockets=[sock])
    finally:
        sock.close()
