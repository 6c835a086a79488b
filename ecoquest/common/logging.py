# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging

DEFAULT_SOURCE = "fastapi"


class SourceFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        if not getattr(record, "source", None):
            setattr(record, "source", DEFAULT_SOURCE)
        return True


def setup_logging(level: int = logging.INFO) -> None:
    """初始化全局日志"""

    root = logging.getLogger()
    root.setLevel(level)

    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(source)s] %(message)s",
            datefmt="%I:%M:%S %p",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # 给现有 handler 全部加 filter
    for h in root.handlers:
        has_filter = any(isinstance(f, SourceFilter) for f in getattr(h, "filters", []))
        if not has_filter:
            h.addFilter(SourceFilter())
