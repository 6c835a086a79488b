# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""
领域层：

- models: ORM 实体（User / Task）
- schemas: Pydantic 请求/响应模型
- catalog: 内置环保小游戏目录
"""
from . import catalog, models, schemas  # noqa: F401

__all__ = ["catalog", "models", "schemas"]
