# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""通用基础设施（错误/日志/诊断中间件等）

约定：
- Router 不写业务逻辑：业务错误统一通过 AppError 抛出，由全局兜底错误处理转为 {"message": ...}
- /api 前缀的请求由诊断中间件输出一行日志，超长截断
"""

from __future__ import annotations
