# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

import logging


"""统一日志出口

日志初始化由 ecoquest.common.logging.setup_logging() 负责。
这里仅返回一个命名 logger，以及按行输出的 log()。
"""


logger = logging.getLogger("ecoquest")


def log(message: str, source: str = "fastapi") -> None:
    logger.info(message, extra={"source": source})
