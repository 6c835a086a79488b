# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """argon2id 编码串（参数、盐都在串里）"""
    return _hasher.hash(password)


def verify_password(password: str, stored: str) -> bool:
    # 密码不匹配 / 存储的哈希格式不对，都按校验失败处理
    try:
        return _hasher.verify(stored, password)
    except (VerificationError, InvalidHashError):
        return False
