# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """全局配置，从 .env / 环境变量读取"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 运行环境
    ENV: str = Field(
        "development",
        description="运行环境: development / production",
        validation_alias=AliasChoices("ENV", "NODE_ENV", "APP_ENV"),
    )

    # 监听地址
    HOST: str = Field(
        "0.0.0.0",
        description="监听地址，默认所有网卡",
        validation_alias=AliasChoices("HOST", "host"),
    )
    PORT: int = Field(
        5000,
        description="监听端口（API 与前端共用）",
        validation_alias=AliasChoices("PORT", "port"),
    )

    # 数据库
    DATABASE_URL: str = Field(
        "sqlite:///./data/ecoquest.db",
        description="数据库连接串，例如 sqlite:///./data/ecoquest.db",
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
    )

    # 日志
    API_PREFIX: str = Field(
        "/api",
        description="API 路径前缀，仅该前缀下的请求会打印诊断日志",
        validation_alias=AliasChoices("API_PREFIX", "api_prefix"),
    )
    LOG_LINE_LIMIT: int = Field(
        80,
        description="单行诊断日志最大长度（超出截断）",
        validation_alias=AliasChoices("LOG_LINE_LIMIT", "log_line_limit"),
    )

    # 前端资源
    STATIC_DIR: str = Field(
        "dist/public",
        description="前端构建产物目录（生产环境）",
        validation_alias=AliasChoices("STATIC_DIR", "static_dir"),
    )
    VITE_DEV_SERVER_URL: str = Field(
        "http://127.0.0.1:5173",
        description="开发环境 Vite dev server 地址",
        validation_alias=AliasChoices("VITE_DEV_SERVER_URL", "vite_dev_server_url"),
    )

    # 默认管理员
    ADMIN_USERNAME: str = Field(
        "admin",
        description="默认管理员账号",
        validation_alias=AliasChoices("ADMIN_USERNAME", "admin_username"),
    )
    ADMIN_PASSWORD: str = Field(
        "admin123",
        description="默认管理员密码（生产务必更换）",
        validation_alias=AliasChoices("ADMIN_PASSWORD", "admin_password"),
    )

    # 开发环境示例数据
    SAMPLE_TEACHER_ID: str = Field(
        "test_teacher",
        description="示例任务所属老师",
        validation_alias=AliasChoices("SAMPLE_TEACHER_ID", "sample_teacher_id"),
    )

    # Auth
    JWT_SECRET_KEY: str = Field(
        "dev-secret-change-me",
        description="JWT 签名密钥（生产务必更换）",
        validation_alias=AliasChoices("JWT_SECRET_KEY", "jwt_secret_key"),
    )
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        60,
        description="access_token 有效期（分钟）",
        validation_alias=AliasChoices("ACCESS_TOKEN_EXPIRE_MINUTES", "access_token_expire_minutes"),
    )

    @property
    def is_development(self) -> bool:
        return self.ENV.strip().lower() in ("development", "dev")


settings = Settings()
