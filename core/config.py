"""
配置文件 - 项目配置管理
"""
import json
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ONE_YEAR_IN_SECONDS = 365 * 24 * 60 * 60


class AwsSettings(BaseModel):
    region: Optional[str] = None
    # LocalStack / custom endpoints; applies to DynamoDB, SQS and API Gateway control plane
    endpoint_url: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None
    # botocore transport retries, not application-level redelivery
    max_retry_attempts: int = 2
    connect_timeout: int = 5
    read_timeout: int = 10


class Settings(BaseSettings):
    """项目配置"""

    # 基础配置
    PROJECT_NAME: str = Field(default="WebSocket Relay", env=["PROJECT_NAME", "APP_NAME"])
    VERSION: str = Field(default="1.0.0", env=["VERSION", "APP_VERSION"])
    DEBUG: bool = Field(default=False, env="DEBUG")
    ENVIRONMENT: str = Field(default="development", env="ENVIRONMENT")

    # 连接注册表（DynamoDB 表名）；为空时 auto 模式回退到内存实现
    TABLE_NAME: str = Field(default="", env="TABLE_NAME")
    REGISTRY_BACKEND: str = Field(
        default="auto", env="REGISTRY_BACKEND",
        description="注册表实现: auto | dynamodb | memory",
    )
    CONNECTION_TTL_SECONDS: int = Field(default=ONE_YEAR_IN_SECONDS, env="CONNECTION_TTL_SECONDS")

    # 推送通道（API Gateway Management API），wss:// 在使用前转换为 https://
    WEBSOCKET_ENDPOINT: Optional[str] = Field(default=None, env="WEBSOCKET_ENDPOINT")
    FANOUT_MAX_CONCURRENCY: int = Field(default=50, env="FANOUT_MAX_CONCURRENCY")

    # 广播队列（SQS）；为空时由进程内发布器直接扇出
    QUEUE_URL: Optional[str] = Field(default=None, env="QUEUE_URL")

    # $connect 授权
    AUTH_TOKEN: str = Field(default="allow-ws-connection", env="AUTH_TOKEN")
    AUTH_PRINCIPAL_ID: str = Field(default="user", env="AUTH_PRINCIPAL_ID")
    AUTH_CONTEXT: dict[str, Any] = Field(
        default_factory=lambda: {"userId": "123456", "userRole": "standard"},
        env="AUTH_CONTEXT",
    )

    # CORS配置（运维 HTTP API）
    CORS_ORIGINS: list = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        env="CORS_ORIGINS"
    )

    aws: AwsSettings = Field(default_factory=AwsSettings)

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )

    @model_validator(mode="after")
    def _validate_registry_backend(self):
        backend = (self.REGISTRY_BACKEND or "auto").lower()
        if backend not in {"auto", "dynamodb", "memory"}:
            raise ValueError(f"REGISTRY_BACKEND 无效: {self.REGISTRY_BACKEND}")
        if backend == "dynamodb" and not self.TABLE_NAME:
            raise ValueError("REGISTRY_BACKEND=dynamodb 时必须设置 TABLE_NAME")
        self.REGISTRY_BACKEND = backend
        return self

    @field_validator("FANOUT_MAX_CONCURRENCY")
    @classmethod
    def _validate_fanout(cls, v: int) -> int:
        if v < 1:
            raise ValueError("FANOUT_MAX_CONCURRENCY 必须大于等于 1")
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """允许 JSON 字符串或逗号分隔字符串两种格式。"""
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                try:
                    arr = json.loads(s)
                    if isinstance(arr, list):
                        return arr
                except ValueError:
                    pass
            if "," in s:
                return [item.strip() for item in s.split(",") if item.strip()]
            return [s]
        return v

    @property
    def use_dynamodb(self) -> bool:
        if self.REGISTRY_BACKEND == "dynamodb":
            return True
        return self.REGISTRY_BACKEND == "auto" and bool(self.TABLE_NAME)


settings = Settings()
