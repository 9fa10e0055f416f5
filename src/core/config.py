"""Application configuration."""

from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, Field, HttpUrl, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FETCH_INTERVAL = 3600  # 1 小时
DEFAULT_PAGE_SIZE = 8


def _int_or(default: int):
    """构造宽松整数解析器：无法解析或非正数时回退到默认值。"""

    def parse(v: Any) -> int:
        try:
            value = int(v)
        except (TypeError, ValueError):
            return default
        return value if value > 0 else default

    return parse


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PHOTOJOURNALISM_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "photojournalism"
    PROJECT_URL: str = "http://github.com/dpapathanasiou/photojournalism"
    VERSION: str = "0.1.0"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    SERVER: str = "127.0.0.1:8000"
    STATIC_DIR: str = "static"

    @computed_field
    @property
    def server_host(self) -> str:
        host, _, _ = self.SERVER.rpartition(":")
        return host or "127.0.0.1"

    @computed_field
    @property
    def server_port(self) -> int:
        _, _, port = self.SERVER.rpartition(":")
        return int(port) if port.isdigit() else 8000

    # Sentry
    SENTRY_DSN: HttpUrl | None = None

    # Feeds
    FEED_LIST: str = "feeds.txt"
    FETCH_INTERVAL: Annotated[
        int, BeforeValidator(_int_or(DEFAULT_FETCH_INTERVAL))
    ] = DEFAULT_FETCH_INTERVAL
    HTTP_TIMEOUT_SEC: float = 30.0
    HTTP_CACHE_ENABLED: bool = True
    CACHE_LOCK_TIMEOUT_SEC: float = 1.0

    # Pagination
    PAGE_SIZE: Annotated[int, BeforeValidator(_int_or(DEFAULT_PAGE_SIZE))] = (
        DEFAULT_PAGE_SIZE
    )
    SHUFFLE_SEED: int = Field(default=1, ge=0, lt=2**64)

    @computed_field
    @property
    def user_agent(self) -> str:
        """抓取请求使用的 User-Agent。"""
        return f"{self.PROJECT_NAME}/{self.VERSION} +{self.PROJECT_URL}"


settings = Settings()
