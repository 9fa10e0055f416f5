"""Feed 加载器。

抓取 feed URL -> 解码 -> 提取照片，结果统一封装为 FeedLoadResult。
支持基于 ETag / Last-Modified 的条件请求：服务端返回 304 时复用上次的响应体。
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum

import httpx
from loguru import logger

from src.core.config import settings
from src.modules.photos.application.extractor import extract_all
from src.modules.photos.domain.entities import Photo
from src.modules.photos.domain.exceptions import FeedDecodeError, FeedFetchError
from src.modules.photos.infrastructure.decoder import decode_feed


class LoadStatus(str, Enum):
    """加载状态枚举。"""

    SUCCESS = "success"
    EMPTY = "empty"  # 成功但没有照片
    FAILED = "failed"


@dataclass
class FeedLoadResult:
    """加载结果封装。"""

    status: LoadStatus
    photos: list[Photo] = field(default_factory=list)
    items_count: int = 0
    error_message: str | None = None
    duration_ms: int = 0

    @property
    def is_success(self) -> bool:
        """是否成功（包含无照片的成功）。"""
        return self.status in (LoadStatus.SUCCESS, LoadStatus.EMPTY)

    @classmethod
    def success(
        cls, photos: list[Photo], items_count: int, duration_ms: int = 0
    ) -> "FeedLoadResult":
        """创建成功结果。"""
        status = LoadStatus.SUCCESS if photos else LoadStatus.EMPTY
        return cls(
            status=status,
            photos=photos,
            items_count=items_count,
            duration_ms=duration_ms,
        )

    @classmethod
    def failed(cls, error_message: str, duration_ms: int = 0) -> "FeedLoadResult":
        """创建失败结果。"""
        return cls(
            status=LoadStatus.FAILED,
            error_message=error_message,
            duration_ms=duration_ms,
        )


@dataclass
class CachedResponse:
    """条件请求所需的校验信息及上次的响应体。"""

    body: bytes
    etag: str | None = None
    last_modified: str | None = None

    def conditional_headers(self) -> dict[str, str]:
        headers = {}
        if self.etag:
            headers["If-None-Match"] = self.etag
        if self.last_modified:
            headers["If-Modified-Since"] = self.last_modified
        return headers


class FeedLoader:
    """把 feed URL 变成照片列表。

    网络与解码失败都不会抛出，而是返回 FAILED 结果，由调用方决定如何处理。
    """

    ACCEPT = "application/rss+xml, application/atom+xml, application/xml, text/xml, */*"

    def __init__(
        self,
        timeout: float | None = None,
        user_agent: str | None = None,
        use_cache: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """初始化加载器。

        Args:
            timeout: 请求超时秒数，默认使用配置中的 HTTP_TIMEOUT_SEC
            user_agent: 默认为 "<项目名>/<版本> +<项目主页>"
            use_cache: 是否启用条件请求缓存，默认使用 HTTP_CACHE_ENABLED
            transport: 自定义 httpx 传输层（测试用）
        """
        self.timeout = settings.HTTP_TIMEOUT_SEC if timeout is None else timeout
        self.user_agent = user_agent or settings.user_agent
        self.use_cache = settings.HTTP_CACHE_ENABLED if use_cache is None else use_cache
        self._transport = transport
        self._responses: dict[str, CachedResponse] = {}

    async def load(self, feed_id: str) -> FeedLoadResult:
        """抓取并提取单个 feed。"""
        start_time = time.time()

        try:
            body = await self.fetch(feed_id)
            photos, items_count = await asyncio.to_thread(self._extract, body)
        except (FeedFetchError, FeedDecodeError) as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.warning(f"Could not load feed '{feed_id}': {e.message}")
            return FeedLoadResult.failed(e.message, duration_ms=duration_ms)

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Feed '{feed_id}': {items_count} items, {len(photos)} with photos"
        )
        return FeedLoadResult.success(
            photos=photos, items_count=items_count, duration_ms=duration_ms
        )

    async def fetch(self, feed_id: str) -> bytes:
        """获取 feed 原始字节。

        Raises:
            FeedFetchError: 超时、连接失败或非 2xx/304 响应
        """
        headers = {"User-Agent": self.user_agent, "Accept": self.ACCEPT}
        cached = self._responses.get(feed_id) if self.use_cache else None
        if cached is not None:
            headers.update(cached.conditional_headers())

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(feed_id, headers=headers)

                if response.status_code == httpx.codes.NOT_MODIFIED and cached:
                    logger.debug(f"Feed not modified, reusing cached body: {feed_id}")
                    return cached.body

                response.raise_for_status()
                body = response.content

        except httpx.TimeoutException as e:
            raise FeedFetchError(feed_id, f"Timeout: {e}") from e
        except httpx.HTTPStatusError as e:
            raise FeedFetchError(feed_id, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FeedFetchError(feed_id, f"Error: {e}") from e

        if self.use_cache:
            etag = response.headers.get("ETag")
            last_modified = response.headers.get("Last-Modified")
            if etag or last_modified:
                self._responses[feed_id] = CachedResponse(
                    body=body, etag=etag, last_modified=last_modified
                )

        return body

    @staticmethod
    def _extract(body: bytes) -> tuple[list[Photo], int]:
        items = decode_feed(body)
        return extract_all(items), len(items)
