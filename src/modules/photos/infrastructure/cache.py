"""Feed 照片的内存缓存。

feed id（源 URL）-> 照片列表。写入按 feed 整体替换，读取时在一次加锁内
汇总出快照。锁只覆盖一次替换或一次复制，不跨越网络 I/O 或 HTML 解析。
"""

import threading
from dataclasses import dataclass, field

from loguru import logger

from src.core.config import settings
from src.modules.photos.domain.entities import Photo


@dataclass(frozen=True)
class FeedSnapshot:
    """某一时刻的缓存汇总。"""

    photos: list[Photo] = field(default_factory=list)
    feed_count: int = 0
    photo_count: int = 0


class FeedCache:
    """并发安全的 feed -> 照片列表映射。

    在启动时显式创建，并同时交给刷新器（写）和查询服务（读）。
    获取锁最多阻塞调用线程 lock_timeout 秒，不要在事件循环线程上直接调用。
    """

    def __init__(self, lock_timeout: float | None = None):
        """初始化缓存。

        Args:
            lock_timeout: 获取锁的超时秒数，默认使用配置中的 CACHE_LOCK_TIMEOUT_SEC
        """
        self._feeds: dict[str, list[Photo]] = {}
        self._lock = threading.Lock()
        self._lock_timeout = (
            settings.CACHE_LOCK_TIMEOUT_SEC if lock_timeout is None else lock_timeout
        )

    def replace(self, feed_id: str, photos: list[Photo]) -> bool:
        """整体替换某个 feed 的照片列表。

        Returns:
            写入成功返回 True；拿不到锁时记录日志并跳过，返回 False
        """
        entry = [photo for photo in photos if photo.is_valid]
        if not self._lock.acquire(timeout=self._lock_timeout):
            logger.error(f"Feed cache write skipped, could not obtain lock: {feed_id}")
            return False
        try:
            self._feeds[feed_id] = entry
        finally:
            self._lock.release()
        return True

    def snapshot(self) -> FeedSnapshot:
        """在一次加锁内复制出所有照片及计数。

        顺序：feed 首次写入的顺序，其次是 feed 内条目顺序。
        拿不到锁时记录日志并返回空快照。
        """
        if not self._lock.acquire(timeout=self._lock_timeout):
            logger.error("Feed cache read skipped, could not obtain lock")
            return FeedSnapshot()
        try:
            photos = [photo for entry in self._feeds.values() for photo in entry]
            feed_count = len(self._feeds)
        finally:
            self._lock.release()
        return FeedSnapshot(
            photos=photos, feed_count=feed_count, photo_count=len(photos)
        )

    def counts(self) -> tuple[int, int]:
        """(feed 数, 照片总数)。"""
        if not self._lock.acquire(timeout=self._lock_timeout):
            logger.error("Feed cache count skipped, could not obtain lock")
            return 0, 0
        try:
            return len(self._feeds), sum(len(entry) for entry in self._feeds.values())
        finally:
            self._lock.release()

    def photos_for(self, feed_id: str) -> list[Photo] | None:
        """单个 feed 的照片列表副本；尚未成功抓取过时返回 None。"""
        if not self._lock.acquire(timeout=self._lock_timeout):
            logger.error(f"Feed cache read skipped, could not obtain lock: {feed_id}")
            return None
        try:
            entry = self._feeds.get(feed_id)
            return list(entry) if entry is not None else None
        finally:
            self._lock.release()
