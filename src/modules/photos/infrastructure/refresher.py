"""后台刷新器。

定时派发抓取轮次：每一轮为每个 feed 创建一个独立任务，任务完成后各自
写入缓存。派发后不等待本轮完成，慢 feed 可能与下一轮的抓取重叠。
"""

import asyncio
from collections.abc import Iterable

from loguru import logger

from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.modules.photos.domain.ports import PhotoLoader
from src.modules.photos.infrastructure.cache import FeedCache


class BackgroundRefresher:
    """按固定间隔刷新所有 feed。

    每个 feed 的状态流转：IDLE -> FETCHING -> SUCCESS（替换缓存）
    或 FAILURE（记录日志，保留旧数据）-> IDLE。
    """

    def __init__(
        self,
        feed_ids: Iterable[str],
        cache: FeedCache,
        loader: PhotoLoader,
        interval: float | None = None,
    ):
        """初始化刷新器。

        Args:
            feed_ids: 要刷新的 feed URL
            cache: 写入目标
            loader: feed -> 照片
            interval: 两轮之间的秒数，默认使用配置中的 FETCH_INTERVAL
        """
        self.feed_ids = list(feed_ids)
        self.cache = cache
        self.loader = loader
        self.interval = settings.FETCH_INTERVAL if interval is None else interval
        self.rounds = 0
        self._in_flight: set[asyncio.Task] = set()
        self._timer: asyncio.Task | None = None

    @property
    def in_flight(self) -> int:
        """尚未完成的单 feed 任务数（可能跨越多轮）。"""
        return len(self._in_flight)

    async def start(self) -> None:
        """立即派发第一轮，之后每隔 interval 秒派发一轮，直到被取消。"""
        logger.info(
            f"Fetching {len(self.feed_ids)} RSS feeds every {self.interval} seconds"
        )
        while True:
            self.dispatch_round()
            await asyncio.sleep(self.interval)

    def run_in_background(self) -> asyncio.Task:
        """在当前事件循环中启动定时任务。"""
        self._timer = asyncio.create_task(self.start(), name="feed-refresher")
        return self._timer

    def dispatch_round(self) -> list[asyncio.Task]:
        """为每个 feed 创建一个刷新任务并立即返回。"""
        self.rounds += 1
        tasks = []
        for feed_id in self.feed_ids:
            task = asyncio.create_task(
                self.refresh_feed(feed_id), name=f"refresh:{feed_id}"
            )
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
            tasks.append(task)

        BusinessEvents.refresh_round_dispatched(
            round_no=self.rounds,
            feeds=len(tasks),
            in_flight=len(self._in_flight),
        )
        return tasks

    async def run_once(self) -> None:
        """派发一轮并等待该轮全部完成。"""
        tasks = self.dispatch_round()
        if tasks:
            await asyncio.gather(*tasks)

    async def refresh_feed(self, feed_id: str) -> bool:
        """抓取单个 feed 并整体替换其缓存条目。

        Returns:
            缓存已更新返回 True；抓取失败或写入被跳过返回 False
        """
        try:
            result = await self.loader.load(feed_id)
        except Exception as e:
            logger.exception(f"Unexpected error refreshing feed '{feed_id}': {e}")
            BusinessEvents.feed_refresh_failed(feed_id=feed_id, error=str(e), duration_ms=0)
            return False

        if not result.is_success:
            BusinessEvents.feed_refresh_failed(
                feed_id=feed_id,
                error=result.error_message or "Unknown error",
                duration_ms=result.duration_ms,
            )
            return False

        # 锁等待不能阻塞事件循环
        if not await asyncio.to_thread(self.cache.replace, feed_id, result.photos):
            return False

        BusinessEvents.feed_refreshed(
            feed_id=feed_id,
            photos=len(result.photos),
            items=result.items_count,
            duration_ms=result.duration_ms,
        )
        return True

    async def stop(self) -> None:
        """取消定时任务与所有在途抓取。"""
        tasks = [task for task in (self._timer, *self._in_flight) if task is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._timer = None
        logger.info("Feed refresher stopped")
