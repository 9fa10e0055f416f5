"""Photo module infrastructure dependencies."""

from fastapi import Request

from src.modules.photos.infrastructure.cache import FeedCache


async def get_feed_cache(request: Request) -> FeedCache:
    """应用启动时创建并挂在 app.state 上的缓存。"""
    return request.app.state.feed_cache
