"""Photo module application dependencies."""

from typing import NoReturn

from fastapi import Depends

from src.modules.photos.application.services import PhotoQueryService
from src.modules.photos.infrastructure.cache import FeedCache


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_feed_cache() -> FeedCache:
    _missing_dependency("FeedCache")


async def get_photo_query_service(
    cache: FeedCache = Depends(get_feed_cache),
) -> PhotoQueryService:
    return PhotoQueryService(cache)
