"""照片查询服务。"""

from loguru import logger

from src.core.config import settings
from src.modules.photos.application import shuffle
from src.modules.photos.domain.entities import Photo
from src.modules.photos.infrastructure.cache import FeedCache


class PhotoQueryService:
    """从缓存快照中按洗牌顺序取一页照片。"""

    def __init__(
        self,
        cache: FeedCache,
        page_size: int | None = None,
        default_seed: int | None = None,
    ):
        self.cache = cache
        self.page_size = settings.PAGE_SIZE if page_size is None else page_size
        self.default_seed = (
            settings.SHUFFLE_SEED if default_seed is None else default_seed
        )

    def next_page(self, start: int, seed: int | None = None) -> list[Photo]:
        """返回洗牌顺序中从 start 开始的一页。"""
        snapshot = self.cache.snapshot()
        indices = shuffle.page(
            seed=self.default_seed if seed is None else seed,
            total=snapshot.photo_count,
            start=start,
            size=self.page_size,
        )

        photos = []
        for index in indices:
            if index < len(snapshot.photos):
                photos.append(snapshot.photos[index])
            else:
                logger.error(f"Missing photo at index {index}")
        return photos

    def status(self) -> tuple[int, int]:
        """(feed 数, 照片总数)。"""
        return self.cache.counts()


def render_page(photos: list[Photo]) -> str:
    """把一页照片序列化为 JSON 数组文本，空页为 "[]"。"""
    return "[" + ",".join(photo.as_json() for photo in photos) + "]"
