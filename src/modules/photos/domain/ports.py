"""Photo module ports."""

from typing import Protocol

from src.modules.photos.domain.entities import Enclosure, ExtensionMap, Photo


class FeedItem(Protocol):
    """已解码的 feed 条目。

    提取器只依赖这组能力，不关心条目来自 RSS 2.0 还是 Atom。
    """

    def link(self) -> str | None: ...

    def title(self) -> str | None: ...

    def content(self) -> str | None:
        """正文原始 HTML/文本（RSS 中的 content:encoded）。"""
        ...

    def description(self) -> str | None:
        """摘要原始 HTML/文本。"""
        ...

    def enclosure(self) -> Enclosure | None: ...

    def source_title(self) -> str | None: ...

    def dublin_core_creators(self) -> list[str]: ...

    def extensions(self) -> ExtensionMap: ...


class PhotoLoader(Protocol):
    """Port for turning a feed URL into photos."""

    async def load(self, feed_id: str) -> "FeedLoadOutcome":
        """Fetch, decode and extract one feed."""
        ...


class FeedLoadOutcome(Protocol):
    """加载结果的最小视图，刷新器只读取这些字段。"""

    @property
    def is_success(self) -> bool: ...

    @property
    def photos(self) -> list[Photo]: ...

    @property
    def items_count(self) -> int: ...

    @property
    def error_message(self) -> str | None: ...

    @property
    def duration_ms(self) -> int: ...
