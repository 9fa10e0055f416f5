"""照片提取器。

Feed 放图片的位置五花八门。提取按固定顺序执行一组字段赋值步骤，
后面的步骤覆盖前面的结果：先用通用字段兜底，最后由 Media RSS 等
标准化字段拍板。每个步骤都可以针对单个条目独立测试。
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from loguru import logger

from src.modules.photos.domain.entities import ExtensionElement, Photo
from src.modules.photos.domain.ports import FeedItem
from src.modules.photos.infrastructure.html import HtmlFragmentError, scan_images

# 非图片附件与已知的统计像素
IGNORABLE = (".mp4", ".mov", "npr-rss-pixel.png")


def is_ignorable(url: str) -> bool:
    """URL 命中忽略名单时返回 True。"""
    return any(marker in url for marker in IGNORABLE)


@dataclass
class PhotoBuilder:
    """提取过程中的可变中间状态。"""

    image_url: str = ""
    story_url: str = ""
    description: str | None = None
    credit: str | None = None

    def offer_image(self, url: str | None) -> bool:
        """候选图片 URL 通过忽略名单时覆盖 image_url。"""
        if not url or is_ignorable(url):
            return False
        self.image_url = url
        return True

    def build(self) -> Photo | None:
        photo = Photo(
            image_url=self.image_url,
            story_url=self.story_url,
            description=self.description,
            credit=self.credit,
        )
        return photo if photo.is_valid else None


ExtractionStep = Callable[[PhotoBuilder, FeedItem], None]


# ============================================
# 提取步骤（按覆盖权限从低到高排列）
# ============================================


def story_url_from_link(builder: PhotoBuilder, item: FeedItem) -> None:
    """1. 条目 link 作为原文 URL 的初始值。"""
    link = item.link()
    if link is not None:
        builder.story_url = link


def description_from_title(builder: PhotoBuilder, item: FeedItem) -> None:
    """2. 条目标题作为说明的初始值。"""
    title = item.title()
    if title:
        builder.description = title


def image_from_content_html(builder: PhotoBuilder, item: FeedItem) -> None:
    """3. 扫描正文 HTML 中的 <img>。"""
    content = item.content()
    if content is not None:
        _apply_html_fragment(builder, content)


def image_from_description_html(builder: PhotoBuilder, item: FeedItem) -> None:
    """4. 扫描摘要 HTML 中的 <img>，在正文之后执行，因此优先级更高。"""
    description = item.description()
    if description is not None:
        _apply_html_fragment(builder, description)


def image_from_enclosure(builder: PhotoBuilder, item: FeedItem) -> None:
    """5. image/* 类型的 enclosure。"""
    enclosure = item.enclosure()
    if enclosure is not None and enclosure.mime_type.startswith("image/"):
        builder.offer_image(enclosure.url)


def credit_from_source(builder: PhotoBuilder, item: FeedItem) -> None:
    """6. <source> 标题作为署名。"""
    source_title = item.source_title()
    if source_title:
        builder.credit = source_title


def credit_from_dublin_core(builder: PhotoBuilder, item: FeedItem) -> None:
    """7. Dublin Core 作者，覆盖 <source>。"""
    creators = [c for c in item.dublin_core_creators() if c]
    if creators:
        builder.credit = ", ".join(creators)


def story_url_from_atom_link(builder: PhotoBuilder, item: FeedItem) -> None:
    """8a. atom:link 的 href 是原文 URL 的最终来源。"""
    for element in _extension_elements(item, "atom", "link"):
        href = element.attrs.get("href")
        if href is not None:
            builder.story_url = href


def image_from_media_thumbnail(builder: PhotoBuilder, item: FeedItem) -> None:
    """8b. media:thumbnail。"""
    for element in _extension_elements(item, "media", "thumbnail"):
        builder.offer_image(element.attrs.get("url"))


def image_from_media_content(builder: PhotoBuilder, item: FeedItem) -> None:
    """8c. media:content，在 thumbnail 之后执行，两者并存时以它为准。"""
    for element in _extension_elements(item, "media", "content"):
        builder.offer_image(element.attrs.get("url"))


def credit_from_media_credit(builder: PhotoBuilder, item: FeedItem) -> None:
    """8d. media:credit 是署名的最终来源。"""
    for element in _extension_elements(item, "media", "credit"):
        if element.value:
            builder.credit = element.value


def description_from_media_description(builder: PhotoBuilder, item: FeedItem) -> None:
    """8e. media:description 是说明的最终来源。"""
    for element in _extension_elements(item, "media", "description"):
        if element.value:
            builder.description = element.value


PIPELINE: tuple[ExtractionStep, ...] = (
    story_url_from_link,
    description_from_title,
    image_from_content_html,
    image_from_description_html,
    image_from_enclosure,
    credit_from_source,
    credit_from_dublin_core,
    story_url_from_atom_link,
    image_from_media_thumbnail,
    image_from_media_content,
    credit_from_media_credit,
    description_from_media_description,
)


def extract(item: FeedItem) -> Photo | None:
    """从单个条目提取照片，条目不含有效图片或原文链接时返回 None。"""
    builder = PhotoBuilder()
    for step in PIPELINE:
        step(builder, item)
    return builder.build()


def extract_all(items: Iterable[FeedItem]) -> list[Photo]:
    """按条目顺序提取所有有效照片。"""
    photos: list[Photo] = []
    total = 0
    for item in items:
        total += 1
        photo = extract(item)
        if photo is not None:
            photos.append(photo)

    logger.debug(f"Extracted {len(photos)} photos from {total} items")
    return photos


# ============================================
# Helpers
# ============================================


def _apply_html_fragment(builder: PhotoBuilder, fragment: str) -> None:
    """只看片段中的第一个 <img>。

    src 通过忽略名单时覆盖 image_url；非空 alt 无论 src 是否被采用都覆盖说明。
    片段无法解析时，原始文本作为说明。
    """
    try:
        images = scan_images(fragment)
    except HtmlFragmentError as e:
        logger.debug(f"Unparseable HTML fragment, using raw text: {e}")
        builder.description = fragment
        return

    if not images:
        return

    first = images[0]
    builder.offer_image(first.src)
    if first.alt:
        builder.description = first.alt


def _extension_elements(
    item: FeedItem, namespace: str, local_name: str
) -> list[ExtensionElement]:
    elements = item.extensions().get(namespace, {}).get(local_name, [])
    qualified = f"{namespace}:{local_name}"
    return [element for element in elements if element.name == qualified]
