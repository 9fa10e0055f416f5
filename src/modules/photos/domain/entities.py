"""Photo domain entities."""

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field


class Photo(BaseModel):
    """从单个 feed 条目中提取出的照片。"""

    model_config = ConfigDict(frozen=True)

    image_url: str = Field(..., description="图片URL")
    story_url: str = Field(..., description="原文URL")
    description: str | None = Field(default=None, description="图片说明")
    credit: str | None = Field(default=None, description="署名")

    @property
    def is_valid(self) -> bool:
        """图片与原文 URL 均非空才算有效。"""
        return bool(self.image_url) and bool(self.story_url)

    @property
    def link_text(self) -> str:
        """展示层使用的链接文字。"""
        if self.description is None and self.credit is None:
            return self.story_url
        if self.description is None:
            return self.credit
        if self.credit is None:
            return self.description
        return f"{self.description} ({self.credit})"

    def as_json(self) -> str:
        return self.model_dump_json()


@dataclass(frozen=True)
class Enclosure:
    """RSS <enclosure> 元素。"""

    url: str
    mime_type: str = ""


@dataclass(frozen=True)
class ExtensionElement:
    """命名空间扩展元素（Media RSS、Atom-in-RSS 等）。

    name 为带前缀的完整名称，例如 ``media:content``。
    """

    name: str
    attrs: dict[str, str] = field(default_factory=dict)
    value: str | None = None


# prefix -> local name -> elements（文档顺序）
ExtensionMap = dict[str, dict[str, list[ExtensionElement]]]
