"""HTML 片段中的 <img> 扫描。"""

import warnings
from dataclasses import dataclass

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning
from bs4.exceptions import ParserRejectedMarkup


class HtmlFragmentError(ValueError):
    """HTML 片段无法解析。"""


@dataclass(frozen=True)
class ImageTag:
    """<img> 元素上与提取相关的属性。"""

    src: str | None
    alt: str | None


def scan_images(fragment: str) -> list[ImageTag]:
    """按文档顺序返回片段中所有 <img> 元素。

    Raises:
        HtmlFragmentError: 解析器拒绝该片段
    """
    try:
        with warnings.catch_warnings():
            # 纯文本摘要（例如只有一个 URL）会触发该警告，对片段扫描没有意义
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            soup = BeautifulSoup(fragment, "html.parser")
    except ParserRejectedMarkup as e:
        raise HtmlFragmentError(str(e)) from e

    return [
        ImageTag(src=_attr(tag.get("src")), alt=_attr(tag.get("alt")))
        for tag in soup.find_all("img")
    ]


def _attr(value: str | list[str] | None) -> str | None:
    if isinstance(value, list):
        return " ".join(value)
    return value
