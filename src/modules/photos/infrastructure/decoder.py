"""Feed 解码器。

把 RSS 2.0 / Atom 文档字节解码为 DecodedItem 列表。DecodedItem 实现了
提取器依赖的 FeedItem 能力集合，命名空间扩展元素按前缀和本地名称归类。
"""

import xml.etree.ElementTree as ET
from io import BytesIO

from loguru import logger

from src.modules.photos.domain.entities import (
    Enclosure,
    ExtensionElement,
    ExtensionMap,
)
from src.modules.photos.domain.exceptions import FeedDecodeError

ATOM_NS = "http://www.w3.org/2005/Atom"
DC_NS = "http://purl.org/dc/elements/1.1/"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"

# 常见命名空间使用固定前缀，与文档中声明的前缀无关
KNOWN_PREFIXES = {
    "http://search.yahoo.com/mrss/": "media",
    "http://search.yahoo.com/mrss": "media",
    ATOM_NS: "atom",
    DC_NS: "dc",
    CONTENT_NS: "content",
}


class DecodedItem:
    """一个已解码的 feed 条目。"""

    __slots__ = (
        "_link",
        "_title",
        "_content",
        "_description",
        "_enclosure",
        "_source_title",
        "_creators",
        "_extensions",
    )

    def __init__(
        self,
        *,
        link: str | None = None,
        title: str | None = None,
        content: str | None = None,
        description: str | None = None,
        enclosure: Enclosure | None = None,
        source_title: str | None = None,
        creators: list[str] | None = None,
        extensions: ExtensionMap | None = None,
    ):
        self._link = link
        self._title = title
        self._content = content
        self._description = description
        self._enclosure = enclosure
        self._source_title = source_title
        self._creators = creators or []
        self._extensions = extensions or {}

    def link(self) -> str | None:
        return self._link

    def title(self) -> str | None:
        return self._title

    def content(self) -> str | None:
        return self._content

    def description(self) -> str | None:
        return self._description

    def enclosure(self) -> Enclosure | None:
        return self._enclosure

    def source_title(self) -> str | None:
        return self._source_title

    def dublin_core_creators(self) -> list[str]:
        return list(self._creators)

    def extensions(self) -> ExtensionMap:
        return self._extensions


def decode_feed(content: bytes) -> list[DecodedItem]:
    """解码 RSS 2.0 或 Atom 文档。

    Raises:
        FeedDecodeError: 不是格式良好的 XML，或不是 RSS 2.0 / Atom
    """
    prefixes: dict[str, str] = {}
    try:
        events = ET.iterparse(BytesIO(content), events=("start-ns",))
        for _event, (prefix, uri) in events:
            prefixes.setdefault(uri, prefix)
        root = events.root
    except ET.ParseError as e:
        raise FeedDecodeError(f"Malformed feed XML: {e}") from e

    prefixes.update(KNOWN_PREFIXES)

    if root.tag == "rss":
        channel = root.find("channel")
        if channel is None:
            raise FeedDecodeError("RSS document has no <channel>")
        items = [_decode_rss_item(item, prefixes) for item in channel.findall("item")]
    elif root.tag == f"{{{ATOM_NS}}}feed":
        items = [
            _decode_atom_entry(entry, prefixes)
            for entry in root.findall(f"{{{ATOM_NS}}}entry")
        ]
    else:
        raise FeedDecodeError(f"Unsupported feed root element: {root.tag}")

    logger.debug(f"Decoded {len(items)} items from <{root.tag}> document")
    return items


# ============================================
# RSS 2.0
# ============================================


def _decode_rss_item(item: ET.Element, prefixes: dict[str, str]) -> DecodedItem:
    enclosure = None
    enclosure_elem = item.find("enclosure")
    if enclosure_elem is not None and enclosure_elem.get("url"):
        enclosure = Enclosure(
            url=enclosure_elem.get("url", ""),
            mime_type=enclosure_elem.get("type", ""),
        )

    return DecodedItem(
        link=_text(item.find("link")),
        title=_text(item.find("title")),
        content=_text(item.find(f"{{{CONTENT_NS}}}encoded")),
        description=_text(item.find("description")),
        enclosure=enclosure,
        source_title=_text(item.find("source")),
        creators=_creators(item),
        extensions=_extensions(item, prefixes, native_ns=None),
    )


# ============================================
# Atom
# ============================================


def _decode_atom_entry(entry: ET.Element, prefixes: dict[str, str]) -> DecodedItem:
    link = None
    enclosure = None
    for link_elem in entry.findall(f"{{{ATOM_NS}}}link"):
        rel = link_elem.get("rel", "alternate")
        href = link_elem.get("href")
        if rel == "alternate" and link is None:
            link = href
        elif rel == "enclosure" and enclosure is None and href:
            enclosure = Enclosure(url=href, mime_type=link_elem.get("type", ""))

    source_title = None
    source = entry.find(f"{{{ATOM_NS}}}source")
    if source is not None:
        source_title = _text(source.find(f"{{{ATOM_NS}}}title"))

    return DecodedItem(
        link=link,
        title=_atom_text(entry.find(f"{{{ATOM_NS}}}title")),
        content=_atom_text(entry.find(f"{{{ATOM_NS}}}content")),
        description=_atom_text(entry.find(f"{{{ATOM_NS}}}summary")),
        enclosure=enclosure,
        source_title=source_title,
        creators=_creators(entry),
        extensions=_extensions(entry, prefixes, native_ns=ATOM_NS),
    )


def _atom_text(elem: ET.Element | None) -> str | None:
    """Atom 文本构造；type="xhtml" 时序列化子元素并去掉 XHTML 命名空间。"""
    if elem is None or elem.get("type") != "xhtml":
        return _text(elem)

    parts = []
    for child in elem:
        for node in child.iter():
            if isinstance(node.tag, str):
                node.tag = _split_tag(node.tag)[1]
        parts.append(ET.tostring(child, encoding="unicode"))
    markup = "".join(parts).strip()
    return markup or None


# ============================================
# Helpers
# ============================================


def _text(elem: ET.Element | None) -> str | None:
    """元素缺失返回 None；元素存在但为空返回 ""。"""
    if elem is None:
        return None
    return (elem.text or "").strip()


def _creators(elem: ET.Element) -> list[str]:
    creators = []
    for creator in elem.findall(f"{{{DC_NS}}}creator"):
        text = _text(creator)
        if text:
            creators.append(text)
    return creators


def _split_tag(tag: str) -> tuple[str | None, str]:
    if tag.startswith("{"):
        uri, _, local = tag[1:].partition("}")
        return uri, local
    return None, tag


def _qualify(name: str, prefixes: dict[str, str]) -> str:
    uri, local = _split_tag(name)
    if uri is None:
        return local
    prefix = prefixes.get(uri)
    return f"{prefix}:{local}" if prefix else local


def _extensions(
    elem: ET.Element, prefixes: dict[str, str], native_ns: str | None
) -> ExtensionMap:
    """收集条目下所有命名空间子元素（Dublin Core 与 content 已单独处理）。"""
    extensions: ExtensionMap = {}
    for child in elem:
        if not isinstance(child.tag, str):
            continue
        uri, local = _split_tag(child.tag)
        if uri is None or uri in (native_ns, DC_NS, CONTENT_NS):
            continue
        prefix = prefixes.get(uri)
        if not prefix:
            continue

        element = ExtensionElement(
            name=f"{prefix}:{local}",
            attrs={_qualify(key, prefixes): value for key, value in child.attrib.items()},
            value=_text(child) or None,
        )
        extensions.setdefault(prefix, {}).setdefault(local, []).append(element)
    return extensions
