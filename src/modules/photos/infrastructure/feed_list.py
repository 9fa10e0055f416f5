"""Feed 列表文件读取。

每行一个 feed URL；空行与以 # 开头的行被忽略，重复项只保留第一次出现。
"""

from pathlib import Path

from src.modules.photos.domain.exceptions import FeedListError


def load_feed_list(path: str | Path) -> list[str]:
    """读取 feed 列表。

    Raises:
        FeedListError: 文件不存在或无法读取
    """
    feed_path = Path(path)
    try:
        lines = feed_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise FeedListError(str(feed_path), str(e)) from e

    feeds: list[str] = []
    for line in lines:
        url = line.strip()
        if not url or url.startswith("#") or url in feeds:
            continue
        feeds.append(url)
    return feeds
