#!/usr/bin/env python3
"""单个 feed 照片提取脚本。

抓取（或读取本地文件）一个 feed，输出提取到的照片，用于排查某个源
为什么没有出图。

使用方式：
    # 抓取远程 feed
    python scripts/extract_feed.py https://aeon.co/feed.rss

    # 读取本地文件
    python scripts/extract_feed.py tests/fixtures/quanta.xml

    # 每行一个 JSON 对象
    python scripts/extract_feed.py https://aeon.co/feed.rss --json
"""

import argparse
import asyncio
import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


async def load_photos(source: str) -> list:
    from src.modules.photos.application.extractor import extract_all
    from src.modules.photos.infrastructure.decoder import decode_feed
    from src.modules.photos.infrastructure.loader import FeedLoader

    path = Path(source)
    if path.is_file():
        return extract_all(decode_feed(path.read_bytes()))

    result = await FeedLoader(use_cache=False).load(source)
    if not result.is_success:
        raise SystemExit(f"Failed: {result.error_message}")
    return result.photos


def main() -> int:
    parser = argparse.ArgumentParser(description="从单个 feed 提取照片")
    parser.add_argument("source", help="feed URL 或本地 XML 文件")
    parser.add_argument("--json", action="store_true", help="每行输出一个 JSON 对象")
    args = parser.parse_args()

    from src.core.infrastructure.logging import setup_logging
    from src.modules.photos.domain.exceptions import FeedDecodeError

    setup_logging()

    try:
        photos = asyncio.run(load_photos(args.source))
    except FeedDecodeError as e:
        print(f"Failed: {e.message}", file=sys.stderr)
        return 1

    for photo in photos:
        if args.json:
            print(photo.as_json())
        else:
            print(f"{photo.image_url}\n  -> {photo.story_url}\n  {photo.link_text}")

    print(f"{len(photos)} photos", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
