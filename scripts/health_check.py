#!/usr/bin/env python3
"""健康检查脚本。

请求运行中服务的 /health，可作为运维脚本或监控探针使用。

使用方式：
    # 检查本地服务
    python scripts/health_check.py

    # 指定服务地址
    python scripts/health_check.py --url http://127.0.0.1:8000

    # JSON 输出
    python scripts/health_check.py --json

    # 退出码检查：缓存中没有照片也视为失败
    python scripts/health_check.py --strict
"""

import argparse
import asyncio
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


async def check_service(base_url: str, timeout: float) -> dict:
    """请求 /health 并解读结果。"""
    import httpx

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(f"{base_url.rstrip('/')}/health")
            response.raise_for_status()
            status = response.json()
    except (httpx.HTTPError, ValueError) as e:
        return {"status": "unhealthy", "error": str(e)}

    feeds = status.get("feeds", 0)
    photos = status.get("photos", 0)
    if photos > 0:
        overall = "healthy"
    elif feeds > 0:
        overall = "degraded"  # feed 已抓取但没有照片
    else:
        overall = "warming_up"

    return {"status": overall, "feeds": feeds, "photos": photos}


def print_report(result: dict, base_url: str) -> None:
    print(f"photojournalism health @ {base_url}")
    print(f"  checked_at: {datetime.now(UTC).isoformat()}")
    for key, value in result.items():
        print(f"  {key}: {value}")


def main() -> int:
    from src.core.config import settings

    parser = argparse.ArgumentParser(description="photojournalism 健康检查")
    parser.add_argument(
        "--url",
        default=f"http://{settings.SERVER}",
        help="服务地址（默认读取 PHOTOJOURNALISM_SERVER）",
    )
    parser.add_argument("--timeout", type=float, default=5.0, help="请求超时秒数")
    parser.add_argument("--json", action="store_true", help="JSON 输出")
    parser.add_argument(
        "--strict", action="store_true", help="只有缓存中已有照片才返回 0"
    )
    args = parser.parse_args()

    result = asyncio.run(check_service(args.url, args.timeout))

    if args.json:
        print(json.dumps(result, ensure_ascii=False))
    else:
        print_report(result, args.url)

    if result["status"] == "unhealthy":
        return 1
    if args.strict and result["status"] != "healthy":
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
