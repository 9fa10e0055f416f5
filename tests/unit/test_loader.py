"""Feed 加载器测试。

HTTP 通过 httpx.MockTransport 模拟，不访问网络。
"""

import httpx
import pytest

from src.modules.photos.domain.exceptions import FeedFetchError
from src.modules.photos.infrastructure.loader import (
    CachedResponse,
    FeedLoader,
    FeedLoadResult,
    LoadStatus,
)
from tests._feed_helpers import load_fixture, make_photo

# 使用 anyio 作为异步测试后端
pytestmark = pytest.mark.anyio

FEED_URL = "https://feeds.example.com/world.xml"


def make_loader(handler, **kwargs) -> FeedLoader:
    return FeedLoader(
        timeout=5.0,
        user_agent="photojournalism/test +http://example.com",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


# ============================================
# 加载结果测试
# ============================================


class TestFeedLoadResult:
    """FeedLoadResult 测试。"""

    def test_success_result(self):
        result = FeedLoadResult.success([make_photo(1)], items_count=3, duration_ms=10)

        assert result.status == LoadStatus.SUCCESS
        assert result.is_success is True
        assert result.items_count == 3
        assert result.error_message is None

    def test_empty_success_result(self):
        """成功但没有照片。"""
        result = FeedLoadResult.success([], items_count=12)

        assert result.status == LoadStatus.EMPTY
        assert result.is_success is True

    def test_failed_result(self):
        result = FeedLoadResult.failed("Connection timeout", duration_ms=30000)

        assert result.status == LoadStatus.FAILED
        assert result.is_success is False
        assert result.photos == []

    def test_conditional_headers(self):
        cached = CachedResponse(body=b"", etag='"abc"', last_modified="Wed, 11 Sep 2024 14:00:00 GMT")
        assert cached.conditional_headers() == {
            "If-None-Match": '"abc"',
            "If-Modified-Since": "Wed, 11 Sep 2024 14:00:00 GMT",
        }
        assert CachedResponse(body=b"").conditional_headers() == {}


# ============================================
# FeedLoader 测试
# ============================================


class TestFeedLoader:
    """FeedLoader 测试。"""

    async def test_load_success(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, content=load_fixture("quanta.xml"))

        result = await make_loader(handler).load(FEED_URL)

        assert result.is_success is True
        assert result.items_count == 5
        assert len(result.photos) == 5
        assert requests[0].headers["User-Agent"] == "photojournalism/test +http://example.com"
        assert "application/rss+xml" in requests[0].headers["Accept"]

    async def test_feed_without_photos_is_empty_success(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=load_fixture("bbc.xml"))

        result = await make_loader(handler).load(FEED_URL)

        assert result.status == LoadStatus.EMPTY
        assert result.items_count == 12

    async def test_http_error_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        result = await make_loader(handler).load(FEED_URL)

        assert result.is_success is False
        assert "HTTP 500" in result.error_message
        assert FEED_URL in result.error_message

    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = await make_loader(handler).load(FEED_URL)

        assert result.is_success is False
        assert "Timeout" in result.error_message

    async def test_connect_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await make_loader(handler).load(FEED_URL)

        assert result.status == LoadStatus.FAILED

    async def test_undecodable_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html><body>not a feed</body></html>")

        result = await make_loader(handler).load(FEED_URL)

        assert result.is_success is False
        assert "Unsupported feed root element" in result.error_message

    async def test_fetch_raises_feed_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        with pytest.raises(FeedFetchError) as exc_info:
            await make_loader(handler).fetch(FEED_URL)

        assert exc_info.value.feed_id == FEED_URL

    async def test_not_modified_reuses_cached_body(self):
        """304 时复用上次的响应体。"""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.headers.get("If-None-Match") == '"v1"':
                return httpx.Response(304)
            return httpx.Response(200, content=load_fixture("aeon.xml"), headers={"ETag": '"v1"'})

        loader = make_loader(handler, use_cache=True)
        first = await loader.load(FEED_URL)
        second = await loader.load(FEED_URL)

        assert "If-None-Match" not in requests[0].headers
        assert requests[1].headers["If-None-Match"] == '"v1"'
        assert len(first.photos) == len(second.photos) == 20

    async def test_cache_disabled_sends_no_validators(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                content=load_fixture("aeon.xml"),
                headers={"Last-Modified": "Wed, 11 Sep 2024 14:00:00 GMT"},
            )

        loader = make_loader(handler, use_cache=False)
        await loader.load(FEED_URL)
        await loader.load(FEED_URL)

        assert "If-Modified-Since" not in requests[1].headers
