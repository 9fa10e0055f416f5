"""HTTP 接口测试。"""

import json

import pytest

from src.modules.photos.application.shuffle import permutation
from tests._feed_helpers import make_photo

# 使用 anyio 作为异步测试后端
pytestmark = pytest.mark.anyio


class TestHealth:
    """/health 测试。"""

    async def test_empty_cache(self, async_client):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"feeds": 0, "photos": 0}

    async def test_counts(self, async_client, feed_cache):
        feed_cache.replace("feed-a", [make_photo(n, "a") for n in range(3)])
        feed_cache.replace("feed-b", [])

        response = await async_client.get("/health")

        assert response.json() == {"feeds": 2, "photos": 3}


class TestNextPage:
    """/api/next/{offset} 测试。"""

    @pytest.fixture
    def photos(self, feed_cache):
        photos = [make_photo(n) for n in range(20)]
        feed_cache.replace("feed-a", photos)
        return photos

    async def test_first_page(self, async_client, photos):
        response = await async_client.get("/api/next/0")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        expected = [photos[i].model_dump() for i in permutation(1, 20)[:8]]
        assert body == expected

    async def test_consecutive_pages_do_not_overlap(self, async_client, photos):
        first = (await async_client.get("/api/next/0")).json()
        second = (await async_client.get("/api/next/8")).json()

        first_urls = {p["image_url"] for p in first}
        second_urls = {p["image_url"] for p in second}
        assert first_urls.isdisjoint(second_urls)

    async def test_offset_beyond_total(self, async_client, photos):
        """越界偏移返回空数组。"""
        response = await async_client.get("/api/next/20")

        assert response.status_code == 200
        assert response.text == "[]"

    async def test_empty_cache_returns_empty_array(self, async_client):
        response = await async_client.get("/api/next/0")
        assert response.text == "[]"

    @pytest.mark.parametrize("offset", ["abc", "-3", "1.5"])
    async def test_invalid_offset_treated_as_zero(self, async_client, photos, offset):
        expected = (await async_client.get("/api/next/0")).json()

        response = await async_client.get(f"/api/next/{offset}")

        assert response.status_code == 200
        assert response.json() == expected

    async def test_seed_query(self, async_client, photos):
        response = await async_client.get("/api/next/0", params={"seed": 127})

        expected = [photos[i].model_dump() for i in permutation(127, 20)[:8]]
        assert json.loads(response.text) == expected

    async def test_seed_out_of_range(self, async_client, photos):
        response = await async_client.get("/api/next/0", params={"seed": -1})
        assert response.status_code == 422


class TestExceptionHandlers:
    """异常处理器测试。"""

    async def test_domain_exception_shape(self):
        from src.core.interfaces.http.exceptions import domain_exception_handler
        from src.modules.photos.domain.exceptions import FeedFetchError

        response = await domain_exception_handler(
            None, FeedFetchError("https://feeds.example.com/a.xml", "HTTP 503")
        )

        assert response.status_code == 502
        assert json.loads(response.body) == {
            "error": {
                "code": "FEED_FETCH_ERROR",
                "message": "Could not access feed at 'https://feeds.example.com/a.xml': HTTP 503",
            }
        }

    async def test_unhandled_exception_is_500(self):
        from src.core.interfaces.http.exceptions import global_exception_handler

        response = await global_exception_handler(None, RuntimeError("boom"))

        assert response.status_code == 500
        assert json.loads(response.body)["error"]["code"] == "INTERNAL_ERROR"

    async def test_decode_error_is_422(self):
        from src.core.interfaces.http.exceptions import domain_exception_handler
        from src.modules.photos.domain.exceptions import FeedDecodeError

        response = await domain_exception_handler(None, FeedDecodeError("Malformed feed XML"))

        assert response.status_code == 422
        assert json.loads(response.body)["error"]["code"] == "FEED_DECODE_ERROR"
