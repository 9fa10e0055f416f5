"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不访问网络，HTTP 使用 httpx.MockTransport）
- fixtures/: 样例 feed 文档

使用方法：
    # 运行所有测试
    pytest

    # 只运行单元测试
    pytest tests/unit/
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from src.core.config import Settings
from src.modules.photos.infrastructure.cache import FeedCache

# ============================================
# 配置 Fixtures
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    """刷新器依赖 asyncio 任务，只在 asyncio 上运行。"""
    return "asyncio"


@pytest.fixture
def test_settings() -> Settings:
    """测试环境配置。"""
    return Settings(
        ENVIRONMENT="local",
        FETCH_INTERVAL=60,
        PAGE_SIZE=8,
        SHUFFLE_SEED=1,
        HTTP_CACHE_ENABLED=True,
    )


# ============================================
# 领域对象 Fixtures
# ============================================


@pytest.fixture
def feed_cache() -> FeedCache:
    """锁等待很短的空缓存。"""
    return FeedCache(lock_timeout=0.05)


# ============================================
# HTTP Fixtures
# ============================================


@pytest.fixture
async def async_client(feed_cache) -> AsyncGenerator[AsyncClient, None]:
    """异步 HTTP 客户端（用于 API 测试）。

    不运行 lifespan，缓存由测试直接写入。
    """
    from main import app
    from src.modules.photos.application.dependencies import get_feed_cache

    previous = app.dependency_overrides.get(get_feed_cache)
    app.dependency_overrides[get_feed_cache] = lambda: feed_cache

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    # 恢复 main 中的依赖覆盖
    if previous is None:
        app.dependency_overrides.pop(get_feed_cache, None)
    else:
        app.dependency_overrides[get_feed_cache] = previous
