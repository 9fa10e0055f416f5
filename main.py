"""photojournalism Backend - 新闻照片流服务入口。"""

from pathlib import Path

import sentry_sdk
from fastapi import Depends, FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles
from loguru import logger

from src.core.config import settings
from src.core.domain.exceptions import DomainException
from src.core.infrastructure.logging import get_business_logger, setup_logging
from src.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
)
from src.core.interfaces.http.routers import api_router
from src.modules.photos.application import dependencies as photos_app_deps
from src.modules.photos.application.services import PhotoQueryService
from src.modules.photos.infrastructure import dependencies as photos_infra_deps
from src.modules.photos.infrastructure.cache import FeedCache
from src.modules.photos.infrastructure.feed_list import load_feed_list
from src.modules.photos.infrastructure.loader import FeedLoader
from src.modules.photos.infrastructure.refresher import BackgroundRefresher
from src.modules.photos.interfaces.schemas import StatusResponse


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting photojournalism backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    # 缺少 feed 列表时直接启动失败
    feeds = load_feed_list(settings.FEED_LIST)
    get_business_logger().info(
        "feed_list_loaded", path=settings.FEED_LIST, feeds=len(feeds)
    )

    app.state.feed_cache = FeedCache()
    refresher = BackgroundRefresher(feeds, app.state.feed_cache, FeedLoader())
    refresher.run_in_background()

    yield

    logger.info("Shutting down photojournalism backend...")
    await refresher.stop()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="新闻照片流 - 从 RSS/Atom feed 中提取照片，按稳定的随机顺序分页返回",
    version=settings.VERSION,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[photos_app_deps.get_feed_cache] = (
    photos_infra_deps.get_feed_cache
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Include API router
app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["health"], response_model=StatusResponse)
def health_check(
    service: PhotoQueryService = Depends(photos_app_deps.get_photo_query_service),
) -> StatusResponse:
    """Health check endpoint.

    返回已抓取的 feed 数与缓存中的照片总数。
    """
    feeds, photos = service.status()
    return StatusResponse(feeds=feeds, photos=photos)


# 前端静态文件，放在所有路由之后
if Path(settings.STATIC_DIR).is_dir():
    app.mount(
        "/",
        StaticFiles(directory=settings.STATIC_DIR, html=True),
        name="static",
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.ENVIRONMENT == "local",
    )
