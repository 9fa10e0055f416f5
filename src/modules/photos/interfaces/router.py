"""Photo API routes."""

from fastapi import APIRouter, Depends, Query, Response

from src.modules.photos.application.dependencies import get_photo_query_service
from src.modules.photos.application.services import PhotoQueryService, render_page
from src.modules.photos.application.shuffle import MAX_SEED
from src.modules.photos.interfaces.schemas import PhotoResponse

router = APIRouter(prefix="/next", tags=["photos"])


def _parse_offset(offset: str) -> int:
    """无法解析或为负数的偏移量按 0 处理。"""
    try:
        start = int(offset)
    except ValueError:
        return 0
    return max(start, 0)


@router.get(
    "/{offset}",
    response_model=list[PhotoResponse],
    summary="获取下一页照片",
    description="按洗牌顺序返回从 offset 开始的一页照片，越界时返回空数组",
)
def get_next(
    offset: str,
    seed: int | None = Query(None, ge=0, lt=MAX_SEED, description="排列种子"),
    service: PhotoQueryService = Depends(get_photo_query_service),
) -> Response:
    """Get the next page of shuffled photos."""
    photos = service.next_page(_parse_offset(offset), seed=seed)
    return Response(content=render_page(photos), media_type="application/json")
