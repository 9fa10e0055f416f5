"""Photo API schemas."""

from pydantic import BaseModel, Field


class PhotoResponse(BaseModel):
    """Photo response."""

    image_url: str = Field(..., description="图片URL")
    story_url: str = Field(..., description="原文URL")
    description: str | None = Field(None, description="图片说明")
    credit: str | None = Field(None, description="署名")


class StatusResponse(BaseModel):
    """Cache status response."""

    feeds: int = Field(..., description="已成功抓取过的 feed 数")
    photos: int = Field(..., description="缓存中的照片总数")
