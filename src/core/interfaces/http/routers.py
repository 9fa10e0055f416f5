"""API router configuration."""

from fastapi import APIRouter

from src.modules.photos.interfaces.router import router as photos_router

api_router = APIRouter()

# Photos
api_router.include_router(photos_router)
