from fastapi import APIRouter
from app.api import health, export, metrics


api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(export.router)
api_router.include_router(metrics.router)

__all__ = ["api_router"]
