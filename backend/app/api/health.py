# app/api/health.py
from datetime import datetime
from fastapi import APIRouter
from app.config import settings
from app.services.exporter import SUPPORTED_FORMATS

router = APIRouter()

@router.get("/api/health")
async def health_check():
    """Detailed health check"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "environment": settings.environment,
        "export_delivery": settings.export_delivery,
        "r2_configured": settings.r2_configured,
        "formats": sorted(fmt.value for fmt in SUPPORTED_FORMATS),
    }
