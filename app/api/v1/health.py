from fastapi import APIRouter

from app.ai.config import load_ai_config
from app.core.config import settings

router = APIRouter()


@router.get("/health", summary="Health Check", description="Service liveness plus the configured backends.")
async def health_check():
    return {
        "status": "healthy",
        "provider": load_ai_config().provider,
        "recordStore": settings.record_store_backend,
    }
