from fastapi import APIRouter

from ....core.config import settings

router = APIRouter()


@router.get("")
async def health_check():
    return {
        "message": "API is healthy",
        "status": "ok",
        "storage": settings.storage_backend,
    }
