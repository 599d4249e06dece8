"""Health and version endpoints."""
from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(prefix="/test", tags=["Health"])


@router.get("/health")
def health_check():
    return {"status": "OK", "message": "Welfare Center API is running"}


@router.get("/version")
def version():
    return {"version": settings.APP_VERSION, "environment": settings.ENVIRONMENT}
