from fastapi import APIRouter

from app.config import settings
from app.models.schemas import HealthResponse
from app.services.wage_rules import RATES_VERSION

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health():
    return {
        "status": "healthy",
        "environment": settings.environment,
        "rates_version": RATES_VERSION,
    }
