from fastapi import APIRouter

from app.config import settings
from app.models.schemas import HolidayRatesDetail, RatesResponse
from app.services.wage_rules import (
    DAILY_REGULAR_HOURS,
    HOLIDAY_RATES,
    NIGHT_DIFF_END,
    NIGHT_DIFF_START,
    RATES_VERSION,
)

router = APIRouter()


@router.get("/api/v1/rates", response_model=RatesResponse)
async def get_rates():
    return RatesResponse(
        rates_version=RATES_VERSION,
        daily_regular_hours=DAILY_REGULAR_HOURS,
        night_diff_start=NIGHT_DIFF_START,
        night_diff_end=NIGHT_DIFF_END,
        night_diff_rate=settings.night_diff_rate,
        holiday_rates={
            holiday_type: HolidayRatesDetail(**rates._asdict())
            for holiday_type, rates in HOLIDAY_RATES.items()
        },
    )
