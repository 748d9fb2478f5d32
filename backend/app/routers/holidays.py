import json
import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from app.config import settings
from app.models.payroll import Holiday
from app.models.schemas import HolidayCalendarResponse
from app.services.holidays import get_builtin_holidays
from app.store.base import load_holiday_calendar

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/holidays", tags=["holidays"])


def _calendar_source() -> str:
    return "file" if settings.holiday_calendar_file else "builtin"


async def calendar_holidays() -> list[Holiday]:
    """Holidays in effect: the configured calendar file, else the built-in calendar."""
    if not settings.holiday_calendar_file:
        return get_builtin_holidays()
    path = Path(settings.data_dir) / settings.holiday_calendar_file
    try:
        return await load_holiday_calendar(path)
    except (OSError, json.JSONDecodeError, ValueError, ValidationError) as exc:
        logger.error("Could not load holiday calendar %s: %s", path, exc)
        raise HTTPException(status_code=400, detail=f"Holiday calendar could not be read: {path.name}")


@router.get("/{year}", response_model=HolidayCalendarResponse)
async def get_holiday_calendar(year: int):
    holidays = [h for h in await calendar_holidays() if h.date.year == year]
    if not holidays:
        raise HTTPException(status_code=404, detail=f"No holiday calendar for {year}.")
    return HolidayCalendarResponse(
        year=year,
        source=_calendar_source(),
        holidays=sorted(holidays, key=lambda h: h.date),
    )
