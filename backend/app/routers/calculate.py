from typing import Optional

from fastapi import APIRouter

from app.config import settings
from app.models.payroll import Holiday, PayBreakdown, PayOptions, PayrollEntryBreakdownPayload
from app.models.schemas import PeriodPayRequest, ShiftPayRequest
from app.routers.holidays import calendar_holidays
from app.services.calculator import calculate_period_pay, calculate_shift_pay

router = APIRouter(prefix="/api/v1/calculate", tags=["calculate"])


def _options(requested: Optional[PayOptions]) -> PayOptions:
    if requested is not None:
        return requested
    return PayOptions(
        apply_holiday_logic=settings.apply_holiday_logic,
        holiday_logic_cutoff_date=settings.holiday_logic_cutoff_date,
        night_diff_rate=settings.night_diff_rate,
    )


def _rest_day(requested: Optional[int]) -> int:
    return settings.default_rest_day if requested is None else requested


async def _holidays(requested: Optional[list[Holiday]]) -> list[Holiday]:
    if requested is not None:
        return requested
    return await calendar_holidays()


@router.post("/shift", response_model=PayBreakdown)
async def calculate_single_shift(request: ShiftPayRequest):
    return calculate_shift_pay(
        request.shift,
        request.hourly_rate,
        holidays=await _holidays(request.holidays),
        rest_day=_rest_day(request.rest_day),
        options=_options(request.options),
        weekly_ot_hours_already_accumulated=request.weekly_ot_hours_already_accumulated,
        regular_hours_already_worked=request.regular_hours_already_worked,
    )


@router.post("/period", response_model=PayrollEntryBreakdownPayload)
async def calculate_period(request: PeriodPayRequest):
    return calculate_period_pay(
        request.shifts,
        request.hourly_rate,
        holidays=await _holidays(request.holidays),
        rest_day=_rest_day(request.rest_day),
        options=_options(request.options),
        weekly_ot_hours_already_accumulated=request.weekly_ot_hours_already_accumulated,
        shared_daily_cap=request.shared_daily_cap,
    )
