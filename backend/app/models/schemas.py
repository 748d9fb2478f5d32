from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional
from datetime import date

from app.models.payroll import Holiday, PayOptions, Shift

Rate = Annotated[float, Field(allow_inf_nan=False)]
HourCount = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class _CalculationRequest(BaseModel):
    # Same camelCase convention as the payroll models nested in the body
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShiftPayRequest(_CalculationRequest):
    shift: Shift
    hourly_rate: Rate
    holidays: Optional[list[Holiday]] = None     # None -> configured calendar
    rest_day: Optional[int] = Field(default=None, ge=0, le=6)   # 0=Sunday
    options: Optional[PayOptions] = None
    weekly_ot_hours_already_accumulated: HourCount = 0
    regular_hours_already_worked: dict[date, HourCount] = {}


class PeriodPayRequest(_CalculationRequest):
    shifts: list[Shift]
    hourly_rate: Rate
    holidays: Optional[list[Holiday]] = None
    rest_day: Optional[int] = Field(default=None, ge=0, le=6)
    options: Optional[PayOptions] = None
    weekly_ot_hours_already_accumulated: HourCount = 0
    shared_daily_cap: bool = False


class HolidayRatesDetail(BaseModel):
    not_worked: float
    worked: float
    overtime: float
    rest_day: float
    rest_day_ot: float


class RatesResponse(BaseModel):
    rates_version: str
    daily_regular_hours: float
    night_diff_start: int
    night_diff_end: int
    night_diff_rate: float
    holiday_rates: dict[str, HolidayRatesDetail]


class HolidayCalendarResponse(BaseModel):
    year: int
    source: str                  # "file" or "builtin"
    holidays: list[Holiday]


class HealthResponse(BaseModel):
    status: str
    environment: str
    rates_version: str
