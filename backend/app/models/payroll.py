"""
Wage engine input and output models.

Outputs are frozen: a breakdown is a snapshot produced once per computation
and persisted by the payroll-entry layer as camelCase JSON.
"""
import datetime as dt
from typing import Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.services.wage_rules import NIGHT_DIFF_RATE

HolidayType = Literal["regular", "special_non_working", "special_working", "normal"]

# Timestamps are taken as given; strings are parsed by the calculator
TimeValue = Union[dt.datetime, str]


class _PayrollModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class HolidayLookup(_PayrollModel):
    type: HolidayType = "normal"
    name: Optional[str] = None


HolidayLookupFn = Callable[[dt.date], Union[HolidayLookup, HolidayType, dict, None]]


class Holiday(_PayrollModel):
    date: dt.date
    type: HolidayType
    name: str
    year: Optional[int] = None
    is_recurring: bool = False


class Shift(_PayrollModel):
    id: str
    employee_id: Optional[str] = None
    start_time: Optional[TimeValue] = None
    end_time: Optional[TimeValue] = None
    actual_start_time: Optional[TimeValue] = None
    actual_end_time: Optional[TimeValue] = None


class PayOptions(_PayrollModel):
    apply_holiday_logic: bool = True
    holiday_logic_cutoff_date: Optional[dt.date] = None
    night_diff_rate: float = Field(default=NIGHT_DIFF_RATE, ge=0, allow_inf_nan=False)


class BucketMultipliers(_PayrollModel):
    holiday: float
    overtime: float
    night_diff: float


class HourlyBucket(_PayrollModel):
    start: dt.datetime
    end: dt.datetime
    hours: float
    is_night_diff: bool
    is_overtime: bool
    multipliers: BucketMultipliers
    pay: float


class DatePayBreakdown(_PayrollModel):
    date: dt.date
    holiday_type: HolidayType
    holiday_name: Optional[str] = None
    is_rest_day: bool
    hours_worked: float
    overtime_hours: float
    night_hours: float
    base_pay: float
    holiday_multiplier: float
    overtime_multiplier: float
    night_diff_multiplier: float
    holiday_premium: float
    rest_day_premium: float
    overtime_pay: float
    night_diff_premium: float
    total_for_date: float
    detailed_hour_breakdown: list[HourlyBucket] = []


class PayBreakdown(_PayrollModel):
    per_date: list[DatePayBreakdown] = []
    total_hours: float = 0.0
    gross_pay: float = 0.0
    taxes_not_handled_here_flag: bool = True
    notes: list[str] = []
    weekly_ot_hours_to_review: float = 0.0


class ShiftPayBreakdown(_PayrollModel):
    shift_id: str
    scheduled_start: Optional[TimeValue] = None
    scheduled_end: Optional[TimeValue] = None
    actual_start: Optional[TimeValue] = None
    actual_end: Optional[TimeValue] = None
    pay: PayBreakdown


class PayrollEntryBreakdownPayload(_PayrollModel):
    version: Literal[1] = 1
    generated_at: dt.datetime
    aggregated: PayBreakdown
    per_shift: list[ShiftPayBreakdown]
