"""
Shift pay calculation engine (DOLE rules).

A shift is split per calendar date, each date is cut into atomic intervals
(whole hours plus the 06:00/22:00 night differential edges), and a single
linear pass over those intervals slices regular hours against the 8-hour
daily threshold. Each slice is priced as
hours x rate x holiday/rest multiplier x overtime multiplier x night multiplier,
while holiday, rest day, overtime and night premiums are tracked separately.
Taxes are not handled here.
"""
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Iterable, Mapping, Optional

from pydantic import ValidationError

from app.models.payroll import (
    Holiday,
    HolidayLookup,
    HolidayLookupFn,
    PayBreakdown,
    PayOptions,
    PayrollEntryBreakdownPayload,
    Shift,
    ShiftPayBreakdown,
)
from app.services.breakdown import (
    assemble_pay_breakdown,
    build_payroll_entry_breakdown_payload,
    create_zero_pay_breakdown,
)
from app.services.holidays import create_holiday_resolver
from app.services.segments import (
    add_elapsed_hours,
    build_segment_boundaries,
    is_night_interval,
    is_rest_day,
    segment_hours,
    split_cross_midnight_shift,
)
from app.services.wage_rules import (
    DAILY_REGULAR_HOURS,
    HOLIDAY_RATES,
    MAX_SHIFT_HOURS,
    HolidayRates,
    get_holiday_rates,
)

logger = logging.getLogger(__name__)

# Slices shorter than this are float noise, not time worked
_EPSILON = 1e-9


def _to_datetime(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _effective_times(shift: Shift) -> tuple[Optional[datetime], Optional[datetime]]:
    """Clock-in/clock-out win over scheduled times when captured."""
    start = shift.actual_start_time if shift.actual_start_time is not None else shift.start_time
    end = shift.actual_end_time if shift.actual_end_time is not None else shift.end_time
    return _to_datetime(start), _to_datetime(end)


def validate_shift_times(start_time, end_time) -> Optional[str]:
    """Returns an error message for invalid shift times, None when valid."""
    start = _to_datetime(start_time)
    end = _to_datetime(end_time)
    if start is None:
        return "Invalid start time"
    if end is None:
        return "Invalid end time"
    if (start.tzinfo is None) != (end.tzinfo is None):
        return "Start and end time must use the same timezone convention"
    if segment_hours(start, end) <= 0:
        return "End time must be after start time"
    if segment_hours(start, end) > MAX_SHIFT_HOURS:
        return "Shift cannot exceed 24 hours"
    return None


@dataclass
class _DateAccumulator:
    """Running, unrounded totals for one calendar date of one shift."""

    date: date
    holiday: HolidayLookup
    is_rest_day: bool
    rates: HolidayRates
    hourly_rate: float
    night_diff_rate: float
    regular_hours_consumed: float = 0.0
    hours_worked: float = 0.0
    overtime_hours: float = 0.0
    night_hours: float = 0.0
    base_pay: float = 0.0
    holiday_premium: float = 0.0
    rest_day_premium: float = 0.0
    overtime_pay: float = 0.0
    night_diff_premium: float = 0.0
    total_for_date: float = 0.0
    buckets: list = field(default_factory=list)

    @property
    def is_holiday(self) -> bool:
        return self.holiday.type != "normal"

    @property
    def holiday_multiplier(self) -> float:
        return self.rates.rest_day if self.is_rest_day else self.rates.worked

    @property
    def non_rest_multiplier(self) -> float:
        return self.rates.worked if self.is_holiday else 1.0

    @property
    def overtime_multiplier(self) -> float:
        # Ratio to the date's own rate, so the OT premium stacks on the
        # holiday/rest premium instead of re-applying it
        if self.holiday_multiplier == 0:
            return 1.0
        overtime_rate = self.rates.rest_day_ot if self.is_rest_day else self.rates.overtime
        return overtime_rate / self.holiday_multiplier

    def consume(self, start: datetime, end: datetime) -> None:
        """Price one atomic interval, splitting it at the daily threshold."""
        remaining = segment_hours(start, end)
        is_night = is_night_interval(start)
        night_multiplier = 1 + self.night_diff_rate if is_night else 1.0
        cursor = start

        while remaining > _EPSILON:
            regular_left = DAILY_REGULAR_HOURS - self.regular_hours_consumed
            is_overtime = regular_left <= _EPSILON
            if is_overtime or remaining - regular_left < _EPSILON:
                slice_hours = remaining
                slice_end = end
            else:
                slice_hours = regular_left
                slice_end = add_elapsed_hours(cursor, slice_hours)

            self._add_slice(cursor, slice_end, slice_hours, is_overtime, is_night, night_multiplier)
            remaining -= slice_hours
            cursor = slice_end

    def _add_slice(
        self,
        start: datetime,
        end: datetime,
        hours: float,
        is_overtime: bool,
        is_night: bool,
        night_multiplier: float,
    ) -> None:
        holiday_multiplier = self.holiday_multiplier or 1.0
        overtime_multiplier = self.overtime_multiplier if is_overtime else 1.0

        base = hours * self.hourly_rate
        pay_before_night = base * holiday_multiplier * overtime_multiplier
        pay = pay_before_night * night_multiplier

        self.base_pay += base
        if is_overtime:
            self.overtime_hours += hours
            self.overtime_pay += base * holiday_multiplier * (overtime_multiplier - 1)
        else:
            self.hours_worked += hours
            self.regular_hours_consumed += hours

        if is_night:
            self.night_hours += hours
            self.night_diff_premium += pay_before_night * (night_multiplier - 1)

        if self.is_holiday:
            self.holiday_premium += base * (self.non_rest_multiplier - 1)

        if self.is_rest_day:
            # Premium over whatever the date pays when it is not a rest day
            self.rest_day_premium += base * (holiday_multiplier - self.non_rest_multiplier)

        self.total_for_date += pay
        self.buckets.append({
            "start": start,
            "end": end,
            "hours": hours,
            "is_night_diff": is_night,
            "is_overtime": is_overtime,
            "multipliers": {
                "holiday": holiday_multiplier,
                "overtime": overtime_multiplier,
                "night_diff": night_multiplier,
            },
            "pay": pay,
        })

    def values(self) -> dict:
        return {
            "date": self.date,
            "holiday_type": self.holiday.type,
            "holiday_name": self.holiday.name,
            "is_rest_day": self.is_rest_day,
            "hours_worked": self.hours_worked,
            "overtime_hours": self.overtime_hours,
            "night_hours": self.night_hours,
            "base_pay": self.base_pay,
            "holiday_multiplier": self.holiday_multiplier,
            "overtime_multiplier": self.overtime_multiplier,
            "night_diff_multiplier": 1 + self.night_diff_rate,
            "holiday_premium": self.holiday_premium,
            "rest_day_premium": self.rest_day_premium,
            "overtime_pay": self.overtime_pay,
            "night_diff_premium": self.night_diff_premium,
            "total_for_date": self.total_for_date,
            "detailed_hour_breakdown": self.buckets,
        }


def _is_hour_count(value) -> bool:
    return value is not None and math.isfinite(value) and value >= 0


def _rejected(shift: Shift, notes: list[str], message: str) -> PayBreakdown:
    logger.debug("Shift %s not payable: %s", shift.id, message)
    notes.append(message)
    return create_zero_pay_breakdown(notes)


def calculate_shift_pay(
    shift: Shift,
    hourly_rate: float,
    holidays: Optional[Iterable[Holiday]] = None,
    rest_day: int = 0,
    holiday_lookup: Optional[HolidayLookupFn] = None,
    options: Optional[PayOptions] = None,
    weekly_ot_hours_already_accumulated: float = 0.0,
    regular_hours_already_worked: Optional[Mapping[date, float]] = None,
    rate_table: Mapping[str, HolidayRates] = HOLIDAY_RATES,
) -> PayBreakdown:
    """
    Calculate the pay breakdown for a single shift.

    Never raises for bad input: invalid shifts return a zero breakdown whose
    notes say why. regular_hours_already_worked seeds the regular hours
    already consumed on a date by other shifts; without it every shift gets
    its own 8-hour threshold.
    """
    notes: list[str] = []

    if hourly_rate is None or not math.isfinite(hourly_rate) or hourly_rate <= 0:
        return _rejected(shift, notes, "Hourly rate must be greater than zero")
    weekly_ot_hours_already_accumulated = weekly_ot_hours_already_accumulated or 0.0
    if not _is_hour_count(weekly_ot_hours_already_accumulated):
        return _rejected(shift, notes, "Weekly overtime hours already accumulated must be zero or more")
    already_worked = regular_hours_already_worked or {}
    if not all(_is_hour_count(hours) for hours in already_worked.values()):
        return _rejected(shift, notes, "Regular hours already worked must be zero or more")

    start, end = _effective_times(shift)
    if start is None or end is None:
        return _rejected(shift, notes, "Shift is missing start or end time")
    if (start.tzinfo is None) != (end.tzinfo is None):
        return _rejected(shift, notes, "Shift start and end times must use the same timezone convention")
    if segment_hours(start, end) <= 0:
        return _rejected(shift, notes, "Shift end time must be after start time")
    if segment_hours(start, end) > MAX_SHIFT_HOURS:
        return _rejected(shift, notes, "Shift duration exceeds 24 hours and cannot be processed")

    if shift.actual_start_time is None or shift.actual_end_time is None:
        notes.append("Using scheduled shift times (no clock-in/clock-out captured)")

    options = options or PayOptions()
    apply_holiday_logic = options.apply_holiday_logic
    cutoff = options.holiday_logic_cutoff_date
    if cutoff is not None and end < datetime.combine(cutoff, time.min, tzinfo=end.tzinfo):
        apply_holiday_logic = False
        notes.append(f"Holiday premiums skipped for shifts before {cutoff.isoformat()}")
        logger.info("Holiday logic skipped for shift %s (before %s)", shift.id, cutoff)

    resolve_holiday = (
        create_holiday_resolver(holidays, holiday_lookup)
        if apply_holiday_logic
        else create_holiday_resolver()
    )

    per_date: dict[date, _DateAccumulator] = {}
    for segment in split_cross_midnight_shift(start, end):
        accumulator = per_date.get(segment.date)
        if accumulator is None:
            try:
                holiday = resolve_holiday(segment.date)
            except ValidationError:
                logger.warning("Unrecognized holiday classification for %s", segment.date)
                notes.append(
                    f"Unrecognized holiday classification for {segment.date.isoformat()}; priced as a normal day"
                )
                holiday = HolidayLookup()
            accumulator = _DateAccumulator(
                date=segment.date,
                holiday=holiday,
                is_rest_day=is_rest_day(segment.date, rest_day),
                rates=get_holiday_rates(holiday.type, rate_table),
                hourly_rate=hourly_rate,
                night_diff_rate=options.night_diff_rate,
                regular_hours_consumed=already_worked.get(segment.date, 0.0),
            )
            per_date[segment.date] = accumulator

        boundaries = build_segment_boundaries(segment.start, segment.end)
        for interval_start, interval_end in zip(boundaries, boundaries[1:]):
            accumulator.consume(interval_start, interval_end)

    if not per_date:
        return _rejected(shift, notes, "Shift produced no payable hours")

    return assemble_pay_breakdown(
        [acc.values() for acc in per_date.values()],
        notes,
        weekly_ot_hours_already_accumulated,
    )


def shift_pay_breakdown(shift: Shift, pay: PayBreakdown) -> ShiftPayBreakdown:
    return ShiftPayBreakdown(
        shift_id=shift.id,
        scheduled_start=shift.start_time,
        scheduled_end=shift.end_time,
        actual_start=shift.actual_start_time,
        actual_end=shift.actual_end_time,
        pay=pay,
    )


def _chronological_key(shift: Shift):
    start, _ = _effective_times(shift)
    if start is None:
        return (1, datetime.min)
    if start.tzinfo is not None:
        start = start.astimezone(timezone.utc)
    return (0, start.replace(tzinfo=None))


def calculate_period_pay(
    shifts: Iterable[Shift],
    hourly_rate: float,
    holidays: Optional[Iterable[Holiday]] = None,
    rest_day: int = 0,
    holiday_lookup: Optional[HolidayLookupFn] = None,
    options: Optional[PayOptions] = None,
    weekly_ot_hours_already_accumulated: float = 0.0,
    shared_daily_cap: bool = False,
    rate_table: Mapping[str, HolidayRates] = HOLIDAY_RATES,
    generated_at: Optional[datetime] = None,
) -> PayrollEntryBreakdownPayload:
    """
    Calculate every shift of a payroll period and aggregate them.

    Shifts are priced in chronological order. With shared_daily_cap, regular
    hours consumed on a date by earlier shifts count against later shifts on
    the same date. The carried-in weekly overtime counter is applied once, so
    the aggregated weekly_ot_hours_to_review is carry-in plus period overtime.
    """
    holidays = list(holidays or [])
    consumed: dict[date, float] = defaultdict(float)
    carry_in = weekly_ot_hours_already_accumulated
    per_shift: list[ShiftPayBreakdown] = []

    for shift in sorted(shifts, key=_chronological_key):
        pay = calculate_shift_pay(
            shift,
            hourly_rate,
            holidays=holidays,
            rest_day=rest_day,
            holiday_lookup=holiday_lookup,
            options=options,
            weekly_ot_hours_already_accumulated=carry_in,
            regular_hours_already_worked=dict(consumed) if shared_daily_cap else None,
            rate_table=rate_table,
        )
        if pay.per_date:
            carry_in = 0.0
        if shared_daily_cap:
            for entry in pay.per_date:
                consumed[entry.date] += entry.hours_worked
        per_shift.append(shift_pay_breakdown(shift, pay))

    logger.debug("Calculated %d shifts for period", len(per_shift))
    return build_payroll_entry_breakdown_payload(per_shift, generated_at=generated_at)
