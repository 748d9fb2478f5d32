"""
Pay breakdown assembly: the single rounding step, zero breakdowns, and
merging per-shift breakdowns into a payroll period.
"""
import math
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence, Union

from app.models.payroll import (
    DatePayBreakdown,
    HourlyBucket,
    PayBreakdown,
    PayrollEntryBreakdownPayload,
    ShiftPayBreakdown,
)

HOUR_FIELDS = ("hours_worked", "overtime_hours", "night_hours")
CURRENCY_FIELDS = (
    "base_pay",
    "holiday_premium",
    "rest_day_premium",
    "overtime_pay",
    "night_diff_premium",
    "total_for_date",
)
SUMMED_FIELDS = HOUR_FIELDS + CURRENCY_FIELDS


def _round_half_up(value: float, decimals: int = 2) -> float:
    """Round to decimals; 0.5 rounds up (so 49.785 -> 49.79)."""
    exp = 10 ** decimals
    return math.floor(value * exp + 0.5) / exp


def round_currency(value: float) -> float:
    return _round_half_up(value, 2)


def round_hours(value: float) -> float:
    return _round_half_up(value, 4)


def create_zero_pay_breakdown(notes: Optional[Iterable[str]] = None) -> PayBreakdown:
    return PayBreakdown(notes=list(notes or []))


def _build_bucket(bucket: Union[dict, HourlyBucket]) -> HourlyBucket:
    if isinstance(bucket, HourlyBucket):
        return bucket
    return HourlyBucket(
        **{
            **bucket,
            "hours": round_hours(bucket["hours"]),
            "pay": round_currency(bucket["pay"]),
        }
    )


def build_date_breakdown(values: dict) -> DatePayBreakdown:
    """
    Freeze one date's accumulated values. This is the only place hours and
    currency are rounded; callers pass unrounded sums.
    """
    rounded = dict(values)
    for field in HOUR_FIELDS:
        rounded[field] = round_hours(values[field])
    for field in CURRENCY_FIELDS:
        rounded[field] = round_currency(values[field])
    rounded["detailed_hour_breakdown"] = [
        _build_bucket(b) for b in values.get("detailed_hour_breakdown", [])
    ]
    return DatePayBreakdown(**rounded)


def assemble_pay_breakdown(
    date_values: Sequence[dict],
    notes: list[str],
    weekly_ot_hours_already_accumulated: float = 0.0,
) -> PayBreakdown:
    """Totals are taken from the unrounded per-date sums, then rounded once."""
    ordered = sorted(date_values, key=lambda v: v["date"])
    total_hours = sum(v["hours_worked"] + v["overtime_hours"] for v in ordered)
    gross_pay = sum(v["total_for_date"] for v in ordered)
    overtime_hours = sum(v["overtime_hours"] for v in ordered)

    return PayBreakdown(
        per_date=[build_date_breakdown(v) for v in ordered],
        total_hours=round_hours(total_hours),
        gross_pay=round_currency(gross_pay),
        taxes_not_handled_here_flag=True,
        notes=notes,
        weekly_ot_hours_to_review=round_hours(
            overtime_hours + (weekly_ot_hours_already_accumulated or 0.0)
        ),
    )


def merge_pay_breakdowns(breakdowns: Sequence[PayBreakdown]) -> PayBreakdown:
    """
    Combine breakdowns (e.g. every shift in a payroll period) into one.
    Same-date entries are summed field by field and their buckets concatenated;
    classification fields come from the first entry seen for the date.
    """
    if not breakdowns:
        return create_zero_pay_breakdown()

    per_date: dict = {}
    for breakdown in breakdowns:
        for entry in breakdown.per_date:
            existing = per_date.get(entry.date)
            if existing is None:
                values = entry.model_dump(exclude={"detailed_hour_breakdown"})
                values["detailed_hour_breakdown"] = list(entry.detailed_hour_breakdown)
                per_date[entry.date] = values
                continue
            for field in SUMMED_FIELDS:
                existing[field] += getattr(entry, field)
            existing["detailed_hour_breakdown"].extend(entry.detailed_hour_breakdown)

    return PayBreakdown(
        per_date=[build_date_breakdown(per_date[d]) for d in sorted(per_date)],
        total_hours=round_hours(sum(b.total_hours for b in breakdowns)),
        gross_pay=round_currency(sum(b.gross_pay for b in breakdowns)),
        taxes_not_handled_here_flag=all(b.taxes_not_handled_here_flag for b in breakdowns),
        notes=[note for b in breakdowns for note in b.notes],
        weekly_ot_hours_to_review=round_hours(
            sum(b.weekly_ot_hours_to_review for b in breakdowns)
        ),
    )


def build_payroll_entry_breakdown_payload(
    per_shift: Sequence[ShiftPayBreakdown],
    generated_at: Optional[datetime] = None,
) -> PayrollEntryBreakdownPayload:
    return PayrollEntryBreakdownPayload(
        version=1,
        generated_at=generated_at or datetime.now(timezone.utc),
        aggregated=merge_pay_breakdowns([s.pay for s in per_shift]),
        per_shift=list(per_shift),
    )
