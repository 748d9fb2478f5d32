"""
Pytest tests for rounding, merging breakdowns and period payloads.
"""
from datetime import date, datetime, timezone

from app.models.payroll import PayBreakdown
from app.services.breakdown import (
    build_date_breakdown,
    build_payroll_entry_breakdown_payload,
    create_zero_pay_breakdown,
    merge_pay_breakdowns,
    round_currency,
    round_hours,
)
from app.services.calculator import calculate_period_pay, calculate_shift_pay, shift_pay_breakdown

RATE = 100


def test_round_currency_half_up():
    assert round_currency(0.125) == 0.13
    assert round_currency(1079.9999999999998) == 1080
    assert round_currency(12.500000000000011) == 12.5


def test_round_hours_four_decimals():
    assert round_hours(1 / 3) == 0.3333
    assert round_hours(2.99999999) == 3.0


def test_date_breakdown_rounds_accumulated_values():
    day = build_date_breakdown({
        "date": date(2025, 1, 6),
        "holiday_type": "normal",
        "is_rest_day": False,
        "hours_worked": 7.99999999,
        "overtime_hours": 0.0,
        "night_hours": 1 / 3,
        "base_pay": 799.999999,
        "holiday_multiplier": 1.0,
        "overtime_multiplier": 1.25,
        "night_diff_multiplier": 1.1,
        "holiday_premium": 0.0,
        "rest_day_premium": 0.0,
        "overtime_pay": 0.0,
        "night_diff_premium": 3.3333333,
        "total_for_date": 803.333332,
    })
    assert day.hours_worked == 8
    assert day.night_hours == 0.3333
    assert day.base_pay == 800
    assert day.night_diff_premium == 3.33
    assert day.total_for_date == 803.33
    assert day.detailed_hour_breakdown == []


def test_zero_breakdown():
    zero = create_zero_pay_breakdown(["Hourly rate must be greater than zero"])
    assert zero.per_date == []
    assert zero.gross_pay == 0
    assert zero.total_hours == 0
    assert zero.weekly_ot_hours_to_review == 0
    assert zero.taxes_not_handled_here_flag is True
    assert zero.notes == ["Hourly rate must be greater than zero"]


def test_merge_of_nothing_is_zero():
    assert merge_pay_breakdowns([]) == create_zero_pay_breakdown()


def test_merge_sums_same_date(make_shift):
    """Two 4 hr shifts on Monday → one date, 8 hrs, $800, 8 buckets"""
    morning = calculate_shift_pay(make_shift(datetime(2025, 1, 6, 9), hours=4, clocked=False), RATE)
    afternoon = calculate_shift_pay(make_shift(datetime(2025, 1, 6, 14), hours=4, clocked=False), RATE)

    merged = merge_pay_breakdowns([morning, afternoon])

    assert len(merged.per_date) == 1
    day = merged.per_date[0]
    assert day.hours_worked == 8
    assert day.base_pay == 800
    assert day.total_for_date == 800
    assert len(day.detailed_hour_breakdown) == 8
    assert merged.total_hours == 8
    assert merged.gross_pay == 800
    assert len(merged.notes) == 2


def test_merge_sorts_dates(make_shift):
    later = calculate_shift_pay(make_shift(datetime(2025, 1, 8, 9)), RATE)
    earlier = calculate_shift_pay(make_shift(datetime(2025, 1, 6, 9)), RATE)

    merged = merge_pay_breakdowns([later, earlier])
    assert [d.date for d in merged.per_date] == [date(2025, 1, 6), date(2025, 1, 8)]
    assert merged.gross_pay == 1600


def test_merge_taxes_flag_requires_every_input():
    flagged = create_zero_pay_breakdown()
    unflagged = PayBreakdown(taxes_not_handled_here_flag=False)
    assert merge_pay_breakdowns([flagged, flagged]).taxes_not_handled_here_flag is True
    assert merge_pay_breakdowns([flagged, unflagged]).taxes_not_handled_here_flag is False


def test_merge_is_associative(make_shift):
    a = calculate_shift_pay(make_shift(datetime(2025, 1, 6, 21), hours=10), RATE)
    b = calculate_shift_pay(make_shift(datetime(2025, 1, 7, 9, 15), hours=9.5, clocked=False), RATE)
    c = calculate_shift_pay(make_shift(datetime(2025, 1, 7, 20), hours=7), RATE)

    flat = merge_pay_breakdowns([a, b, c])
    nested = merge_pay_breakdowns([a, merge_pay_breakdowns([b, c])])
    assert flat.model_dump() == nested.model_dump()


def test_payload_wraps_per_shift_results(make_shift):
    shifts = [make_shift(datetime(2025, 1, 6, 9), shift_id="s1"), make_shift(datetime(2025, 1, 7, 9), shift_id="s2")]
    per_shift = [shift_pay_breakdown(s, calculate_shift_pay(s, RATE)) for s in shifts]
    generated_at = datetime(2025, 1, 15, tzinfo=timezone.utc)

    payload = build_payroll_entry_breakdown_payload(per_shift, generated_at=generated_at)

    assert payload.version == 1
    assert payload.generated_at == generated_at
    assert [p.shift_id for p in payload.per_shift] == ["s1", "s2"]
    assert payload.per_shift[0].scheduled_start == datetime(2025, 1, 6, 9)
    assert payload.aggregated.gross_pay == 1600


def test_payload_serializes_with_camel_case_keys(make_shift):
    shift = make_shift(datetime(2025, 1, 6, 9))
    payload = build_payroll_entry_breakdown_payload([shift_pay_breakdown(shift, calculate_shift_pay(shift, RATE))])

    data = payload.model_dump(mode="json", by_alias=True)
    assert set(data) == {"version", "generatedAt", "aggregated", "perShift"}
    day = data["aggregated"]["perDate"][0]
    assert day["date"] == "2025-01-06"
    assert "detailedHourBreakdown" in day
    assert "nightDiff" in day["detailedHourBreakdown"][0]["multipliers"]
    assert data["aggregated"]["taxesNotHandledHereFlag"] is True


# ---- Period calculation ----
def test_period_uses_per_shift_threshold_by_default(make_shift):
    """Two 6 hr shifts on one date, independent 8 hr caps → no OT, $1200"""
    shifts = [make_shift(datetime(2025, 1, 6, 13), hours=6, shift_id="pm"), make_shift(datetime(2025, 1, 6, 6), hours=6, shift_id="am")]

    payload = calculate_period_pay(shifts, RATE)

    assert payload.aggregated.gross_pay == 1200
    assert payload.aggregated.per_date[0].overtime_hours == 0
    assert [p.shift_id for p in payload.per_shift] == ["am", "pm"]


def test_period_shared_daily_cap(make_shift):
    """Shared cap: the later shift gets 2 regular + 4 OT hrs → $1300"""
    shifts = [make_shift(datetime(2025, 1, 6, 13), hours=6, shift_id="pm"), make_shift(datetime(2025, 1, 6, 6), hours=6, shift_id="am")]

    payload = calculate_period_pay(shifts, RATE, shared_daily_cap=True)

    by_id = {p.shift_id: p.pay for p in payload.per_shift}
    assert by_id["am"].per_date[0].overtime_hours == 0
    assert by_id["pm"].per_date[0].overtime_hours == 4
    assert payload.aggregated.per_date[0].overtime_hours == 4
    assert payload.aggregated.gross_pay == 1300


def test_period_weekly_overtime_counter(make_shift):
    """3 hrs carried in + 2 OT hrs in the period → 5 hrs to review"""
    shifts = [make_shift(datetime(2025, 1, 6, 8), hours=10, shift_id="long"), make_shift(datetime(2025, 1, 7, 9), shift_id="short")]

    payload = calculate_period_pay(shifts, RATE, weekly_ot_hours_already_accumulated=3)

    assert payload.aggregated.weekly_ot_hours_to_review == 5
    assert payload.aggregated.total_hours == 18


def test_period_keeps_rejected_shifts_with_notes(make_shift):
    shifts = [make_shift(datetime(2025, 1, 6, 9), shift_id="ok"), make_shift(datetime(2025, 1, 7, 9), hours=30, shift_id="bad")]

    payload = calculate_period_pay(shifts, RATE)

    assert payload.aggregated.gross_pay == 800
    assert "Shift duration exceeds 24 hours and cannot be processed" in payload.aggregated.notes
    assert len(payload.per_shift) == 2
