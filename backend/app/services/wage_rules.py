"""
Fixed DOLE wage constants: holiday/rest-day multipliers, night differential
window and the daily overtime threshold.
"""
from types import MappingProxyType
from typing import Mapping, NamedTuple

RATES_VERSION = "2025-01-01"


class HolidayRates(NamedTuple):
    not_worked: float
    worked: float
    overtime: float
    rest_day: float
    rest_day_ot: float


# Multipliers over the hourly rate, per holiday classification
HOLIDAY_RATES: Mapping[str, HolidayRates] = MappingProxyType({
    "regular": HolidayRates(
        not_worked=1.0,
        worked=2.0,
        overtime=2.6,      # 200% x 130%
        rest_day=2.6,
        rest_day_ot=3.38,
    ),
    "special_non_working": HolidayRates(
        not_worked=0.0,    # no work, no pay
        worked=1.3,
        overtime=1.69,     # 130% x 130%
        rest_day=1.5,
        rest_day_ot=1.95,  # 150% x 130%
    ),
    "special_working": HolidayRates(
        not_worked=1.0,
        worked=1.0,
        overtime=1.25,
        rest_day=1.3,
        rest_day_ot=1.69,
    ),
    "normal": HolidayRates(
        not_worked=0.0,
        worked=1.0,
        overtime=1.25,
        rest_day=1.3,
        rest_day_ot=1.69,
    ),
})

# Night differential: 10PM-6AM, +10%
NIGHT_DIFF_START = 22
NIGHT_DIFF_END = 6
NIGHT_DIFF_RATE = 0.10

# Regular hours per calendar date before overtime kicks in
DAILY_REGULAR_HOURS = 8

MAX_SHIFT_HOURS = 24


def get_holiday_rates(
    holiday_type: str,
    rate_table: Mapping[str, HolidayRates] = HOLIDAY_RATES,
) -> HolidayRates:
    """Rates for a classification; unknown classifications price as normal days."""
    return rate_table.get(holiday_type) or rate_table["normal"]


def is_night_diff_hour(hour: float) -> bool:
    return hour >= NIGHT_DIFF_START or hour < NIGHT_DIFF_END
