"""
Holiday resolution: date -> classification and display name.
"""
from datetime import date
from typing import Callable, Iterable, Optional

from app.models.payroll import Holiday, HolidayLookup, HolidayLookupFn

HolidayResolver = Callable[[date], HolidayLookup]

_NORMAL_DAY = HolidayLookup(type="normal")


def normalize_holiday_lookup(result) -> HolidayLookup:
    """Accepts None, a bare classification string, a dict or a HolidayLookup."""
    if not result:
        return _NORMAL_DAY
    if isinstance(result, HolidayLookup):
        return result
    if isinstance(result, str):
        return HolidayLookup(type=result)
    return HolidayLookup.model_validate(result)


def create_holiday_resolver(
    holidays: Optional[Iterable[Holiday]] = None,
    lookup: Optional[HolidayLookupFn] = None,
) -> HolidayResolver:
    """
    Build the resolver used for one calculation.
    A caller-supplied lookup wins over the holiday list; the list is keyed by
    date once, and the last entry for a date wins.
    """
    if lookup is not None:
        return lambda d: normalize_holiday_lookup(lookup(d))

    table = {h.date: HolidayLookup(type=h.type, name=h.name) for h in holidays or ()}
    if table:
        return lambda d: table.get(d, _NORMAL_DAY)

    return lambda d: _NORMAL_DAY


def get_holiday_type(d: date, holidays: Iterable[Holiday]) -> str:
    return create_holiday_resolver(holidays)(d).type


# Proclamation calendar for 2025 (Eid ul-Adha date is estimated)
_PH_HOLIDAYS_2025 = [
    ("New Year's Day", (1, 1), "regular"),
    ("Eid ul-Fitr", (4, 1), "regular"),
    ("Araw ng Kagitingan", (4, 9), "regular"),
    ("Maundy Thursday", (4, 17), "regular"),
    ("Good Friday", (4, 18), "regular"),
    ("Labor Day", (5, 1), "regular"),
    ("Independence Day", (6, 12), "regular"),
    ("National Heroes Day", (8, 25), "regular"),
    ("Bonifacio Day", (11, 30), "regular"),
    ("Christmas Day", (12, 25), "regular"),
    ("Rizal Day", (12, 30), "regular"),
    ("Chinese New Year", (1, 29), "special_non_working"),
    ("Black Saturday", (4, 19), "special_non_working"),
    ("Ninoy Aquino Day", (8, 21), "special_non_working"),
    ("All Saints' Day Eve", (10, 31), "special_non_working"),
    ("All Saints' Day", (11, 1), "special_non_working"),
    ("Feast of the Immaculate Conception", (12, 8), "special_non_working"),
    ("Christmas Eve", (12, 24), "special_non_working"),
    ("Last Day of the Year", (12, 31), "special_non_working"),
    ("Eid ul-Adha", (6, 7), "regular"),
]

_BUILTIN_CALENDARS = {2025: _PH_HOLIDAYS_2025}


def get_philippine_holidays(year: int) -> list[Holiday]:
    """Built-in national holiday calendar; empty for years without one."""
    entries = _BUILTIN_CALENDARS.get(year, [])
    return [
        Holiday(date=date(year, month, day), type=holiday_type, name=name, year=year)
        for name, (month, day), holiday_type in entries
    ]


def get_builtin_holidays() -> list[Holiday]:
    return [h for year in sorted(_BUILTIN_CALENDARS) for h in get_philippine_holidays(year)]
