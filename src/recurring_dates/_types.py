from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from enum import Enum

from ._error import RecurrenceError


class Weekday(Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def number(self) -> int:
        """ISO 8601 day number: Monday=1, Sunday=7."""
        return _WEEKDAY_NUMBERS[self]

    @classmethod
    def of(cls, d: date) -> Weekday:
        return _NUMBER_TO_WEEKDAY[d.isoweekday()]

    def __str__(self) -> str:
        return self.value


_WEEKDAY_NUMBERS = {
    Weekday.MONDAY: 1,
    Weekday.TUESDAY: 2,
    Weekday.WEDNESDAY: 3,
    Weekday.THURSDAY: 4,
    Weekday.FRIDAY: 5,
    Weekday.SATURDAY: 6,
    Weekday.SUNDAY: 7,
}

_NUMBER_TO_WEEKDAY = {v: k for k, v in _WEEKDAY_NUMBERS.items()}


class OrdinalPosition(Enum):
    FIRST = "first"
    SECOND = "second"
    THIRD = "third"
    FOURTH = "fourth"
    LAST = "last"

    def to_n(self) -> int:
        return _ORDINAL_TO_N[self]

    def __str__(self) -> str:
        return self.value


_ORDINAL_TO_N: dict[OrdinalPosition, int] = {
    OrdinalPosition.FIRST: 1,
    OrdinalPosition.SECOND: 2,
    OrdinalPosition.THIRD: 3,
    OrdinalPosition.FOURTH: 4,
}


# --- Date span ---


@dataclass(frozen=True, slots=True, order=True)
class DateSpan:
    """Position or distance inside a pattern's interval cycle.

    ``major`` counts whole cycle units (months for monthly patterns) and
    ``minor`` is a day offset. Arithmetic is component-wise: ``minor`` is a
    raw offset and is never carried into ``major``.
    """

    major: int
    minor: int

    def __add__(self, other: DateSpan) -> DateSpan:
        return DateSpan(self.major + other.major, self.minor + other.minor)

    def __sub__(self, other: DateSpan) -> DateSpan:
        return DateSpan(self.major - other.major, self.minor - other.minor)

    def __str__(self) -> str:
        return f"({self.major}, {self.minor})"


# --- Recurrence patterns ---


@dataclass(slots=True)
class DailyPattern:
    interval: int
    reference_date: date

    def __post_init__(self) -> None:
        self.reference_date = as_date(self.reference_date, "reference_date")
        check_pattern(self)


@dataclass(slots=True)
class WeeklyPattern:
    interval: int
    reference_date: date
    days_of_week: set[Weekday] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.reference_date = as_date(self.reference_date, "reference_date")
        self.days_of_week = set(self.days_of_week)
        check_pattern(self)


@dataclass(slots=True)
class MonthlyPattern:
    interval: int
    reference_date: date
    days_of_month: set[int] = field(default_factory=set)
    days_of_week: set[tuple[OrdinalPosition, Weekday]] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.reference_date = as_date(self.reference_date, "reference_date")
        self.days_of_month = set(self.days_of_month)
        self.days_of_week = set(self.days_of_week)
        check_pattern(self)


RecurrencePattern = DailyPattern | WeeklyPattern | MonthlyPattern


def check_pattern(pattern: object) -> None:
    """Raise RecurrenceError unless `pattern` is a well-formed pattern variant."""
    match pattern:
        case DailyPattern() | WeeklyPattern() | MonthlyPattern():
            pass
        case _:
            raise RecurrenceError.config(
                f"expected a daily, weekly or monthly pattern, got {type(pattern).__name__}",
                "patterns",
            )

    interval = pattern.interval
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
        raise RecurrenceError.config(
            f"interval must be a positive integer, got {interval!r}", "interval"
        )

    match pattern:
        case WeeklyPattern(days_of_week=days):
            for wd in days:
                if not isinstance(wd, Weekday):
                    raise RecurrenceError.config(f"not a weekday: {wd!r}", "days_of_week")
        case MonthlyPattern(days_of_month=days, days_of_week=ordinal_days):
            for day in days:
                if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= 31:
                    raise RecurrenceError.config(
                        f"day of month must be between 1 and 31, got {day!r}", "days_of_month"
                    )
            for entry in ordinal_days:
                match entry:
                    case (OrdinalPosition(), Weekday()):
                        pass
                    case _:
                        raise RecurrenceError.config(
                            f"expected an (ordinal, weekday) pair, got {entry!r}",
                            "days_of_week",
                        )


# --- Helper functions ---


def as_date(value: object, name: str = "date") -> date:
    """Strip the time component from `value`."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise RecurrenceError.config(f"{name} must be a date, got {type(value).__name__}", name)


def days_in_month(year: int, month: int) -> int:
    _, last = calendar.monthrange(year, month)
    return last


def months_between(a: date, b: date) -> int:
    return b.year * 12 + b.month - (a.year * 12 + a.month)


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def add_months(d: date, n: int) -> date | None:
    """First day of the month `n` months after `d`'s month, None past the calendar range."""
    year, month_index = divmod(d.year * 12 + d.month - 1 + n, 12)
    if not MINYEAR <= year <= MAXYEAR:
        return None
    return date(year, month_index + 1, 1)


def add_days(d: date, n: int) -> date | None:
    try:
        return d + timedelta(days=n)
    except OverflowError:
        return None


def monday_of(d: date) -> date:
    # date.min is a Monday, so this never underflows
    return d - timedelta(days=d.isoweekday() - 1)


def weeks_between(a: date, b: date) -> int:
    return (monday_of(b) - monday_of(a)).days // 7
