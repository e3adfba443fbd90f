from __future__ import annotations

from datetime import date

import pytest

from recurring_dates import (
    DailyPattern,
    MonthlyPattern,
    OrdinalPosition,
    RecurrencePattern,
    Weekday,
    WeeklyPattern,
)


@pytest.fixture
def every_other_day() -> DailyPattern:
    return DailyPattern(2, date(2022, 1, 1))


@pytest.fixture
def sample_patterns() -> list[RecurrencePattern]:
    """One pattern of each kind, with intervals and month-end edge days."""
    return [
        DailyPattern(3, date(2022, 1, 1)),
        WeeklyPattern(2, date(2022, 1, 5), {Weekday.MONDAY, Weekday.SUNDAY}),
        MonthlyPattern(
            1,
            date(2022, 1, 1),
            {15, 31},
            {(OrdinalPosition.FIRST, Weekday.FRIDAY), (OrdinalPosition.LAST, Weekday.MONDAY)},
        ),
        MonthlyPattern(5, date(2021, 11, 20), {29, 30}),
    ]
