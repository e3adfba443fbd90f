"""Date enumeration, occurrence caps and validity caching on `Recurrence`."""

from __future__ import annotations

import itertools
from datetime import date, datetime, timedelta

import pytest

from recurring_dates import (
    DailyPattern,
    MonthlyPattern,
    OrdinalPosition,
    Recurrence,
    RecurrencePattern,
    Weekday,
    WeeklyPattern,
    is_valid,
)


def parse_date(s: str) -> date:
    """Parse '2022-01-01' into a date."""
    return date.fromisoformat(s)


def parse_dates(*values: str) -> list[date]:
    return [parse_date(s) for s in values]


class TestConstruction:
    @pytest.mark.parametrize("cache_dates", [True, False])
    def test_cache_dates(self, cache_dates: bool) -> None:
        recurrence = Recurrence(date(2022, 1, 1), date(2022, 1, 11), None, cache_dates)
        assert recurrence.cache_dates is cache_dates

    def test_defaults(self) -> None:
        recurrence = Recurrence()
        assert recurrence.start_date == date.min
        assert recurrence.end_date == date.max
        assert recurrence.occurrences is None
        assert recurrence.cache_dates is False
        assert recurrence.patterns == ()

    def test_datetimes_are_stripped(self) -> None:
        recurrence = Recurrence(datetime(2022, 1, 1, 13, 45), datetime(2022, 1, 4, 8, 0))
        assert recurrence.start_date == date(2022, 1, 1)
        assert recurrence.end_date == date(2022, 1, 4)

    def test_patterns_keep_their_order(self) -> None:
        first = DailyPattern(2, date(2022, 1, 1))
        second = DailyPattern(3, date(2022, 1, 1))
        assert Recurrence(patterns=[first, second]).patterns == (first, second)


class TestGetDates:
    def test_no_pattern(self) -> None:
        recurrence = Recurrence(date(2022, 1, 1), date(2022, 1, 11))
        assert list(recurrence.get_dates()) == []

    def test_single_pattern(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(date(2022, 1, 1), date(2022, 1, 4), patterns=[every_other_day])
        assert list(recurrence.get_dates()) == parse_dates("2022-01-01", "2022-01-03")

    @pytest.mark.parametrize(
        "second",
        [DailyPattern(3, date(2022, 1, 1)), DailyPattern(5, date(2022, 1, 4))],
    )
    def test_double_pattern(self, every_other_day: DailyPattern, second: DailyPattern) -> None:
        recurrence = Recurrence(
            date(2022, 1, 1), date(2022, 1, 4), patterns=[every_other_day, second]
        )
        assert list(recurrence.get_dates()) == parse_dates(
            "2022-01-01", "2022-01-03", "2022-01-04"
        )

    def test_from_to_outside_start_end(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(date(2022, 1, 1), date(2022, 1, 4), patterns=[every_other_day])
        assert list(recurrence.get_dates(date.min, date.max)) == parse_dates(
            "2022-01-01", "2022-01-03"
        )

    def test_from_to_inside_start_end(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(patterns=[every_other_day])
        assert list(recurrence.get_dates(date(2022, 1, 1), date(2022, 1, 4))) == parse_dates(
            "2022-01-01", "2022-01-03"
        )

    def test_offset_reference_date(self) -> None:
        recurrence = Recurrence(
            date(2022, 1, 1), date(2022, 1, 4), patterns=[DailyPattern(2, date(2022, 1, 2))]
        )
        assert list(recurrence.get_dates()) == parse_dates("2022-01-02", "2022-01-04")

    def test_window_outside_bounds_is_empty(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(date(2022, 1, 1), date(2022, 1, 4), patterns=[every_other_day])
        assert list(recurrence.get_dates(date(2022, 2, 1))) == []
        assert list(recurrence.get_dates(to=date(2021, 12, 31))) == []

    def test_reversed_window_is_empty(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(patterns=[every_other_day])
        assert list(recurrence.get_dates(date(2022, 1, 9), date(2022, 1, 1))) == []

    def test_datetime_window(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(patterns=[every_other_day])
        dates = list(recurrence.get_dates(datetime(2022, 1, 3, 18, 0), datetime(2022, 1, 5, 1, 0)))
        assert dates == parse_dates("2022-01-03", "2022-01-05")
        assert all(type(d) is date for d in dates)

    def test_union_of_pattern_kinds(self) -> None:
        recurrence = Recurrence(
            date(2022, 1, 1),
            date(2022, 1, 31),
            patterns=[
                WeeklyPattern(1, date(2022, 1, 3), {Weekday.FRIDAY}),
                MonthlyPattern(
                    1, date(2022, 1, 1), {1, 14}, {(OrdinalPosition.LAST, Weekday.MONDAY)}
                ),
            ],
        )
        assert list(recurrence.get_dates()) == parse_dates(
            "2022-01-01",
            "2022-01-07",
            "2022-01-14",
            "2022-01-21",
            "2022-01-28",
            "2022-01-31",
        )

    def test_is_restartable(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(date(2022, 1, 1), date(2022, 3, 1), 10, True, [every_other_day])
        assert list(recurrence.get_dates()) == list(recurrence.get_dates())
        assert list(recurrence.get_dates(date(2022, 1, 6))) == list(
            recurrence.get_dates(date(2022, 1, 6))
        )


class TestOccurrences:
    def test_occurrences(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(date(2022, 1, 1), occurrences=2, patterns=[every_other_day])
        assert list(recurrence.get_dates()) == parse_dates("2022-01-01", "2022-01-03")

    def test_occurrences_from_after_start_date(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(date(2022, 1, 1), occurrences=5, patterns=[every_other_day])
        assert list(recurrence.get_dates()) == parse_dates(
            "2022-01-01", "2022-01-03", "2022-01-05", "2022-01-07", "2022-01-09"
        )
        assert list(recurrence.get_dates(date(2022, 1, 6))) == parse_dates(
            "2022-01-07", "2022-01-09"
        )

    def test_window_never_extends_the_sequence(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(date(2022, 1, 1), occurrences=5, patterns=[every_other_day])
        full = list(recurrence.get_dates())
        for offset in range(14):
            from_ = date(2022, 1, 1) + timedelta(days=offset)
            assert list(recurrence.get_dates(from_)) == [d for d in full if d >= from_]

    def test_overlapping_patterns_count_once(self) -> None:
        recurrence = Recurrence(
            date(2022, 1, 1),
            occurrences=4,
            patterns=[DailyPattern(2, date(2022, 1, 1)), DailyPattern(3, date(2022, 1, 1))],
        )
        assert list(recurrence.get_dates()) == parse_dates(
            "2022-01-01", "2022-01-03", "2022-01-04", "2022-01-05"
        )

    def test_zero_occurrences(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(date(2022, 1, 1), occurrences=0, patterns=[every_other_day])
        assert list(recurrence.get_dates()) == []

    def test_end_date_bounds_before_cap(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(
            date(2022, 1, 1), date(2022, 1, 4), occurrences=5, patterns=[every_other_day]
        )
        assert list(recurrence.get_dates()) == parse_dates("2022-01-01", "2022-01-03")


class TestIsValidInAnyPattern:
    _recurrence = Recurrence(
        patterns=[DailyPattern(2, date(2022, 1, 1)), DailyPattern(3, date(2022, 1, 1))]
    )

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2022-01-01", True),
            ("2022-01-02", False),
            ("2022-01-03", True),
            ("2022-01-04", True),
            ("2022-01-05", True),
            ("2022-01-06", False),
        ],
    )
    def test_is_valid_in_any_pattern(self, value: str, expected: bool) -> None:
        assert self._recurrence.is_valid_in_any_pattern(parse_date(value)) is expected

    def test_ignores_time_of_day(self) -> None:
        assert self._recurrence.is_valid_in_any_pattern(datetime(2022, 1, 3, 23, 59))

    def test_ignores_recurrence_bounds(self, every_other_day: DailyPattern) -> None:
        recurrence = Recurrence(date(2022, 1, 1), date(2022, 1, 4), patterns=[every_other_day])
        assert recurrence.is_valid_in_any_pattern(date(2022, 2, 2))

    def test_no_pattern(self) -> None:
        assert not Recurrence().is_valid_in_any_pattern(date(2022, 1, 1))

    @pytest.mark.parametrize("cache_dates", [True, False])
    def test_equals_or_of_patterns(
        self, sample_patterns: list[RecurrencePattern], cache_dates: bool
    ) -> None:
        recurrence = Recurrence(cache_dates=cache_dates, patterns=sample_patterns)
        for offset in range(400):
            d = date(2021, 12, 1) + timedelta(days=offset)
            expected = any(is_valid(p, d) for p in sample_patterns)
            assert recurrence.is_valid_in_any_pattern(d) is expected
            assert recurrence.is_valid_in_any_pattern(d) is expected

    def test_caches_when_cache_dates_is_true(self) -> None:
        pattern = MonthlyPattern(1, date(2022, 1, 1))
        recurrence = Recurrence(cache_dates=True, patterns=[pattern])

        first_result = recurrence.is_valid_in_any_pattern(date(2022, 1, 1))
        pattern.days_of_month.add(1)

        assert recurrence.is_valid_in_any_pattern(date(2022, 1, 1)) is first_result

    def test_cache_key_is_the_date(self) -> None:
        pattern = MonthlyPattern(1, date(2022, 1, 1))
        recurrence = Recurrence(cache_dates=True, patterns=[pattern])

        first_result = recurrence.is_valid_in_any_pattern(datetime(2022, 1, 1, 8, 0))
        pattern.days_of_month.add(1)

        assert recurrence.is_valid_in_any_pattern(datetime(2022, 1, 1, 20, 0)) is first_result

    def test_does_not_cache_when_cache_dates_is_false(self) -> None:
        pattern = MonthlyPattern(1, date(2022, 1, 1))
        recurrence = Recurrence(cache_dates=False, patterns=[pattern])

        first_result = recurrence.is_valid_in_any_pattern(date(2022, 1, 1))
        pattern.days_of_month.add(1)

        assert recurrence.is_valid_in_any_pattern(date(2022, 1, 1)) is not first_result

    def test_cached_dates_are_enumerated(self) -> None:
        pattern = MonthlyPattern(1, date(2022, 1, 1), {1, 15})
        recurrence = Recurrence(
            date(2022, 1, 1), date(2022, 1, 31), cache_dates=True, patterns=[pattern]
        )

        assert recurrence.is_valid_in_any_pattern(date(2022, 1, 1)) is True
        pattern.days_of_month.discard(1)

        assert list(recurrence.get_dates()) == parse_dates("2022-01-01", "2022-01-15")

    def test_cached_dates_count_towards_occurrences(self) -> None:
        pattern = MonthlyPattern(1, date(2022, 1, 1), {1, 15, 20})
        recurrence = Recurrence(
            date(2022, 1, 1), occurrences=2, cache_dates=True, patterns=[pattern]
        )

        assert recurrence.is_valid_in_any_pattern(date(2022, 1, 1)) is True
        pattern.days_of_month.discard(1)

        assert list(recurrence.get_dates(date(2022, 1, 10))) == parse_dates("2022-01-15")


class TestProperties:
    def test_dates_strictly_increasing_within_bounds(
        self, sample_patterns: list[RecurrencePattern]
    ) -> None:
        start, end = date(2022, 1, 10), date(2023, 6, 30)
        recurrence = Recurrence(start, end, patterns=sample_patterns)
        dates = list(recurrence.get_dates())
        assert dates
        for earlier, later in itertools.pairwise(dates):
            assert later > earlier
        assert all(start <= d <= end for d in dates)

    def test_matches_day_by_day_scan(self, sample_patterns: list[RecurrencePattern]) -> None:
        start, end = date(2022, 1, 1), date(2022, 12, 31)
        recurrence = Recurrence(start, end, patterns=sample_patterns)
        scanned = [
            start + timedelta(days=i)
            for i in range((end - start).days + 1)
            if recurrence.is_valid_in_any_pattern(start + timedelta(days=i))
        ]
        assert list(recurrence.get_dates()) == scanned
