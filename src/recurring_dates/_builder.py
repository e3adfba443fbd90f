from __future__ import annotations

from datetime import date, datetime
from typing import TypeVar

from ._error import RecurrenceError
from ._recurrence import Recurrence
from ._types import (
    DailyPattern,
    MonthlyPattern,
    OrdinalPosition,
    RecurrencePattern,
    Weekday,
    WeeklyPattern,
    as_date,
)

_B = TypeVar("_B", bound="PatternBuilder")


class RecurrenceBuilder:
    """Fluent construction of a `Recurrence`.

    Example::

        recurrence = (
            RecurrenceBuilder()
            .from_(date(2022, 1, 1))
            .until(date(2022, 12, 31))
            .every(2).weeks().on(Weekday.MONDAY, Weekday.FRIDAY)
            .monthly().on_the(OrdinalPosition.LAST, Weekday.FRIDAY)
            .build()
        )

    Pattern builders forward the recurrence-level methods back to this
    builder, so a chain can keep adding patterns.
    """

    start_date: date
    end_date: date
    occurrences: int | None
    cache: bool
    pattern_builders: list[PatternBuilder]

    def __init__(self) -> None:
        self.start_date = date.min
        self.end_date = date.max
        self.occurrences = None
        self.cache = False
        self.pattern_builders = []

    def from_(self, start_date: date | datetime) -> RecurrenceBuilder:
        self.start_date = as_date(start_date, "start_date")
        return self

    def until(self, end_date: date | datetime) -> RecurrenceBuilder:
        self.end_date = as_date(end_date, "end_date")
        return self

    def stop_after(self, occurrences: int) -> RecurrenceBuilder:
        self.occurrences = occurrences
        return self

    def cache_dates(self, enabled: bool = True) -> RecurrenceBuilder:
        self.cache = enabled
        return self

    def daily(self) -> DailyPatternBuilder:
        return self.every(1).days()

    def weekly(self) -> WeeklyPatternBuilder:
        return self.every(1).weeks()

    def monthly(self) -> MonthlyPatternBuilder:
        return self.every(1).months()

    def every(self, interval: int) -> PatternBuilderStart:
        if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
            raise RecurrenceError.config(
                f"interval must be a positive integer, got {interval!r}", "interval"
            )
        return PatternBuilderStart(self, interval)

    def build(self) -> Recurrence:
        return Recurrence(
            self.start_date,
            self.end_date,
            self.occurrences,
            self.cache,
            [b.build_pattern() for b in self.pattern_builders],
        )


class PatternBuilderStart:
    """Result of `RecurrenceBuilder.every`, picks the unit of the interval."""

    def __init__(self, builder: RecurrenceBuilder, interval: int) -> None:
        self._builder = builder
        self._interval = interval

    def days(self) -> DailyPatternBuilder:
        return self._register(DailyPatternBuilder(self._builder, self._interval))

    def weeks(self) -> WeeklyPatternBuilder:
        return self._register(WeeklyPatternBuilder(self._builder, self._interval))

    def months(self) -> MonthlyPatternBuilder:
        return self._register(MonthlyPatternBuilder(self._builder, self._interval))

    def _register(self, pattern_builder: _B) -> _B:
        self._builder.pattern_builders.append(pattern_builder)
        return pattern_builder


class PatternBuilder:
    interval: int
    reference_date: date | None

    def __init__(self, builder: RecurrenceBuilder, interval: int) -> None:
        self._builder = builder
        self.interval = interval
        self.reference_date = None

    def _reference(self) -> date:
        # Defaults to the recurrence start as it stands at build time
        if self.reference_date is not None:
            return self.reference_date
        return self._builder.start_date

    def build_pattern(self) -> RecurrencePattern:
        raise NotImplementedError

    # --- Forwarded to the owning builder ---

    def from_(self, start_date: date | datetime) -> RecurrenceBuilder:
        return self._builder.from_(start_date)

    def until(self, end_date: date | datetime) -> RecurrenceBuilder:
        return self._builder.until(end_date)

    def stop_after(self, occurrences: int) -> RecurrenceBuilder:
        return self._builder.stop_after(occurrences)

    def cache_dates(self, enabled: bool = True) -> RecurrenceBuilder:
        return self._builder.cache_dates(enabled)

    def daily(self) -> DailyPatternBuilder:
        return self._builder.daily()

    def weekly(self) -> WeeklyPatternBuilder:
        return self._builder.weekly()

    def monthly(self) -> MonthlyPatternBuilder:
        return self._builder.monthly()

    def every(self, interval: int) -> PatternBuilderStart:
        return self._builder.every(interval)

    def build(self) -> Recurrence:
        return self._builder.build()


class DailyPatternBuilder(PatternBuilder):
    def starting(self, reference_date: date | datetime) -> DailyPatternBuilder:
        self.reference_date = as_date(reference_date, "reference_date")
        return self

    def build_pattern(self) -> DailyPattern:
        return DailyPattern(self.interval, self._reference())


class WeeklyPatternBuilder(PatternBuilder):
    days_of_week: set[Weekday]

    def __init__(self, builder: RecurrenceBuilder, interval: int) -> None:
        super().__init__(builder, interval)
        self.days_of_week = set()

    def starting(self, reference_date: date | datetime) -> WeeklyPatternBuilder:
        self.reference_date = as_date(reference_date, "reference_date")
        return self

    def on(self, *days: Weekday) -> WeeklyPatternBuilder:
        self.days_of_week.update(days)
        return self

    def build_pattern(self) -> WeeklyPattern:
        return WeeklyPattern(self.interval, self._reference(), set(self.days_of_week))


class MonthlyPatternBuilder(PatternBuilder):
    days_of_month: set[int]
    days_of_week: set[tuple[OrdinalPosition, Weekday]]

    def __init__(self, builder: RecurrenceBuilder, interval: int) -> None:
        super().__init__(builder, interval)
        self.days_of_month = set()
        self.days_of_week = set()

    def starting(self, reference_date: date | datetime) -> MonthlyPatternBuilder:
        self.reference_date = as_date(reference_date, "reference_date")
        return self

    def on_days(self, *days: int) -> MonthlyPatternBuilder:
        self.days_of_month.update(days)
        return self

    def on_the(self, ordinal: OrdinalPosition, *weekdays: Weekday) -> MonthlyPatternBuilder:
        self.days_of_week.update((ordinal, wd) for wd in weekdays)
        return self

    def build_pattern(self) -> MonthlyPattern:
        return MonthlyPattern(
            self.interval,
            self._reference(),
            set(self.days_of_month),
            set(self.days_of_week),
        )
