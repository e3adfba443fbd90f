from __future__ import annotations

import heapq
import logging
from collections.abc import Iterator, Sequence
from datetime import date

from ._types import (
    DailyPattern,
    DateSpan,
    MonthlyPattern,
    OrdinalPosition,
    RecurrencePattern,
    Weekday,
    WeeklyPattern,
    add_days,
    add_months,
    days_in_month,
    first_of_month,
    monday_of,
    months_between,
    weeks_between,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Interval Alignment (Reference Date)
# =============================================================================
# Every pattern is anchored to its reference date, which is phase zero of the
# interval cycle:
#
#   daily:   (date - reference_date).days        % interval == 0
#   weekly:  weeks(monday(reference), monday(date)) % interval == 0
#   monthly: months(reference, date)              % interval == 0
#
# Offsets must also be non-negative. Weekly and monthly offsets are counted
# in whole ISO weeks / calendar months, so days earlier in the reference week
# or month than the reference date itself are still in cycle zero.
# =============================================================================

# =============================================================================
# Search Limits
# =============================================================================
# Monthly searches walk at most MAX_MONTH_CYCLES interval cycles. A month
# that cannot resolve any configured day (e.g. only day 31 configured and an
# interval landing on 30-day months) is skipped, so some patterns need several
# cycles; leap-day patterns need at most a few. Hitting the limit is treated
# as exhaustion.
# =============================================================================

MAX_MONTH_CYCLES = 400


# --- Validity ---


def is_valid(pattern: RecurrencePattern, d: date) -> bool:
    match pattern:
        case DailyPattern(interval=interval, reference_date=ref):
            offset = (d - ref).days
            return offset >= 0 and offset % interval == 0
        case WeeklyPattern(interval=interval, reference_date=ref, days_of_week=days):
            if Weekday.of(d) not in days:
                return False
            weeks = weeks_between(ref, d)
            return weeks >= 0 and weeks % interval == 0
        case MonthlyPattern(interval=interval, reference_date=ref):
            month_offset = months_between(ref, d)
            if month_offset < 0 or month_offset % interval != 0:
                return False
            return d.day in get_days_of_month(pattern, d)
    return False  # pragma: no cover


# --- Next occurrence ---


def get_first(pattern: RecurrencePattern, from_: date) -> date | None:
    """Earliest valid date on or after `from_`, or None if there is none."""
    match pattern:
        case DailyPattern(interval=interval, reference_date=ref):
            return _first_daily(interval, ref, from_)
        case WeeklyPattern(interval=interval, reference_date=ref, days_of_week=days):
            return _first_weekly(interval, ref, days, from_)
        case MonthlyPattern():
            return _next_monthly(pattern, from_, allow_current=True)
    return None  # pragma: no cover


def get_next(pattern: RecurrencePattern, current: date) -> date | None:
    """Earliest valid date strictly after `current`, or None if there is none."""
    match pattern:
        case DailyPattern() | WeeklyPattern():
            following = add_days(current, 1)
            if following is None:
                return None
            return get_first(pattern, following)
        case MonthlyPattern():
            return _next_monthly(pattern, current, allow_current=False)
    return None  # pragma: no cover


def _first_daily(interval: int, ref: date, from_: date) -> date | None:
    start = max(from_, ref)
    remainder = (start - ref).days % interval
    if remainder == 0:
        return start
    return add_days(start, interval - remainder)


def _first_weekly(
    interval: int,
    ref: date,
    days: set[Weekday],
    from_: date,
) -> date | None:
    if not days:
        return None

    sorted_days = sorted(days, key=lambda wd: wd.number)
    anchor_monday = monday_of(ref)
    start = max(from_, anchor_monday)
    current_monday: date | None = monday_of(start)

    # The first aligned week either holds a candidate or the next one does
    for _ in range(2):
        if current_monday is None:
            return None
        weeks = weeks_between(anchor_monday, current_monday)

        if weeks % interval == 0:
            for wd in sorted_days:
                target_date = add_days(current_monday, wd.number - 1)
                if target_date is None:
                    return None
                if target_date >= start:
                    return target_date

        remainder = weeks % interval
        skip_weeks = interval if remainder == 0 else interval - remainder
        current_monday = add_days(current_monday, skip_weeks * 7)

    return None


# --- Monthly day resolution ---


def get_days_of_month(pattern: MonthlyPattern, d: date) -> set[int]:
    """Resolve the configured days for the month containing `d`.

    Explicit days beyond the month's length are dropped rather than clamped
    or rolled over. Ordinal weekdays resolve to one day each.
    """
    last_day = days_in_month(d.year, d.month)
    days = {day for day in pattern.days_of_month if day <= last_day}

    for ordinal, weekday in pattern.days_of_week:
        if ordinal == OrdinalPosition.LAST:
            days.add(_last_weekday_in_month(d.year, d.month, weekday))
        else:
            days.add(_nth_weekday_of_month(d.year, d.month, weekday, ordinal.to_n()))

    return days


def _nth_weekday_of_month(year: int, month: int, weekday: Weekday, n: int) -> int:
    first_dow = date(year, month, 1).isoweekday()
    return 1 + (weekday.number - first_dow) % 7 + (n - 1) * 7


def _last_weekday_in_month(year: int, month: int, weekday: Weekday) -> int:
    last_day = days_in_month(year, month)
    last_dow = date(year, month, last_day).isoweekday()
    return last_day - (last_dow - weekday.number) % 7


# --- Monthly date spans ---


def get_current_day(pattern: MonthlyPattern, current: date) -> DateSpan:
    """Position of `current` in its interval cycle: (months into cycle, day index)."""
    month_offset = months_between(pattern.reference_date, current)
    return DateSpan(month_offset % pattern.interval, current.day - 1)


def get_date_span_until_next_day(
    pattern: MonthlyPattern,
    current: date,
    allow_current: bool,
) -> DateSpan | None:
    """Distance from `current` to the next configured day.

    Candidates are the resolved days of the current cycle's month plus the
    first resolved day of the next cycle's month. Returns None when none of
    them lies ahead, which happens when the next cycle's month resolves no
    days at all.
    """
    position = get_current_day(pattern, current)
    cycle_month = add_months(current, -position.major)

    spans: list[DateSpan] = []
    if cycle_month is not None:
        spans.extend(
            DateSpan(0, day - 1) for day in sorted(get_days_of_month(pattern, cycle_month))
        )
        next_cycle_month = add_months(cycle_month, pattern.interval)
        if next_cycle_month is not None:
            next_days = get_days_of_month(pattern, next_cycle_month)
            if next_days:
                spans.append(DateSpan(pattern.interval, min(next_days) - 1))

    for span in spans:
        if span > position or (allow_current and span == position):
            return span - position
    return None


def apply_date_span(current: date, span: DateSpan) -> date | None:
    """Move `span.major` months and `span.minor` days from `current`."""
    month = add_months(current, span.major)
    if month is None:
        return None
    return date(month.year, month.month, current.day + span.minor)


def _next_monthly(pattern: MonthlyPattern, current: date, allow_current: bool) -> date | None:
    if not pattern.days_of_month and not pattern.days_of_week:
        return None

    floor = first_of_month(pattern.reference_date)
    if current < floor:
        current, allow_current = floor, True

    cursor: date | None = current
    for _ in range(MAX_MONTH_CYCLES):
        if cursor is None:
            return None
        span = get_date_span_until_next_day(pattern, cursor, allow_current)
        if span is not None:
            return apply_date_span(cursor, span)

        # Next cycle's month has no usable day: restart from that month
        position = get_current_day(pattern, cursor)
        cursor = add_months(cursor, pattern.interval - position.major)
        allow_current = True

    logger.debug("monthly pattern %s exhausted after %d cycles", pattern, MAX_MONTH_CYCLES)
    return None


# --- Union of patterns ---


def merge_dates(patterns: Sequence[RecurrencePattern], start: date) -> Iterator[date]:
    """Lazy, strictly increasing union of all pattern dates on or after `start`."""
    heap: list[tuple[date, int]] = []
    for index, pattern in enumerate(patterns):
        first = get_first(pattern, start)
        if first is not None:
            heap.append((first, index))
    heapq.heapify(heap)

    last: date | None = None
    while heap:
        d, index = heap[0]
        nxt = get_next(patterns[index], d)
        if nxt is None:
            heapq.heappop(heap)
        else:
            heapq.heapreplace(heap, (nxt, index))
        if d != last:
            last = d
            yield d
