from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from ._types import (
    DailyPattern,
    MonthlyPattern,
    OrdinalPosition,
    RecurrencePattern,
    Weekday,
    WeeklyPattern,
)

if TYPE_CHECKING:
    from ._recurrence import Recurrence

_ORDINAL_ORDER = list(OrdinalPosition)


def display(recurrence: Recurrence) -> str:
    if recurrence.patterns:
        out = " and ".join(display_pattern(p) for p in recurrence.patterns)
    else:
        out = "never"

    if recurrence.start_date != date.min:
        out += f" from {recurrence.start_date.isoformat()}"

    if recurrence.end_date != date.max:
        out += f" until {recurrence.end_date.isoformat()}"

    if recurrence.occurrences is not None:
        n = recurrence.occurrences
        out += f" for {n} {'occurrence' if n == 1 else 'occurrences'}"

    return out


def display_pattern(pattern: RecurrencePattern) -> str:
    match pattern:
        case DailyPattern(interval=interval, reference_date=ref):
            out = "every day" if interval == 1 else f"every {interval} days"

        case WeeklyPattern(interval=interval, reference_date=ref, days_of_week=days):
            out = "every week" if interval == 1 else f"every {interval} weeks"
            if days:
                out += f" on {_format_weekdays(days)}"

        case MonthlyPattern(
            interval=interval,
            reference_date=ref,
            days_of_month=days,
            days_of_week=ordinal_days,
        ):
            out = "every month" if interval == 1 else f"every {interval} months"
            parts = [f"{d}{_ordinal_suffix(d)}" for d in sorted(days)]
            parts.extend(
                f"{o} {w}"
                for o, w in sorted(
                    ordinal_days, key=lambda e: (_ORDINAL_ORDER.index(e[0]), e[1].number)
                )
            )
            if parts:
                out += " on the " + ", ".join(parts)

        case _:
            # Should be unreachable
            raise ValueError(f"unknown pattern type: {type(pattern)}")  # pragma: no cover

    return f"{out} starting {ref.isoformat()}"


def _format_weekdays(days: set[Weekday]) -> str:
    return ", ".join(str(d) for d in sorted(days, key=lambda wd: wd.number))


def _ordinal_suffix(n: int) -> str:
    mod100 = n % 100
    if 11 <= mod100 <= 13:
        return "th"
    match n % 10:
        case 1:
            return "st"
        case 2:
            return "nd"
        case 3:
            return "rd"
        case _:
            return "th"
