from __future__ import annotations

import logging

from ._builder import (
    DailyPatternBuilder,
    MonthlyPatternBuilder,
    PatternBuilder,
    PatternBuilderStart,
    RecurrenceBuilder,
    WeeklyPatternBuilder,
)
from ._display import display, display_pattern
from ._error import RecurrenceError, RecurrenceErrorKind
from ._eval import (
    apply_date_span,
    get_current_day,
    get_date_span_until_next_day,
    get_days_of_month,
    get_first,
    get_next,
    is_valid,
    merge_dates,
)
from ._recurrence import Recurrence
from ._types import (
    DailyPattern,
    DateSpan,
    MonthlyPattern,
    OrdinalPosition,
    RecurrencePattern,
    Weekday,
    WeeklyPattern,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Recurrence",
    "RecurrenceBuilder",
    "PatternBuilder",
    "PatternBuilderStart",
    "DailyPatternBuilder",
    "WeeklyPatternBuilder",
    "MonthlyPatternBuilder",
    "RecurrenceError",
    "RecurrenceErrorKind",
    "RecurrencePattern",
    "DailyPattern",
    "WeeklyPattern",
    "MonthlyPattern",
    "DateSpan",
    "Weekday",
    "OrdinalPosition",
    "is_valid",
    "get_first",
    "get_next",
    "get_days_of_month",
    "get_current_day",
    "get_date_span_until_next_day",
    "apply_date_span",
    "merge_dates",
    "display",
    "display_pattern",
]
