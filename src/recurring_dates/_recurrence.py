from __future__ import annotations

import heapq
import logging
from collections.abc import Iterable, Iterator
from datetime import date, datetime

from ._display import display
from ._error import RecurrenceError
from ._eval import is_valid, merge_dates
from ._types import RecurrencePattern, as_date, check_pattern

logger = logging.getLogger(__name__)


class Recurrence:
    """A bounded, optionally capped union of recurrence patterns.

    Occurrences are always counted from `start_date`, so the cap does not
    move when `get_dates` is asked for a narrower window.

    With `cache_dates` enabled, `is_valid_in_any_pattern` remembers its answer
    per date for the lifetime of the instance, even if the patterns are
    changed afterwards. The cache is not synchronised; share a caching
    instance between threads only behind a lock.
    """

    _start_date: date
    _end_date: date
    _occurrences: int | None
    _patterns: tuple[RecurrencePattern, ...]
    _cache: dict[date, bool] | None

    def __init__(
        self,
        start_date: date | datetime = date.min,
        end_date: date | datetime = date.max,
        occurrences: int | None = None,
        cache_dates: bool = False,
        patterns: Iterable[RecurrencePattern] = (),
    ) -> None:
        self._start_date = as_date(start_date, "start_date")
        self._end_date = as_date(end_date, "end_date")
        if self._start_date > self._end_date:
            raise RecurrenceError.config(
                f"start date {self._start_date} is after end date {self._end_date}",
                "start_date",
            )

        if occurrences is not None and (
            isinstance(occurrences, bool) or not isinstance(occurrences, int) or occurrences < 0
        ):
            raise RecurrenceError.config(
                f"occurrences must be a non-negative integer, got {occurrences!r}",
                "occurrences",
            )
        self._occurrences = occurrences

        self._patterns = tuple(patterns)
        for pattern in self._patterns:
            check_pattern(pattern)

        self._cache = {} if cache_dates else None
        logger.debug("created recurrence: %s", self)

    @property
    def start_date(self) -> date:
        return self._start_date

    @property
    def end_date(self) -> date:
        return self._end_date

    @property
    def occurrences(self) -> int | None:
        return self._occurrences

    @property
    def cache_dates(self) -> bool:
        return self._cache is not None

    @property
    def patterns(self) -> tuple[RecurrencePattern, ...]:
        return self._patterns

    def is_valid_in_any_pattern(self, d: date | datetime) -> bool:
        key = as_date(d)
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("validity cache hit for %s", key)
                return cached

        result = any(is_valid(pattern, key) for pattern in self._patterns)

        if self._cache is not None:
            self._cache[key] = result
        return result

    def get_dates(
        self,
        from_: date | datetime | None = None,
        to: date | datetime | None = None,
    ) -> Iterator[date]:
        """Returns a lazy iterator of dates in `[from_, to]` clipped to the recurrence bounds.

        Each call starts a fresh iteration. Dates skipped because they fall
        before `from_` still count towards `occurrences`. With `cache_dates`
        enabled, dates cached as valid are produced even if the patterns no
        longer generate them.
        """
        lower = self._start_date
        if from_ is not None:
            lower = max(as_date(from_, "from_"), lower)
        upper = self._end_date
        if to is not None:
            upper = min(as_date(to, "to"), upper)
        for pattern in self._patterns:
            check_pattern(pattern)
        return self._dates_between(lower, upper)

    def _dates_between(self, lower: date, upper: date) -> Iterator[date]:
        if not self._patterns or lower > upper:
            return

        limit = self._occurrences
        # Without a cap nothing before the window matters
        scan_from = self._start_date if limit is not None else lower

        candidates: Iterator[date] = merge_dates(self._patterns, scan_from)
        if self._cache is not None:
            cached = sorted(d for d, ok in self._cache.items() if ok and d >= scan_from)
            candidates = heapq.merge(candidates, cached)

        count = 0
        last: date | None = None
        for d in candidates:
            if d == last:
                continue
            last = d
            if d > upper:
                return
            if limit is not None and count >= limit:
                return
            if not self.is_valid_in_any_pattern(d):
                continue
            count += 1
            if d >= lower:
                yield d

    def __str__(self) -> str:
        return display(self)

    def __repr__(self) -> str:
        return f"Recurrence({display(self)!r})"
