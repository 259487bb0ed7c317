"""Timezone-normalized instants and intervals.

An :class:`Instant` stores an absolute UTC moment truncated to the minute and
remembers the UTC offset it was created with. The offset never takes part in
comparisons; it only shapes the *view* used for formatting, calendar arithmetic
(``add``, ``range``) and day enumeration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from functools import cached_property
from typing import Any, Optional, Tuple, Union

import pendulum

from ..config import get_settings
from ..errors import InvalidRange, InvalidValue
from .enums import Inclusivity, TimeUnit

UnitLike = Union[TimeUnit, str]
ModeLike = Union[Inclusivity, str]

_UNIT_SECONDS = {
    TimeUnit.SECONDS: 1,
    TimeUnit.MINUTES: 60,
    TimeUnit.HOURS: 60 * 60,
    TimeUnit.DAYS: 24 * 60 * 60,
    TimeUnit.WEEKS: 7 * 24 * 60 * 60,
}
_RANGE_UNITS = (TimeUnit.WEEKS, TimeUnit.MONTHS, TimeUnit.YEARS)


def _unit(value: UnitLike) -> TimeUnit:
    try:
        return TimeUnit(value)
    except ValueError as exc:
        raise InvalidValue(f"Unsupported time unit: {value!r}") from exc


def _mode(value: ModeLike) -> Inclusivity:
    try:
        return Inclusivity(value)
    except ValueError as exc:
        raise InvalidValue(f"Unsupported interval mode: {value!r}") from exc


def _to_pendulum(raw: Any, tz: str) -> pendulum.DateTime:
    if raw is None:
        return pendulum.now(tz)
    if isinstance(raw, Instant):
        return raw.view()
    if isinstance(raw, bool):
        raise InvalidValue(f"Unsupported datetime value: {raw!r}")
    if isinstance(raw, datetime):
        if raw.tzinfo is None:
            return pendulum.instance(raw, tz=tz)
        return pendulum.instance(raw)
    if isinstance(raw, date):
        return pendulum.datetime(raw.year, raw.month, raw.day, tz=tz)
    if isinstance(raw, (int, float)):
        # epoch milliseconds
        return pendulum.from_timestamp(raw / 1000, tz=tz)
    if isinstance(raw, str):
        if not raw.strip():
            raise InvalidValue("Empty datetime string")
        parsed = pendulum.parse(raw.strip(), tz=tz)
        if not isinstance(parsed, pendulum.DateTime):
            raise InvalidValue(f"Value does not describe a point in time: {raw!r}")
        return parsed
    raise InvalidValue(f"Unsupported datetime value: {raw!r}")


def _month_diff(start: pendulum.DateTime, end: pendulum.DateTime) -> int:
    months = (end.year - start.year) * 12 + (end.month - start.month)
    anchor = start.add(months=months)
    if end >= start and anchor > end:
        months -= 1
    elif end < start and anchor < end:
        months += 1
    return months


@dataclass(frozen=True, order=True, slots=True, repr=False)
class Instant:
    """Immutable point in time at minute resolution."""

    moment: pendulum.DateTime
    utc_offset: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.moment, datetime) or self.moment.tzinfo is None:
            raise InvalidValue(f"Instant requires an aware datetime, got {self.moment!r}")
        normalized = pendulum.instance(self.moment).in_timezone("UTC").start_of("minute")
        object.__setattr__(self, "moment", normalized)

    @classmethod
    def parse(cls, raw: Any = None, *, tz: Optional[str] = None) -> "Instant":
        """Build an instant from a string, datetime, date, epoch milliseconds or another instant.

        Naive values are read in ``tz`` (the configured default timezone when omitted);
        ``None`` means now.
        """

        zone = tz or get_settings().time.timezone
        try:
            source = _to_pendulum(raw, zone)
        except InvalidValue:
            raise
        except (ValueError, TypeError, OverflowError, OSError, KeyError) as exc:
            raise InvalidValue(f"Invalid datetime value: {raw!r}") from exc
        offset = source.utcoffset() or timedelta(0)
        return cls(moment=source, utc_offset=int(offset.total_seconds() // 60))

    @classmethod
    def now(cls, *, tz: Optional[str] = None) -> "Instant":
        return cls.parse(None, tz=tz)

    def view(self) -> pendulum.DateTime:
        """The absolute moment shifted by the stored offset."""

        return self.moment.in_timezone(pendulum.fixed_timezone(self.utc_offset * 60))

    def to_datetime(self) -> datetime:
        return self.view()

    def isoformat(self) -> str:
        return self.view().isoformat()

    def timestamp(self) -> int:
        """Unix time in milliseconds."""

        return int(self.moment.timestamp()) * 1000

    def format(self, template: str = "YYYY-MM-DD") -> str:
        return self.view().format(template)

    def diff(self, other: "Instant", unit: UnitLike = TimeUnit.SECONDS) -> int:
        """Signed distance from this instant to ``other`` (``other - self``), truncated toward zero."""

        resolved = _unit(unit)
        if resolved in _UNIT_SECONDS:
            seconds = (other.moment - self.moment).total_seconds()
            return int(seconds / _UNIT_SECONDS[resolved])
        start = self.view()
        months = _month_diff(start, other.moment.in_timezone(start.timezone))
        if resolved is TimeUnit.YEARS:
            return int(months / 12)
        return months

    def add(self, value: Union[int, float], unit: UnitLike = TimeUnit.SECONDS) -> "Instant":
        resolved = _unit(unit)
        view = self.view()
        if resolved in _UNIT_SECONDS:
            shifted = view + timedelta(seconds=value * _UNIT_SECONDS[resolved])
        else:
            if value != int(value):
                raise InvalidValue(f"Cannot add a fractional number of {resolved.value}: {value!r}")
            shifted = view.add(**{resolved.value: int(value)})
        return Instant.parse(shifted)

    def is_equal(self, other: "Instant") -> bool:
        return self.moment == other.moment

    def is_before(self, other: "Instant") -> bool:
        return self.moment < other.moment

    def is_on_or_before(self, other: "Instant") -> bool:
        return self.is_equal(other) or self.is_before(other)

    def is_after(self, other: "Instant") -> bool:
        return self.moment > other.moment

    def is_on_or_after(self, other: "Instant") -> bool:
        return self.is_equal(other) or self.is_after(other)

    def is_between(self, interval: "Interval", mode: ModeLike = Inclusivity.CLOSED) -> bool:
        if _mode(mode) is Inclusivity.OPEN:
            return self.is_after(interval.start) and self.is_before(interval.end)
        return self.is_on_or_after(interval.start) and self.is_on_or_before(interval.end)

    def range(self, unit: UnitLike) -> "Interval":
        """Interval covering the week, month or year this instant falls in, at day granularity."""

        resolved = _unit(unit)
        if resolved not in _RANGE_UNITS:
            raise InvalidValue(f"range() supports weeks, months or years, not {resolved.value}")
        view = self.view()
        if resolved is TimeUnit.WEEKS:
            week_start = get_settings().time.week_start_index
            start = view.start_of("day").subtract(days=(view.weekday() - week_start) % 7)
            end = start.add(days=6)
        elif resolved is TimeUnit.MONTHS:
            start = view.start_of("month")
            end = view.end_of("month").start_of("day")
        else:
            start = view.start_of("year")
            end = view.end_of("year").start_of("day")
        return Interval(Instant.parse(start), Instant.parse(end))

    def __repr__(self) -> str:
        return f"Instant({self.isoformat()!r})"

    def __str__(self) -> str:
        return self.isoformat()


@dataclass(frozen=True, repr=False)
class Interval:
    """Closed span between two instants; ``start`` is never after ``end``."""

    start: Instant
    end: Instant

    def __post_init__(self) -> None:
        if self.start.is_after(self.end):
            raise InvalidRange(f"End date must be after start date ({self.start} > {self.end})")

    @classmethod
    def of(cls, start: Any, end: Any, *, tz: Optional[str] = None) -> "Interval":
        return cls(Instant.parse(start, tz=tz), Instant.parse(end, tz=tz))

    @cached_property
    def datetimes(self) -> Tuple[Instant, ...]:
        days = self.start.diff(self.end, TimeUnit.DAYS)
        return tuple(self.start.add(index, TimeUnit.DAYS) for index in range(days))

    def duration(self, unit: UnitLike = TimeUnit.SECONDS) -> int:
        return self.start.diff(self.end, unit)

    def contains(self, instant: Instant, mode: ModeLike = Inclusivity.CLOSED) -> bool:
        return instant.is_between(self, mode)

    def is_overlap(self, other: "Interval", mode: ModeLike = Inclusivity.CLOSED) -> bool:
        """True when either endpoint of this interval lies inside ``other``.

        This is endpoint containment, so ``a.is_overlap(b)`` and ``b.is_overlap(a)``
        can disagree when one interval strictly encloses the other.
        """

        return self.start.is_between(other, mode) or self.end.is_between(other, mode)

    def __repr__(self) -> str:
        return f"Interval({self.start.isoformat()!r}, {self.end.isoformat()!r})"


__all__ = ["Instant", "Interval"]
