"""
Business calendar helpers.

Operational dates (loading date, distribution date, payment date, expense
date) are stored as plain calendar dates.  "Today" is the injected clock's
instant shifted into the business's fixed UTC offset, so a distribution
recorded at 23:30 local time lands on the local day, not the UTC one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from poultry_kernel.domain.clock import Clock
from poultry_kernel.exceptions import InvalidInputError


@dataclass(frozen=True)
class BusinessCalendar:
    """Maps clock instants onto business days."""

    utc_offset_minutes: int = 0

    @property
    def tz(self) -> timezone:
        return timezone(timedelta(minutes=self.utc_offset_minutes))

    def day_of(self, instant: datetime) -> date:
        """Calendar day that contains ``instant`` in business time."""
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return instant.astimezone(self.tz).date()

    def today(self, clock: Clock) -> date:
        return self.day_of(clock.now())


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive range of calendar days.  Either bound may be open (None).

    An all-open range means "all time".
    """

    start: date | None = None
    end: date | None = None

    def __post_init__(self):
        if self.start is not None and self.end is not None and self.start > self.end:
            raise InvalidInputError(
                "end", f"start ({self.start}) must not be after end ({self.end})"
            )

    @classmethod
    def single_day(cls, day: date) -> DateRange:
        return cls(start=day, end=day)

    @property
    def is_all_time(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


def week_bounds(reference_day: date) -> tuple[date, date]:
    """
    Sunday-started week containing ``reference_day``.

    Returns:
        (first_day, last_day), both inclusive.
    """
    # date.weekday(): Monday=0 .. Sunday=6
    days_since_sunday = (reference_day.weekday() + 1) % 7
    first = reference_day - timedelta(days=days_since_sunday)
    return first, first + timedelta(days=6)
