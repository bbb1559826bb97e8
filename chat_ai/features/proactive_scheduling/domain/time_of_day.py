"""
Time-of-day value type.

Times are held as minutes since midnight so that "+2 hours" style arithmetic
is plain integer math; display strings ("2:30 PM") only appear at the edges.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time

MINUTES_PER_DAY = 24 * 60

_DISPLAY_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp])\.?\s*[Mm]\.?\s*$")


@dataclass(frozen=True, slots=True, order=True)
class TimeOfDay:
    minutes: int

    def __post_init__(self):
        if not 0 <= self.minutes < MINUTES_PER_DAY:
            raise ValueError(f"Minutes out of range: {self.minutes}")

    @classmethod
    def from_clock(cls, hour: int, minute: int = 0, meridiem: str | None = None) -> TimeOfDay:
        """
        Build from clock components.

        With a meridiem ("am"/"pm", any case or dotted) the hour must be 1-12;
        without one it is read as a 24-hour value.
        """
        if not 0 <= minute <= 59:
            raise ValueError(f"Invalid minute: {minute}")

        if meridiem is None:
            if not 0 <= hour <= 23:
                raise ValueError(f"Invalid hour: {hour}")
            return cls(hour * 60 + minute)

        suffix = meridiem.replace(".", "").strip().lower()
        if suffix not in ("am", "pm"):
            raise ValueError(f"Invalid meridiem: {meridiem}")
        if not 1 <= hour <= 12:
            raise ValueError(f"Invalid 12-hour value: {hour}")

        hour24 = hour % 12
        if suffix == "pm":
            hour24 += 12
        return cls(hour24 * 60 + minute)

    @classmethod
    def parse(cls, value: str) -> TimeOfDay:
        """Parse a display string such as ``"2:30 PM"``."""
        match = _DISPLAY_RE.match(value or "")
        if not match:
            raise ValueError(f"Unrecognised time string: {value!r}")
        hour, minute, half = match.groups()
        return cls.from_clock(int(hour), int(minute), f"{half}m")

    @classmethod
    def from_time(cls, value: time) -> TimeOfDay:
        return cls(value.hour * 60 + value.minute)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def shifted(self, minutes: int) -> TimeOfDay:
        """Shift by ``minutes`` wrapping around midnight."""
        return TimeOfDay((self.minutes + minutes) % MINUTES_PER_DAY)

    def to_time(self) -> time:
        return time(self.hour, self.minute)

    def on(self, day: date) -> datetime:
        """Combine with a calendar date into a naive datetime."""
        return datetime.combine(day, self.to_time())

    def display(self) -> str:
        hour12 = self.hour % 12 or 12
        half = "AM" if self.hour < 12 else "PM"
        return f"{hour12}:{self.minute:02d} {half}"

    def __str__(self) -> str:
        return self.display()
