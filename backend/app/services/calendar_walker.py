from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, timedelta

from app.schemas.timetable import parse_time_to_minutes

SATURDAY = 5


@dataclass(frozen=True)
class TimeSlot:
    start: str
    end: str

    @property
    def start_minutes(self) -> int:
        return parse_time_to_minutes(self.start)


# 12:00-13:00 is the lunch break and never a slot.
TIME_SLOTS: tuple[TimeSlot, ...] = (
    TimeSlot("09:00", "09:50"),
    TimeSlot("10:00", "10:50"),
    TimeSlot("11:00", "11:50"),
    TimeSlot("13:00", "13:50"),
    TimeSlot("14:00", "14:50"),
    TimeSlot("15:00", "15:50"),
    TimeSlot("16:00", "16:50"),
    TimeSlot("17:00", "17:50"),
)

SLOTS_BY_START = {slot.start: slot for slot in TIME_SLOTS}


def is_weekend(day: date) -> bool:
    return day.weekday() >= SATURDAY


class CalendarWalker:
    """Weekdays between two dates, both ends included.

    Every ``iter()`` starts a fresh walk, so the same walker can be consumed
    more than once.
    """

    def __init__(self, start_date: date, end_date: date) -> None:
        self.start_date = start_date
        self.end_date = end_date

    def __iter__(self) -> Iterator[date]:
        current = self.start_date
        while current <= self.end_date:
            if not is_weekend(current):
                yield current
            current += timedelta(days=1)

    def __repr__(self) -> str:
        return f"CalendarWalker({self.start_date.isoformat()}..{self.end_date.isoformat()})"
