from __future__ import annotations

from collections import defaultdict
from datetime import date

from app.schemas.timetable import Holiday, Professor, Vacation, parse_time_to_minutes
from app.services.calendar_walker import TimeSlot


class AvailabilityFilter:
    """Holiday and vacation blocks for (date, slot) and (professor, date)."""

    def __init__(self, holidays: list[Holiday], professors: list[Professor]) -> None:
        self.holidays_by_date: dict[date, list[Holiday]] = defaultdict(list)
        for holiday in holidays:
            self.holidays_by_date[holiday.date].append(holiday)
        self.vacations_by_professor: dict[str, list[Vacation]] = {
            professor.id: list(professor.vacations) for professor in professors
        }

    def is_full_day_holiday(self, day: date) -> bool:
        return any(holiday.is_full_day for holiday in self.holidays_by_date.get(day, ()))

    def is_slot_blocked(self, day: date, slot: TimeSlot) -> bool:
        if self.is_full_day_holiday(day):
            return True
        slot_start = slot.start_minutes
        for holiday in self.holidays_by_date.get(day, ()):
            # Only the slot start is compared; the window is half-open.
            window_start = parse_time_to_minutes(holiday.start_time)
            window_end = parse_time_to_minutes(holiday.end_time)
            if window_start <= slot_start < window_end:
                return True
        return False

    def is_on_vacation(self, professor_id: str | None, day: date) -> bool:
        if professor_id is None:
            return False
        return any(vacation.covers(day) for vacation in self.vacations_by_professor.get(professor_id, ()))
