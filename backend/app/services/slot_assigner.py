from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
import logging

from app.schemas.timetable import Professor, ScheduleEntry, Subject
from app.services.availability import AvailabilityFilter
from app.services.calendar_walker import TIME_SLOTS, TimeSlot

DAILY_SUBJECT_HOUR_CAP = 3

logger = logging.getLogger(__name__)


def entry_id(day: date, slot: TimeSlot, professor_id: str) -> str:
    return f"{day.isoformat()}-{slot.start}-{professor_id}"


@dataclass
class SchedulingRun:
    """Mutable state owned by a single scheduling run."""

    remaining_hours: dict[str, int]
    occupied: set[tuple[str, date, str]] = field(default_factory=set)
    # (professor_id, subject_id) -> hours given on the current date
    daily_count: Counter[tuple[str, str]] = field(default_factory=Counter)
    entries: list[ScheduleEntry] = field(default_factory=list)

    @classmethod
    def start(cls, subjects: Iterable[Subject]) -> "SchedulingRun":
        return cls(remaining_hours={subject.id: subject.total_hours for subject in subjects})

    def begin_day(self) -> None:
        self.daily_count.clear()

    def is_occupied(self, professor_id: str, day: date, slot: TimeSlot) -> bool:
        return (professor_id, day, slot.start) in self.occupied

    def prerequisites_complete(self, subject: Subject) -> bool:
        # Prerequisites outside the run have no counter and count as complete.
        return all(self.remaining_hours.get(prerequisite_id, 0) == 0 for prerequisite_id in subject.prerequisite_ids)

    def record(self, subject: Subject, professor_id: str, day: date, slot: TimeSlot) -> ScheduleEntry:
        entry = ScheduleEntry(
            id=entry_id(day, slot, professor_id),
            subject_id=subject.id,
            professor_id=professor_id,
            date=day,
            start_time=slot.start,
            end_time=slot.end,
        )
        self.entries.append(entry)
        self.occupied.add((professor_id, day, slot.start))
        self.remaining_hours[subject.id] -= 1
        self.daily_count[(professor_id, subject.id)] += 1
        return entry

    @property
    def unscheduled_hours(self) -> dict[str, int]:
        return {subject_id: hours for subject_id, hours in self.remaining_hours.items() if hours > 0}

    @property
    def is_complete(self) -> bool:
        return not self.unscheduled_hours


class SlotAssigner:
    """First-fit greedy assignment of subject hours to (date, slot, professor).

    Dates ascend, slots follow the fixed table, professors follow input order
    and subjects follow ``subject_order``. The first subject that passes every
    check takes the professor's slot and is never reconsidered.

    Prerequisite completion is read from the shared counters at the moment a
    subject is checked. A dependent can therefore start in the same slot in
    which another professor finishes its last prerequisite hour.
    """

    def __init__(
        self,
        *,
        subjects: list[Subject],
        professors: list[Professor],
        subject_order: list[str],
        availability: AvailabilityFilter,
        daily_cap: int = DAILY_SUBJECT_HOUR_CAP,
        time_slots: tuple[TimeSlot, ...] = TIME_SLOTS,
    ) -> None:
        subject_map = {subject.id: subject for subject in subjects}
        self.ordered_subjects = [subject_map[subject_id] for subject_id in subject_order]
        self.professors = professors
        self.availability = availability
        self.daily_cap = daily_cap
        self.time_slots = time_slots

        professor_ids = {professor.id for professor in professors}
        for subject in subjects:
            if subject.professor_id is None:
                logger.warning("Subject %s has no professor and cannot be scheduled", subject.id)
            elif subject.professor_id not in professor_ids:
                logger.warning(
                    "Subject %s references unknown professor %s and cannot be scheduled",
                    subject.id,
                    subject.professor_id,
                )

    def assign(self, days: Iterable[date]) -> SchedulingRun:
        run = SchedulingRun.start(self.ordered_subjects)
        for day in days:
            if self.availability.is_full_day_holiday(day):
                continue
            run.begin_day()
            for slot in self.time_slots:
                if self.availability.is_slot_blocked(day, slot):
                    continue
                for professor in self.professors:
                    if self.availability.is_on_vacation(professor.id, day):
                        continue
                    if run.is_occupied(professor.id, day, slot):
                        continue
                    subject = self._first_eligible_subject(run, professor.id)
                    if subject is not None:
                        run.record(subject, professor.id, day, slot)
        return run

    def _first_eligible_subject(self, run: SchedulingRun, professor_id: str) -> Subject | None:
        for subject in self.ordered_subjects:
            if subject.professor_id != professor_id:
                continue
            if run.remaining_hours[subject.id] == 0:
                continue
            if not run.prerequisites_complete(subject):
                continue
            if run.daily_count[(professor_id, subject.id)] >= self.daily_cap:
                continue
            return subject
        return None
