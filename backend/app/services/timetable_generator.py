from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
import logging
from time import perf_counter

from app.schemas.timetable import Holiday, Professor, ScheduleEntry, Subject
from app.services.availability import AvailabilityFilter
from app.services.calendar_walker import CalendarWalker
from app.services.course_graph import CourseGraph
from app.services.slot_assigner import DAILY_SUBJECT_HOUR_CAP, SlotAssigner

logger = logging.getLogger(__name__)


class ScheduleErrorKind(str, Enum):
    CYCLIC_PREREQUISITE = "cyclic_prerequisite"
    INSUFFICIENT_SCHEDULING_WINDOW = "insufficient_scheduling_window"


ERROR_MESSAGES = {
    ScheduleErrorKind.CYCLIC_PREREQUISITE: (
        "Prerequisite relationships contain a cycle, so the timetable cannot be generated. "
        "Check the subject configuration."
    ),
    ScheduleErrorKind.INSUFFICIENT_SCHEDULING_WINDOW: (
        "Not every class could be scheduled within the selected period. "
        "Extend the period or adjust the subject hours."
    ),
}


@dataclass(frozen=True)
class ScheduleResult:
    entries: list[ScheduleEntry] = field(default_factory=list)
    error: ScheduleErrorKind | None = None
    details: dict = field(default_factory=dict)

    @classmethod
    def success(cls, entries: list[ScheduleEntry]) -> "ScheduleResult":
        return cls(entries=list(entries))

    @classmethod
    def failure(cls, error: ScheduleErrorKind, details: dict | None = None) -> "ScheduleResult":
        # Partial progress is never surfaced.
        return cls(entries=[], error=error, details=details or {})

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str | None:
        return None if self.error is None else ERROR_MESSAGES[self.error]


def generate_timetable(
    start_date: date,
    end_date: date,
    subjects: list[Subject],
    professors: list[Professor],
    holidays: list[Holiday],
    *,
    daily_cap: int = DAILY_SUBJECT_HOUR_CAP,
) -> ScheduleResult:
    """Schedules every subject hour between two dates, both ends included.

    The range order is not checked here. Identical inputs always produce the
    same entries in the same order.
    """
    started = perf_counter()

    graph = CourseGraph(subjects)
    subject_order = graph.topological_order()
    if len(subject_order) != len(subjects):
        cyclic = graph.cyclic_subject_ids()
        logger.info("Timetable generation rejected: prerequisite cycle among %s", cyclic)
        return ScheduleResult.failure(
            ScheduleErrorKind.CYCLIC_PREREQUISITE,
            {"cyclic_subject_ids": cyclic},
        )
    logger.debug("Subject order for generation: %s", subject_order)

    assigner = SlotAssigner(
        subjects=subjects,
        professors=professors,
        subject_order=subject_order,
        availability=AvailabilityFilter(holidays, professors),
        daily_cap=daily_cap,
    )
    run = assigner.assign(CalendarWalker(start_date, end_date))
    elapsed_ms = int((perf_counter() - started) * 1000)

    if not run.is_complete:
        unscheduled = run.unscheduled_hours
        logger.info(
            "Timetable generation failed: %d subject(s) left with hours after %s..%s (%d ms)",
            len(unscheduled),
            start_date.isoformat(),
            end_date.isoformat(),
            elapsed_ms,
        )
        return ScheduleResult.failure(
            ScheduleErrorKind.INSUFFICIENT_SCHEDULING_WINDOW,
            {"unscheduled_hours": unscheduled},
        )

    logger.info(
        "Timetable generation succeeded: %d entries for %d subject(s) (%d ms)",
        len(run.entries),
        len(subjects),
        elapsed_ms,
    )
    return ScheduleResult.success(run.entries)
