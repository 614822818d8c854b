from collections import Counter, defaultdict
from typing import Dict, List, Tuple
from app.schemas.timetable import Holiday, Professor, ScheduleEntry, Subject, parse_time_to_minutes
from app.schemas.conflict import ConflictReport, ConflictDetail, ResolutionAction
from app.services.availability import AvailabilityFilter
from app.services.calendar_walker import SLOTS_BY_START, TimeSlot, is_weekend
from app.services.slot_assigner import DAILY_SUBJECT_HOUR_CAP

class ConflictService:
    """Audits a timetable that was not necessarily produced by the generator."""

    def __init__(
        self,
        subjects: List[Subject],
        professors: List[Professor],
        holidays: List[Holiday],
        entries: List[ScheduleEntry],
        daily_cap: int = DAILY_SUBJECT_HOUR_CAP,
    ):
        self.subject_map: Dict[str, Subject] = {subject.id: subject for subject in subjects}
        self.professor_names = {professor.id: professor.name for professor in professors}
        self.availability = AvailabilityFilter(holidays, professors)
        self.entries = entries
        self.daily_cap = daily_cap

    def detect_conflicts(self) -> ConflictReport:
        conflicts: List[ConflictDetail] = []

        for entry in self.entries:
            conflicts.extend(self._entry_conflicts(entry))

        # Double booking
        by_professor_slot = defaultdict(list)
        for entry in self.entries:
            if entry.professor_id is not None:
                by_professor_slot[(entry.professor_id, entry.date, entry.start_time)].append(entry.id)
        for (professor_id, day, start), entry_ids in by_professor_slot.items():
            if len(entry_ids) > 1:
                conflicts.append(ConflictDetail(
                    id=f"prof-{professor_id}-{day.isoformat()}-{start}",
                    conflict_type="professor_conflict",
                    description=f"{self._professor_label(professor_id)} is booked {len(entry_ids)} times on {day.isoformat()} at {start}",
                    severity="hard",
                    affected_entries=entry_ids,
                ))

        by_daily_pair = defaultdict(list)
        for entry in self.entries:
            by_daily_pair[(entry.professor_id, entry.subject_id, entry.date)].append(entry.id)
        for (professor_id, subject_id, day), entry_ids in by_daily_pair.items():
            if len(entry_ids) > self.daily_cap:
                conflicts.append(ConflictDetail(
                    id=f"cap-{professor_id}-{subject_id}-{day.isoformat()}",
                    conflict_type="daily_cap",
                    description=f"{subject_id} is taught {len(entry_ids)} hours on {day.isoformat()} (limit {self.daily_cap})",
                    severity="hard",
                    affected_entries=entry_ids,
                ))

        conflicts.extend(self._prerequisite_conflicts())
        conflicts.extend(self._hour_conflicts())

        resolutions: List[ResolutionAction] = []
        for conflict in conflicts:
            resolutions.extend(self.generate_resolutions(conflict))
        return ConflictReport(conflicts=conflicts, suggested_resolutions=resolutions)

    def _entry_conflicts(self, entry: ScheduleEntry) -> List[ConflictDetail]:
        conflicts = []
        day = entry.date.isoformat()

        subject = self.subject_map.get(entry.subject_id)
        if subject is None:
            conflicts.append(ConflictDetail(
                id=f"subject-{entry.id}",
                conflict_type="unknown_subject",
                description=f"Entry {entry.id} references unknown subject {entry.subject_id}",
                severity="hard",
                affected_entries=[entry.id],
            ))
        elif entry.professor_id != subject.professor_id:
            conflicts.append(ConflictDetail(
                id=f"owner-{entry.id}",
                conflict_type="professor_mismatch",
                description=f"{subject.name} is assigned to {self._professor_label(subject.professor_id)}, not {self._professor_label(entry.professor_id)}",
                severity="hard",
                affected_entries=[entry.id],
            ))

        if is_weekend(entry.date):
            conflicts.append(ConflictDetail(
                id=f"weekend-{entry.id}",
                conflict_type="weekend",
                description=f"Entry {entry.id} falls on a weekend ({day})",
                severity="hard",
                affected_entries=[entry.id],
            ))

        slot = SLOTS_BY_START.get(entry.start_time)
        if slot is None or slot.end != entry.end_time:
            conflicts.append(ConflictDetail(
                id=f"slot-{entry.id}",
                conflict_type="invalid_slot",
                description=f"{entry.start_time}-{entry.end_time} is not one of the fixed class slots",
                severity="hard",
                affected_entries=[entry.id],
            ))
            slot = TimeSlot(entry.start_time, entry.end_time)

        if self.availability.is_slot_blocked(entry.date, slot):
            conflicts.append(ConflictDetail(
                id=f"holiday-{entry.id}",
                conflict_type="holiday",
                description=f"Entry {entry.id} is scheduled during a holiday on {day}",
                severity="hard",
                affected_entries=[entry.id],
            ))

        if self.availability.is_on_vacation(entry.professor_id, entry.date):
            conflicts.append(ConflictDetail(
                id=f"vacation-{entry.id}",
                conflict_type="vacation",
                description=f"{self._professor_label(entry.professor_id)} is on vacation on {day}",
                severity="hard",
                affected_entries=[entry.id],
            ))
        return conflicts

    def _prerequisite_conflicts(self) -> List[ConflictDetail]:
        # Same-slot starts are accepted; only a strictly earlier dependent is a conflict.
        def position(entry: ScheduleEntry) -> Tuple:
            return (entry.date, parse_time_to_minutes(entry.start_time))

        entries_by_subject = defaultdict(list)
        for entry in self.entries:
            entries_by_subject[entry.subject_id].append(entry)

        conflicts = []
        for subject in self.subject_map.values():
            dependent_entries = entries_by_subject.get(subject.id, [])
            if not dependent_entries:
                continue
            for prerequisite_id in dict.fromkeys(subject.prerequisite_ids):
                prerequisite = self.subject_map.get(prerequisite_id)
                if prerequisite is None:
                    continue
                prerequisite_entries = entries_by_subject.get(prerequisite_id, [])
                if len(prerequisite_entries) < prerequisite.total_hours:
                    affected = [entry.id for entry in dependent_entries]
                    reason = f"{prerequisite.name} is never completed"
                else:
                    finished_at = max(position(entry) for entry in prerequisite_entries)
                    affected = [entry.id for entry in dependent_entries if position(entry) < finished_at]
                    reason = f"{subject.name} starts before {prerequisite.name} is completed"
                if affected:
                    conflicts.append(ConflictDetail(
                        id=f"prereq-{subject.id}-{prerequisite_id}",
                        conflict_type="prerequisite_order",
                        description=reason,
                        severity="hard",
                        affected_entries=affected,
                    ))
        return conflicts

    def _hour_conflicts(self) -> List[ConflictDetail]:
        counts = Counter(entry.subject_id for entry in self.entries)
        conflicts = []
        for subject in self.subject_map.values():
            scheduled = counts.get(subject.id, 0)
            if scheduled != subject.total_hours:
                conflicts.append(ConflictDetail(
                    id=f"hours-{subject.id}",
                    conflict_type="hour_mismatch",
                    description=f"{subject.name} has {scheduled} scheduled hour(s), expected {subject.total_hours}",
                    severity="hard",
                    affected_entries=[entry.id for entry in self.entries if entry.subject_id == subject.id],
                ))
        return conflicts

    def _professor_label(self, professor_id: str | None) -> str:
        if professor_id is None:
            return "no professor"
        return self.professor_names.get(professor_id, professor_id)

    def generate_resolutions(self, conflict: ConflictDetail) -> List[ResolutionAction]:
        resolutions = []
        if conflict.conflict_type in ("professor_conflict", "weekend", "invalid_slot", "holiday", "vacation", "daily_cap", "prerequisite_order"):
            resolutions.append(ResolutionAction(
                action_type="move_entry",
                description="Move to a different date or time slot",
                target_entry_id=conflict.affected_entries[-1],
                parameters={},
            ))

        if conflict.conflict_type == "professor_mismatch":
            resolutions.append(ResolutionAction(
                action_type="change_professor",
                description="Assign the subject's professor to this entry",
                target_entry_id=conflict.affected_entries[0],
                parameters={},
            ))

        if conflict.conflict_type == "hour_mismatch":
            subject_id = conflict.id.removeprefix("hours-")
            resolutions.append(ResolutionAction(
                action_type="adjust_hours",
                description="Add or remove entries until the subject's total hours are met",
                target_entry_id=None,
                parameters={"subject_id": subject_id, "expected_hours": self.subject_map[subject_id].total_hours},
            ))

        return resolutions
