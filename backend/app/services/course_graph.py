from __future__ import annotations

from collections import deque

from app.schemas.timetable import Subject


class CourseGraph:
    """Prerequisite graph restricted to the subjects of one scheduling run.

    Prerequisite ids that do not name a subject of the run are ignored here.
    """

    def __init__(self, subjects: list[Subject]) -> None:
        self.subject_ids = [subject.id for subject in subjects]
        self.in_degree: dict[str, int] = {subject_id: 0 for subject_id in self.subject_ids}
        self.dependents: dict[str, list[str]] = {subject_id: [] for subject_id in self.subject_ids}

        for subject in subjects:
            for prerequisite_id in subject.prerequisite_ids:
                if prerequisite_id not in self.dependents:
                    continue
                self.dependents[prerequisite_id].append(subject.id)
                self.in_degree[subject.id] += 1

        self._order: list[str] | None = None

    def topological_order(self) -> list[str]:
        """Kahn's algorithm; zero in-degree ties keep their input order.

        On a cyclic graph the returned list omits every subject on or behind
        a cycle.
        """
        if self._order is not None:
            return list(self._order)

        remaining = dict(self.in_degree)
        queue = deque(subject_id for subject_id in self.subject_ids if remaining[subject_id] == 0)
        order: list[str] = []
        while queue:
            current = queue.popleft()
            order.append(current)
            for dependent in self.dependents[current]:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    queue.append(dependent)

        self._order = order
        return list(order)

    @property
    def is_acyclic(self) -> bool:
        return len(self.topological_order()) == len(self.subject_ids)

    def cyclic_subject_ids(self) -> list[str]:
        ordered = set(self.topological_order())
        return [subject_id for subject_id in self.subject_ids if subject_id not in ordered]
