from __future__ import annotations

from collections import defaultdict

from solver.types import Day, ResourceKind, Teacher


class TeacherAvailability:
    """Per-run teacher bookings and load counters.

    Built fresh for every generation call and never shared between calls.
    """

    def __init__(self) -> None:
        self._taken: dict[str, set[tuple[Day, int]]] = defaultdict(set)
        self._daily: dict[str, dict[Day, int]] = defaultdict(lambda: defaultdict(int))
        self._weekly: dict[str, int] = defaultdict(int)

    def is_teacher_free(self, teacher_id: str, day: Day, period: int) -> bool:
        return (day, period) not in self._taken[teacher_id]

    def daily_load(self, teacher_id: str, day: Day) -> int:
        return self._daily[teacher_id][day]

    def weekly_load(self, teacher_id: str) -> int:
        return self._weekly[teacher_id]

    def can_assign(self, teacher: Teacher, day: Day, period: int) -> bool:
        tid = teacher.teacher_id
        if teacher.is_absent:
            return False
        if day not in teacher.available_days:
            return False
        if not self.is_teacher_free(tid, day, period):
            return False
        if self._daily[tid][day] >= teacher.max_periods_per_day:
            return False
        if self._weekly[tid] >= teacher.max_periods_per_week:
            return False
        return True

    def commit(self, teacher_id: str, day: Day, period: int) -> None:
        self._taken[teacher_id].add((day, period))
        self._daily[teacher_id][day] += 1
        self._weekly[teacher_id] += 1


class ResourceTracker:
    """School-wide bookings of shared rooms (lab, playground)."""

    def __init__(self) -> None:
        self._taken: dict[ResourceKind, set[tuple[Day, int]]] = defaultdict(set)

    def is_free(self, kind: ResourceKind, day: Day, period: int) -> bool:
        return (day, period) not in self._taken[kind]

    def commit(self, kind: ResourceKind, day: Day, period: int) -> None:
        self._taken[kind].add((day, period))
