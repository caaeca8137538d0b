from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Iterable

from solver.availability import ResourceTracker, TeacherAvailability
from solver.scoring import compute_score
from solver.solver_diagnostics import Diagnostic, quota_mismatch, unfilled_slot
from solver.types import (
    DAYS,
    ClassInfo,
    Day,
    GenerationResult,
    GradeRange,
    ResourceKind,
    Subject,
    Teacher,
    TimeSlot,
    TimetableEntry,
    TimetableStatus,
    entry_id_for,
    targeted_classes,
)


logger = logging.getLogger(__name__)

LAB_ROOM = "Computer Lab"
PLAYGROUND_ROOM = "Playground"


def room_for(cls: ClassInfo, subject: Subject) -> str:
    kind = subject.resource
    if kind == ResourceKind.LAB:
        return LAB_ROOM
    if kind == ResourceKind.PLAYGROUND:
        return PLAYGROUND_ROOM
    return f"Room {cls.label}"


def build_day_plan(weekday_slots: Iterable[TimeSlot], saturday_slots: Iterable[TimeSlot]) -> list[tuple[Day, list[TimeSlot]]]:
    """Teaching slots per day, in period order. Days without teaching periods are dropped."""

    weekday = _teaching_slots(weekday_slots)
    saturday = _teaching_slots(saturday_slots)
    plan: list[tuple[Day, list[TimeSlot]]] = []
    for day in DAYS:
        slots = saturday if day == Day.SATURDAY else weekday
        if slots:
            plan.append((day, list(slots)))
    return plan


def _teaching_slots(slots: Iterable[TimeSlot]) -> list[TimeSlot]:
    by_period: dict[int, TimeSlot] = {}
    for s in slots:
        if s.is_teaching and s.period_number not in by_period:
            by_period[s.period_number] = s
    return [by_period[p] for p in sorted(by_period)]


class _ClassGrid:
    """Working state for one class: placed cells and per-subject counters."""

    def __init__(self, cls: ClassInfo, subjects: list[Subject], plan: list[tuple[Day, list[TimeSlot]]]):
        self.cls = cls
        self.subjects = subjects
        self.order = {s.subject_id: i for i, s in enumerate(subjects)}
        self.periods_by_day: dict[Day, list[int]] = {day: [s.period_number for s in slots] for day, slots in plan}
        self.cells: dict[tuple[Day, int], tuple[Subject, str]] = {}
        self.assigned: dict[str, int] = defaultdict(int)
        self.per_day: dict[tuple[str, Day], int] = defaultdict(int)
        self.locked_teacher: dict[str, Teacher] = {}

    def remaining(self, subject: Subject) -> int:
        return subject.periods_per_week - self.assigned[subject.subject_id]

    def subject_at(self, day: Day, period: int | None) -> Subject | None:
        if period is None:
            return None
        cell = self.cells.get((day, period))
        return cell[0] if cell else None

    def neighbours(self, day: Day, period: int) -> tuple[int | None, int | None]:
        periods = self.periods_by_day[day]
        i = periods.index(period)
        prev_p = periods[i - 1] if i > 0 else None
        next_p = periods[i + 1] if i + 1 < len(periods) else None
        return prev_p, next_p

    def place(self, subject: Subject, teacher_id: str, day: Day, period: int) -> None:
        self.cells[(day, period)] = (subject, teacher_id)
        self.assigned[subject.subject_id] += 1
        self.per_day[(subject.subject_id, day)] += 1


class GreedyScheduler:
    """Single-pass greedy filler. One instance per generation call."""

    def __init__(
        self,
        classes: list[ClassInfo],
        subjects: list[Subject],
        teachers: list[Teacher],
        plan: list[tuple[Day, list[TimeSlot]]],
        *,
        allow_overfill: bool = False,
    ):
        self.classes = classes
        self.subjects = subjects
        self.plan = plan
        self.allow_overfill = allow_overfill
        self.teacher_by_id = {t.teacher_id: t for t in teachers}
        self.teacher_order = {t.teacher_id: i for i, t in enumerate(teachers)}
        self.availability = TeacherAvailability()
        self.resources = ResourceTracker()
        self.grids: list[_ClassGrid] = []
        self.diagnostics: list[Diagnostic] = []

    def reserve(self, entries: Iterable[TimetableEntry]) -> None:
        """Book teachers and shared rooms already held by entries kept from an earlier run."""
        subject_by_id = {s.subject_id: s for s in self.subjects}
        for e in entries:
            self.availability.commit(e.teacher_id, e.day, e.period)
            subj = subject_by_id.get(e.subject_id)
            kind = subj.resource if subj is not None else None
            if kind is not None:
                self.resources.commit(kind, e.day, e.period)

    # ------------------------
    # Candidate checks
    # ------------------------
    def _qualified(self, subject: Subject) -> list[Teacher]:
        return [self.teacher_by_id[tid] for tid in subject.qualified_teacher_ids if tid in self.teacher_by_id]

    def _subject_fits(self, grid: _ClassGrid, subject: Subject, day: Day, period: int, *, overfill: bool) -> bool:
        extra = 1 if overfill else 0
        if grid.assigned[subject.subject_id] >= subject.periods_per_week + extra:
            return False
        if grid.per_day[(subject.subject_id, day)] >= subject.max_per_day + extra:
            return False
        if not subject.allow_double_period:
            prev_p, next_p = grid.neighbours(day, period)
            for p in (prev_p, next_p):
                neighbour = grid.subject_at(day, p)
                if neighbour is not None and neighbour.subject_id == subject.subject_id:
                    return False
        kind = subject.resource
        if kind is not None and not self.resources.is_free(kind, day, period):
            return False
        return True

    def _ordered_candidates(self, grid: _ClassGrid, *, overfill: bool) -> list[Subject]:
        def key(s: Subject):
            need = grid.remaining(s)
            base = (s.priority.rank, -need, grid.order[s.subject_id])
            if overfill:
                return (0 if need > 0 else 1,) + base
            return base

        return sorted(grid.subjects, key=key)

    def _least_loaded(self, teachers: list[Teacher]) -> Teacher | None:
        if not teachers:
            return None
        return min(
            teachers,
            key=lambda t: (self.availability.weekly_load(t.teacher_id), self.teacher_order[t.teacher_id]),
        )

    def _pick_teacher(self, grid: _ClassGrid, subject: Subject, day: Day, period: int) -> Teacher | None:
        locked = grid.locked_teacher.get(subject.subject_id)
        if locked is not None and self.availability.can_assign(locked, day, period):
            return locked
        free = [t for t in self._qualified(subject) if self.availability.can_assign(t, day, period)]
        return self._least_loaded(free)

    def _commit(self, grid: _ClassGrid, subject: Subject, teacher: Teacher, day: Day, period: int) -> None:
        grid.place(subject, teacher.teacher_id, day, period)
        self.availability.commit(teacher.teacher_id, day, period)
        kind = subject.resource
        if kind is not None:
            self.resources.commit(kind, day, period)

    # ------------------------
    # Phases
    # ------------------------
    def _lock_teachers(self, grid: _ClassGrid) -> None:
        for subject in grid.subjects:
            present = [t for t in self._qualified(subject) if not t.is_absent]
            chosen = self._least_loaded(present)
            if chosen is not None:
                grid.locked_teacher[subject.subject_id] = chosen

    def _seed_class_teacher(self, grid: _ClassGrid) -> None:
        tid = grid.cls.class_teacher_id
        teacher = self.teacher_by_id.get(tid) if tid else None
        if teacher is None:
            return
        own_subjects = [s for s in grid.subjects if teacher.teacher_id in s.qualified_teacher_ids]
        if not own_subjects:
            return

        for day, slots in self.plan:
            periods = [slots[0].period_number, slots[-1].period_number]
            for period in dict.fromkeys(periods):
                if (day, period) in grid.cells:
                    continue
                if not self.availability.can_assign(teacher, day, period):
                    continue
                ordered = sorted(
                    own_subjects,
                    key=lambda s: (s.priority.rank, -grid.remaining(s), grid.order[s.subject_id]),
                )
                for subject in ordered:
                    if self._subject_fits(grid, subject, day, period, overfill=False):
                        self._commit(grid, subject, teacher, day, period)
                        break

    def _fill_pass(self, grid: _ClassGrid, *, overfill: bool) -> None:
        for day, slots in self.plan:
            for slot in slots:
                period = slot.period_number
                if (day, period) in grid.cells:
                    continue
                for subject in self._ordered_candidates(grid, overfill=overfill):
                    if not self._subject_fits(grid, subject, day, period, overfill=overfill):
                        continue
                    teacher = self._pick_teacher(grid, subject, day, period)
                    if teacher is None:
                        continue
                    self._commit(grid, subject, teacher, day, period)
                    break

    def _report(self, grid: _ClassGrid) -> None:
        # Empty periods only count as fill failures while some subject is still short.
        short = any(grid.remaining(s) > 0 for s in grid.subjects)
        for day, slots in self.plan:
            for slot in slots:
                if short and (day, slot.period_number) not in grid.cells:
                    logger.debug("Unfilled slot: class=%s day=%s period=%s", grid.cls.class_id, day.value, slot.period_number)
                    self.diagnostics.append(unfilled_slot(grid.cls, day, slot.period_number))
        for subject in grid.subjects:
            assigned = grid.assigned[subject.subject_id]
            if assigned != subject.periods_per_week:
                self.diagnostics.append(quota_mismatch(grid.cls, subject, assigned))

    def schedule_class(self, cls: ClassInfo) -> _ClassGrid:
        grid = _ClassGrid(cls, [s for s in self.subjects if s.class_id == cls.class_id], self.plan)
        self._lock_teachers(grid)
        self._seed_class_teacher(grid)
        self._fill_pass(grid, overfill=False)
        if self.allow_overfill:
            self._fill_pass(grid, overfill=True)
        self._report(grid)
        self.grids.append(grid)
        return grid

    def run(self) -> None:
        for cls in self.classes:
            self.schedule_class(cls)

    def entries(self, generated_at: str) -> list[TimetableEntry]:
        out: list[TimetableEntry] = []
        for grid in self.grids:
            for day, slots in self.plan:
                for slot in slots:
                    cell = grid.cells.get((day, slot.period_number))
                    if cell is None:
                        continue
                    subject, teacher_id = cell
                    out.append(
                        TimetableEntry(
                            entry_id=entry_id_for(grid.cls.class_id, day, slot.period_number),
                            class_id=grid.cls.class_id,
                            day=day,
                            period=slot.period_number,
                            time_slot=slot.display,
                            subject_id=subject.subject_id,
                            teacher_id=teacher_id,
                            room=room_for(grid.cls, subject),
                            status=TimetableStatus.DRAFT,
                            generated_at=generated_at,
                        )
                    )
        return out


def generate_timetable(
    classes: list[ClassInfo],
    subjects: list[Subject],
    teachers: list[Teacher],
    weekday_slots: list[TimeSlot],
    saturday_slots: list[TimeSlot],
    grade_range: GradeRange | None = None,
    *,
    allow_overfill: bool = False,
    reserved_entries: Iterable[TimetableEntry] = (),
    now: datetime | None = None,
) -> GenerationResult:
    """Fill every targeted class's week with (subject, teacher, room) triples.

    Deterministic for identical inputs apart from the `generated_at` stamp. Unmet
    requirements come back as diagnostics; nothing here raises for well-typed input.
    `reserved_entries` (entries of classes outside this run) only occupy teachers and rooms.
    """

    active = targeted_classes(classes, grade_range)
    plan = build_day_plan(weekday_slots, saturday_slots)
    slots_per_week = sum(len(slots) for _day, slots in plan)

    logger.info(
        "Generating timetable: classes=%d slots_per_week=%d teachers=%d overfill=%s",
        len(active),
        slots_per_week,
        len(teachers),
        allow_overfill,
    )

    scheduler = GreedyScheduler(active, subjects, teachers, plan, allow_overfill=allow_overfill)
    scheduler.reserve(reserved_entries)
    scheduler.run()

    stamp = (now or datetime.now(timezone.utc)).isoformat()
    entries = scheduler.entries(stamp)
    errors = [d.message for d in scheduler.diagnostics]
    total = len(active) * slots_per_week
    score = compute_score(len(entries), total, len(errors))

    logger.info("Timetable generated: filled=%d/%d diagnostics=%d score=%d", len(entries), total, len(errors), score)
    return GenerationResult(
        entries=entries,
        errors=errors,
        score=score,
        filled_slots=len(entries),
        total_slots=total,
        diagnostics=[d.as_dict() for d in scheduler.diagnostics],
    )
