from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from services.school_data import SchoolDataset
from services.solver_validation import validate
from solver.greedy_scheduler import generate_timetable
from solver.substitution import PeriodSuggestions, apply_substitution, suggest_substitutes
from solver.types import (
    ClassInfo,
    Day,
    GenerationResult,
    GradeRange,
    Subject,
    TimetableEntry,
    TimetableStatus,
    TimetableVersion,
)


logger = logging.getLogger(__name__)


class TimetableServiceError(Exception):
    code = "TIMETABLE_ERROR"


class TimetableLockedError(TimetableServiceError):
    code = "TIMETABLE_LOCKED"

    def __init__(self, version_id: str):
        super().__init__(f"Timetable version {version_id} is locked; unlock it first")
        self.version_id = version_id


class ValidationFailedError(TimetableServiceError):
    code = "VALIDATION_FAILED"

    def __init__(self, messages: list[str]):
        super().__init__("; ".join(messages))
        self.messages = list(messages)


class EntryNotFoundError(TimetableServiceError):
    code = "ENTRY_NOT_FOUND"


class SubstituteBusyError(TimetableServiceError):
    code = "SUBSTITUTE_BUSY"


def _stamp(now: datetime | None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def create_version(result: GenerationResult, *, now: datetime | None = None) -> TimetableVersion:
    return TimetableVersion(
        version_id=str(uuid.uuid4()),
        generated_at=_stamp(now),
        score=result.score,
        status=TimetableStatus.DRAFT,
        entries=tuple(result.entries),
    )


def kept_entries(
    previous: TimetableVersion | None, classes: list[ClassInfo], grade_range: GradeRange | None
) -> list[TimetableEntry]:
    """Entries of the previous version that a grade-range run leaves untouched."""
    if previous is None or grade_range is None:
        return []
    grade_by_class = {c.class_id: c.grade for c in classes}
    return [
        e
        for e in previous.entries
        if e.class_id in grade_by_class and not grade_range.contains(grade_by_class[e.class_id])
    ]


def merge_version(
    previous: TimetableVersion | None,
    result: GenerationResult,
    classes: list[ClassInfo],
    grade_range: GradeRange | None,
    *,
    now: datetime | None = None,
) -> TimetableVersion:
    """New version from a run; with a grade range, classes outside it keep their previous entries."""

    version = create_version(result, now=now)
    kept = kept_entries(previous, classes, grade_range)
    if not kept:
        return version
    return replace(version, entries=tuple(kept) + version.entries)


def regenerate(
    dataset: SchoolDataset,
    previous: TimetableVersion | None = None,
    grade_range: GradeRange | None = None,
    *,
    allow_overfill: bool = False,
    now: datetime | None = None,
) -> tuple[TimetableVersion, GenerationResult]:
    if previous is not None and previous.is_locked:
        raise TimetableLockedError(previous.version_id)

    messages = validate(dataset.classes, dataset.subjects, dataset.teachers, dataset.weekday_slots, grade_range)
    if messages:
        logger.info("Generation blocked by %d validation error(s)", len(messages))
        raise ValidationFailedError(messages)

    result = generate_timetable(
        dataset.classes,
        dataset.subjects,
        dataset.teachers,
        dataset.weekday_slots,
        dataset.saturday_slots,
        grade_range,
        allow_overfill=allow_overfill,
        reserved_entries=kept_entries(previous, dataset.classes, grade_range),
        now=now,
    )
    version = merge_version(previous, result, dataset.classes, grade_range, now=now)
    return version, result


def _with_status(version: TimetableVersion, status: TimetableStatus) -> TimetableVersion:
    return replace(
        version,
        status=status,
        entries=tuple(replace(e, status=status) for e in version.entries),
    )


def lock_version(version: TimetableVersion) -> TimetableVersion:
    return _with_status(version, TimetableStatus.LOCKED)


def unlock_version(version: TimetableVersion) -> TimetableVersion:
    return _with_status(version, TimetableStatus.DRAFT)


def approve_version(version: TimetableVersion) -> TimetableVersion:
    if version.is_locked:
        raise TimetableLockedError(version.version_id)
    return _with_status(version, TimetableStatus.APPROVED)


def apply_substitution_to_version(
    version: TimetableVersion,
    absent_teacher_id: str,
    substitute_teacher_id: str,
    day: Day,
    period: int,
) -> TimetableVersion:
    if version.is_locked:
        raise TimetableLockedError(version.version_id)
    if not any(e.teacher_id == absent_teacher_id and e.day == day and e.period == period for e in version.entries):
        raise EntryNotFoundError(f"Teacher {absent_teacher_id} has no class on {day.value} period {period}")
    if any(e.teacher_id == substitute_teacher_id and e.day == day and e.period == period for e in version.entries):
        raise SubstituteBusyError(f"Teacher {substitute_teacher_id} already teaches on {day.value} period {period}")

    entries = apply_substitution(list(version.entries), absent_teacher_id, substitute_teacher_id, day, period)
    logger.info(
        "Substitution applied: %s -> %s on %s period %d",
        absent_teacher_id,
        substitute_teacher_id,
        day.value,
        period,
    )
    return replace(version, entries=tuple(entries))


@dataclass
class SubstitutionSitting:
    """Covers several absences in one go.

    Each assignment is applied to the working entries straight away, so a substitute
    chosen for one period stops being offered for that same period elsewhere.
    """

    entries: list[TimetableEntry]
    assignments: list[tuple[str, str, Day, int]] = field(default_factory=list)

    def suggestions(self, dataset: SchoolDataset, absent_teacher_id: str, day: Day) -> list[PeriodSuggestions]:
        return suggest_substitutes(self.entries, dataset.teachers, dataset.subjects, absent_teacher_id, day)

    def assign(self, absent_teacher_id: str, substitute_teacher_id: str, day: Day, period: int) -> None:
        self.entries = apply_substitution(self.entries, absent_teacher_id, substitute_teacher_id, day, period)
        self.assignments.append((absent_teacher_id, substitute_teacher_id, day, period))


@dataclass(frozen=True)
class TeacherLoad:
    teacher_id: str
    total: int
    breakdown: list[tuple[str, str, int]]


def teacher_weekly_load(
    version: TimetableVersion,
    teacher_id: str,
    classes: list[ClassInfo],
    subjects: list[Subject],
) -> TeacherLoad:
    class_label = {c.class_id: c.label for c in classes}
    subject_name = {s.subject_id: s.name for s in subjects}

    counts: dict[tuple[str, str], int] = {}
    total = 0
    for e in version.entries:
        if e.teacher_id != teacher_id:
            continue
        total += 1
        key = (e.class_id, e.subject_id)
        counts[key] = counts.get(key, 0) + 1

    breakdown = [
        (class_label.get(cid, "Unknown"), subject_name.get(sid, "Unknown"), n) for (cid, sid), n in counts.items()
    ]
    return TeacherLoad(teacher_id=teacher_id, total=total, breakdown=breakdown)

