from __future__ import annotations

from dataclasses import dataclass

from solver.solver_diagnostics import (
    Diagnostic,
    class_without_subjects,
    missing_time_slots,
    no_teachers,
    subject_without_teachers,
)
from solver.types import ClassInfo, GradeRange, Subject, Teacher, TimeSlot, targeted_classes


@dataclass(frozen=True)
class ValidationConflict:
    conflict_type: str
    message: str
    severity: str = "ERROR"
    class_id: str | None = None
    subject_id: str | None = None


def _conflict(d: Diagnostic) -> ValidationConflict:
    return ValidationConflict(
        conflict_type=d.dtype.value,
        message=d.message,
        class_id=d.class_id,
        subject_id=d.subject_id,
    )


def validate_prereqs(
    classes: list[ClassInfo],
    subjects: list[Subject],
    teachers: list[Teacher],
    weekday_slots: list[TimeSlot],
    grade_range: GradeRange | None = None,
) -> list[ValidationConflict]:
    """Structural checks to run before generation.

    Generation should be blocked while this returns anything.
    """

    conflicts: list[ValidationConflict] = []

    if not any(s.is_teaching for s in weekday_slots):
        conflicts.append(_conflict(missing_time_slots()))

    if not teachers:
        conflicts.append(_conflict(no_teachers()))

    subjects_by_class: dict[str, list[Subject]] = {}
    for s in subjects:
        subjects_by_class.setdefault(s.class_id, []).append(s)

    for cls in targeted_classes(classes, grade_range):
        own = subjects_by_class.get(cls.class_id) or []
        if not own:
            conflicts.append(_conflict(class_without_subjects(cls)))
            continue
        for subject in own:
            if not subject.qualified_teacher_ids:
                conflicts.append(_conflict(subject_without_teachers(cls, subject)))

    return conflicts


def validate(
    classes: list[ClassInfo],
    subjects: list[Subject],
    teachers: list[Teacher],
    weekday_slots: list[TimeSlot],
    grade_range: GradeRange | None = None,
) -> list[str]:
    return [c.message for c in validate_prereqs(classes, subjects, teachers, weekday_slots, grade_range)]
