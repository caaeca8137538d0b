from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from solver.types import ClassInfo, Day, Subject


class DiagnosticType(str, Enum):
    UNFILLED_SLOT = "UNFILLED_SLOT"
    UNDER_ASSIGNED = "UNDER_ASSIGNED"
    OVER_ASSIGNED = "OVER_ASSIGNED"
    MISSING_TIME_SLOTS = "MISSING_TIME_SLOTS"
    NO_TEACHERS = "NO_TEACHERS"
    CLASS_WITHOUT_SUBJECTS = "CLASS_WITHOUT_SUBJECTS"
    SUBJECT_WITHOUT_TEACHERS = "SUBJECT_WITHOUT_TEACHERS"


@dataclass(frozen=True)
class Diagnostic:
    dtype: DiagnosticType
    message: str
    class_id: str | None = None
    subject_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "type": self.dtype.value,
            "class_id": self.class_id,
            "subject_id": self.subject_id,
            **self.details,
            "explanation": self.message,
        }


def summarize_diagnostics(errors: list[str]) -> str:
    n = len(errors)
    if n <= 0:
        return "No unmet constraints."
    if n == 1:
        return "1 unmet constraint."
    return f"{n} unmet constraints."


def unfilled_slot(cls: ClassInfo, day: Day, period: int) -> Diagnostic:
    return Diagnostic(
        dtype=DiagnosticType.UNFILLED_SLOT,
        message=f"Class {cls.label}: no subject/teacher available for {day.value} period {period}",
        class_id=cls.class_id,
        details={"day": day.value, "period": period},
    )


def quota_mismatch(cls: ClassInfo, subject: Subject, assigned: int) -> Diagnostic:
    target = subject.periods_per_week
    if assigned < target:
        dtype, word = DiagnosticType.UNDER_ASSIGNED, "under-assigned"
    else:
        dtype, word = DiagnosticType.OVER_ASSIGNED, "over-assigned"
    return Diagnostic(
        dtype=dtype,
        message=f"Class {cls.label}: {subject.name} {word} ({assigned}/{target} periods)",
        class_id=cls.class_id,
        subject_id=subject.subject_id,
        details={"assigned": assigned, "target": target},
    )


def missing_time_slots() -> Diagnostic:
    return Diagnostic(
        dtype=DiagnosticType.MISSING_TIME_SLOTS,
        message="No teaching periods configured in the weekday template",
    )


def no_teachers() -> Diagnostic:
    return Diagnostic(dtype=DiagnosticType.NO_TEACHERS, message="No teachers configured")


def class_without_subjects(cls: ClassInfo) -> Diagnostic:
    return Diagnostic(
        dtype=DiagnosticType.CLASS_WITHOUT_SUBJECTS,
        message=f"Class {cls.label} has no subjects",
        class_id=cls.class_id,
    )


def subject_without_teachers(cls: ClassInfo | None, subject: Subject) -> Diagnostic:
    where = f"Class {cls.label}" if cls is not None else f"class {subject.class_id}"
    return Diagnostic(
        dtype=DiagnosticType.SUBJECT_WITHOUT_TEACHERS,
        message=f"Subject {subject.name} ({where}) has no qualified teachers",
        class_id=subject.class_id,
        subject_id=subject.subject_id,
    )
