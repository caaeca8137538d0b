from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from solver.grades import grade_ordinal


class Day(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"


WEEKDAYS: tuple[Day, ...] = (Day.MONDAY, Day.TUESDAY, Day.WEDNESDAY, Day.THURSDAY, Day.FRIDAY)
DAYS: tuple[Day, ...] = WEEKDAYS + (Day.SATURDAY,)


class SubjectPriority(str, Enum):
    CORE = "Core"
    ELECTIVE = "Elective"
    ACTIVITY = "Activity"

    @property
    def rank(self) -> int:
        # Core is scheduled first.
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    SubjectPriority.CORE: 0,
    SubjectPriority.ELECTIVE: 1,
    SubjectPriority.ACTIVITY: 2,
}


class TeacherRole(str, Enum):
    SUBJECT_TEACHER = "SubjectTeacher"
    CLASS_TEACHER = "ClassTeacher"


class TimetableStatus(str, Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    LOCKED = "locked"


class ResourceKind(str, Enum):
    LAB = "lab"
    PLAYGROUND = "playground"


@dataclass(frozen=True)
class ClassInfo:
    class_id: str
    grade: str
    section: str
    class_teacher_id: str | None = None
    is_enabled: bool = True

    @property
    def label(self) -> str:
        return f"{self.grade}-{self.section}"


@dataclass(frozen=True)
class Subject:
    subject_id: str
    class_id: str
    name: str
    periods_per_week: int
    max_per_day: int
    priority: SubjectPriority = SubjectPriority.CORE
    is_lab: bool = False
    needs_playground: bool = False
    allow_double_period: bool = False
    qualified_teacher_ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.periods_per_week < 0:
            raise ValueError(f"periods_per_week must be >= 0 (subject {self.subject_id})")
        if self.max_per_day < 0:
            raise ValueError(f"max_per_day must be >= 0 (subject {self.subject_id})")

    @property
    def resource(self) -> ResourceKind | None:
        if self.is_lab:
            return ResourceKind.LAB
        if self.needs_playground:
            return ResourceKind.PLAYGROUND
        return None


@dataclass(frozen=True)
class Teacher:
    teacher_id: str
    name: str
    role: TeacherRole = TeacherRole.SUBJECT_TEACHER
    # subject name -> class ids this teacher takes that subject in
    subject_class_map: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    max_periods_per_day: int = 6
    max_periods_per_week: int = 30
    available_days: frozenset[Day] = frozenset(DAYS)
    is_absent: bool = False
    subjects_can_teach: tuple[str, ...] = ()

    # subject_class_map is a dict, so hash by identity key only.
    def __hash__(self) -> int:
        return hash(self.teacher_id)

    @property
    def teachable_subjects(self) -> frozenset[str]:
        return frozenset(self.subjects_can_teach) | frozenset(self.subject_class_map)

    def teaches(self, subject_name: str, class_id: str) -> bool:
        return class_id in (self.subject_class_map.get(subject_name) or ())


@dataclass(frozen=True)
class TimeSlot:
    period_number: int
    start_time: str
    end_time: str
    is_break: bool = False
    label: str | None = None

    @property
    def is_teaching(self) -> bool:
        return not self.is_break and self.period_number >= 1

    @property
    def display(self) -> str:
        return f"{self.start_time} - {self.end_time}"


@dataclass(frozen=True)
class TimetableEntry:
    entry_id: str
    class_id: str
    day: Day
    period: int
    time_slot: str
    subject_id: str
    teacher_id: str
    room: str
    status: TimetableStatus = TimetableStatus.DRAFT
    generated_at: str = ""


def entry_id_for(class_id: str, day: Day, period: int) -> str:
    return f"tt_{class_id}_{day.value}_{period}"


@dataclass(frozen=True)
class TimetableVersion:
    version_id: str
    generated_at: str
    score: int
    status: TimetableStatus = TimetableStatus.DRAFT
    entries: tuple[TimetableEntry, ...] = ()

    @property
    def is_locked(self) -> bool:
        return self.status == TimetableStatus.LOCKED


@dataclass(frozen=True)
class GenerationResult:
    entries: list[TimetableEntry]
    errors: list[str]
    score: int
    filled_slots: int = 0
    total_slots: int = 0
    diagnostics: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class GradeRange:
    """Inclusive range of grades, compared by grade ordinal."""

    from_grade: str
    to_grade: str

    def contains(self, grade: str) -> bool:
        low, high = grade_ordinal(self.from_grade), grade_ordinal(self.to_grade)
        if low > high:
            low, high = high, low
        return low <= grade_ordinal(grade) <= high


def targeted_classes(classes: list[ClassInfo], grade_range: GradeRange | None = None) -> list[ClassInfo]:
    """Enabled classes, narrowed to the grade range when one is given."""
    out = [c for c in classes if c.is_enabled]
    if grade_range is not None:
        out = [c for c in out if grade_range.contains(c.grade)]
    return out
