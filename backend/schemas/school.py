from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from solver.grades import grade_ordinal
from solver.types import (
    DAYS,
    ClassInfo,
    Day,
    Subject,
    SubjectPriority,
    Teacher,
    TeacherRole,
    TimeSlot,
)


class SchoolSettingsIn(BaseModel):
    school_name: str = "My School"
    board_type: str = Field(default="CBSE", pattern="^(CBSE|ICSE|STATE)$")
    academic_year: str = ""
    # grade -> sections, e.g. {"X": ["A", "B"]}
    divisions_per_grade: dict[str, list[str]] = Field(default_factory=dict)
    custom_subjects: list[str] = Field(default_factory=list)


class ClassIn(BaseModel):
    class_id: str = Field(min_length=1)
    grade: str = Field(min_length=1)
    section: str = Field(min_length=1)
    class_teacher_id: str | None = None
    is_enabled: bool = True

    @field_validator("grade")
    @classmethod
    def _check_grade(cls, v: str) -> str:
        grade_ordinal(v)
        return v.strip()

    def to_domain(self) -> ClassInfo:
        return ClassInfo(
            class_id=self.class_id,
            grade=self.grade,
            section=self.section,
            class_teacher_id=self.class_teacher_id or None,
            is_enabled=self.is_enabled,
        )

    @classmethod
    def from_domain(cls, c: ClassInfo) -> "ClassIn":
        return cls(
            class_id=c.class_id,
            grade=c.grade,
            section=c.section,
            class_teacher_id=c.class_teacher_id,
            is_enabled=c.is_enabled,
        )


class SubjectIn(BaseModel):
    subject_id: str = Field(min_length=1)
    class_id: str = Field(min_length=1)
    subject_name: str = Field(min_length=1)
    periods_per_week: int = Field(default=0, ge=0)
    max_per_day: int = Field(default=1, ge=0)
    priority: SubjectPriority = SubjectPriority.CORE
    is_lab: bool = False
    needs_playground: bool = False
    allow_double_period: bool = False
    qualified_teacher_ids: list[str] = Field(default_factory=list)

    def to_domain(self) -> Subject:
        return Subject(
            subject_id=self.subject_id,
            class_id=self.class_id,
            name=self.subject_name,
            periods_per_week=self.periods_per_week,
            max_per_day=self.max_per_day,
            priority=self.priority,
            is_lab=self.is_lab,
            needs_playground=self.needs_playground,
            allow_double_period=self.allow_double_period,
            qualified_teacher_ids=tuple(self.qualified_teacher_ids),
        )

    @classmethod
    def from_domain(cls, s: Subject) -> "SubjectIn":
        return cls(
            subject_id=s.subject_id,
            class_id=s.class_id,
            subject_name=s.name,
            periods_per_week=s.periods_per_week,
            max_per_day=s.max_per_day,
            priority=s.priority,
            is_lab=s.is_lab,
            needs_playground=s.needs_playground,
            allow_double_period=s.allow_double_period,
            qualified_teacher_ids=list(s.qualified_teacher_ids),
        )


class SubjectClassMapping(BaseModel):
    subject: str = Field(min_length=1)
    class_ids: list[str] = Field(default_factory=list)


class TeacherIn(BaseModel):
    teacher_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    teacher_role: TeacherRole = TeacherRole.SUBJECT_TEACHER
    subjects_can_teach: list[str] = Field(default_factory=list)
    subject_class_map: list[SubjectClassMapping] = Field(default_factory=list)
    max_periods_per_day: int = Field(default=6, ge=0)
    max_periods_per_week: int = Field(default=30, ge=0)
    available_days: list[Day] = Field(default_factory=lambda: list(DAYS))
    is_absent: bool = False

    def to_domain(self) -> Teacher:
        merged: dict[str, list[str]] = {}
        for m in self.subject_class_map:
            merged.setdefault(m.subject, [])
            for cid in m.class_ids:
                if cid not in merged[m.subject]:
                    merged[m.subject].append(cid)
        return Teacher(
            teacher_id=self.teacher_id,
            name=self.name,
            role=self.teacher_role,
            subject_class_map={k: tuple(v) for k, v in merged.items()},
            max_periods_per_day=self.max_periods_per_day,
            max_periods_per_week=self.max_periods_per_week,
            available_days=frozenset(self.available_days),
            is_absent=self.is_absent,
            subjects_can_teach=tuple(self.subjects_can_teach),
        )

    @classmethod
    def from_domain(cls, t: Teacher) -> "TeacherIn":
        return cls(
            teacher_id=t.teacher_id,
            name=t.name,
            teacher_role=t.role,
            subjects_can_teach=list(t.subjects_can_teach),
            subject_class_map=[
                SubjectClassMapping(subject=subj, class_ids=list(cids)) for subj, cids in t.subject_class_map.items()
            ],
            max_periods_per_day=t.max_periods_per_day,
            max_periods_per_week=t.max_periods_per_week,
            available_days=[d for d in DAYS if d in t.available_days],
            is_absent=t.is_absent,
        )


class TimeSlotIn(BaseModel):
    period_number: int = Field(ge=0)
    start_time: str = ""
    end_time: str = ""
    is_break: bool = False
    label: str | None = None

    def to_domain(self) -> TimeSlot:
        return TimeSlot(
            period_number=0 if self.is_break else self.period_number,
            start_time=self.start_time,
            end_time=self.end_time,
            is_break=self.is_break,
            label=self.label,
        )

    @classmethod
    def from_domain(cls, s: TimeSlot) -> "TimeSlotIn":
        return cls(
            period_number=s.period_number,
            start_time=s.start_time,
            end_time=s.end_time,
            is_break=s.is_break,
            label=s.label,
        )


class TimeSlotConfigIn(BaseModel):
    weekday_slots: list[TimeSlotIn] = Field(default_factory=list)
    saturday_slots: list[TimeSlotIn] = Field(default_factory=list)
    is_saturday_half_day: bool = True


class SchoolDataIn(BaseModel):
    school: SchoolSettingsIn = Field(default_factory=SchoolSettingsIn)
    classes: list[ClassIn] = Field(default_factory=list)
    subjects: list[SubjectIn] = Field(default_factory=list)
    teachers: list[TeacherIn] = Field(default_factory=list)
    time_slots: TimeSlotConfigIn = Field(default_factory=TimeSlotConfigIn)


class TeacherAbsenceIn(BaseModel):
    is_absent: bool
