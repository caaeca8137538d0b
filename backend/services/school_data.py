from __future__ import annotations

from dataclasses import dataclass, field, replace

from schemas.school import (
    ClassIn,
    SchoolDataIn,
    SchoolSettingsIn,
    SubjectIn,
    TeacherIn,
    TimeSlotConfigIn,
    TimeSlotIn,
)
from solver.qualifications import sync_qualifications
from solver.types import ClassInfo, Subject, Teacher, TimeSlot


@dataclass(frozen=True)
class SchoolSettings:
    school_name: str = "My School"
    board_type: str = "CBSE"
    academic_year: str = ""
    divisions_per_grade: dict[str, list[str]] = field(default_factory=dict)
    custom_subjects: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SchoolDataset:
    """One owner's consistent snapshot of everything generation reads."""

    school: SchoolSettings
    classes: list[ClassInfo]
    subjects: list[Subject]
    teachers: list[Teacher]
    weekday_slots: list[TimeSlot]
    saturday_slots: list[TimeSlot]
    is_saturday_half_day: bool = True

    def class_by_id(self, class_id: str) -> ClassInfo | None:
        return next((c for c in self.classes if c.class_id == class_id), None)

    def teacher_by_id(self, teacher_id: str) -> Teacher | None:
        return next((t for t in self.teachers if t.teacher_id == teacher_id), None)

    def with_teachers(self, teachers: list[Teacher]) -> "SchoolDataset":
        """Swap the teacher list and re-derive every subject's qualified teachers."""
        return replace(self, teachers=list(teachers), subjects=sync_qualifications(teachers, self.subjects))

    def upsert_teacher(self, teacher: Teacher) -> "SchoolDataset":
        teachers = list(self.teachers)
        for i, t in enumerate(teachers):
            if t.teacher_id == teacher.teacher_id:
                teachers[i] = teacher
                break
        else:
            teachers.append(teacher)
        return self.with_teachers(teachers)


def dataset_from_schema(payload: SchoolDataIn) -> SchoolDataset:
    s = payload.school
    teachers = [t.to_domain() for t in payload.teachers]
    subjects = [subj.to_domain() for subj in payload.subjects]
    return SchoolDataset(
        school=SchoolSettings(
            school_name=s.school_name,
            board_type=s.board_type,
            academic_year=s.academic_year,
            divisions_per_grade={k: list(v) for k, v in s.divisions_per_grade.items()},
            custom_subjects=list(s.custom_subjects),
        ),
        classes=[c.to_domain() for c in payload.classes],
        subjects=sync_qualifications(teachers, subjects),
        teachers=teachers,
        weekday_slots=[ts.to_domain() for ts in payload.time_slots.weekday_slots],
        saturday_slots=[ts.to_domain() for ts in payload.time_slots.saturday_slots],
        is_saturday_half_day=payload.time_slots.is_saturday_half_day,
    )


def dataset_to_schema(dataset: SchoolDataset) -> SchoolDataIn:
    s = dataset.school
    return SchoolDataIn(
        school=SchoolSettingsIn(
            school_name=s.school_name,
            board_type=s.board_type,
            academic_year=s.academic_year,
            divisions_per_grade=s.divisions_per_grade,
            custom_subjects=s.custom_subjects,
        ),
        classes=[ClassIn.from_domain(c) for c in dataset.classes],
        subjects=[SubjectIn.from_domain(subj) for subj in dataset.subjects],
        teachers=[TeacherIn.from_domain(t) for t in dataset.teachers],
        time_slots=TimeSlotConfigIn(
            weekday_slots=[TimeSlotIn.from_domain(ts) for ts in dataset.weekday_slots],
            saturday_slots=[TimeSlotIn.from_domain(ts) for ts in dataset.saturday_slots],
            is_saturday_half_day=dataset.is_saturday_half_day,
        ),
    )
