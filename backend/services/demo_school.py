from __future__ import annotations

from services.school_data import SchoolDataset, SchoolSettings
from solver.qualifications import sync_qualifications
from solver.types import (
    DAYS,
    WEEKDAYS,
    ClassInfo,
    Subject,
    SubjectPriority,
    Teacher,
    TeacherRole,
    TimeSlot,
)


# Sample school served when no owner identity is supplied.

WEEKDAY_SLOTS: list[TimeSlot] = [
    TimeSlot(1, "08:00", "08:40"),
    TimeSlot(2, "08:40", "09:20"),
    TimeSlot(3, "09:20", "10:00"),
    TimeSlot(0, "10:00", "10:20", is_break=True, label="Short Break"),
    TimeSlot(4, "10:20", "11:00"),
    TimeSlot(5, "11:00", "11:40"),
    TimeSlot(6, "11:40", "12:20"),
    TimeSlot(0, "12:20", "13:00", is_break=True, label="Lunch Break"),
    TimeSlot(7, "13:00", "13:40"),
    TimeSlot(8, "13:40", "14:20"),
]

SATURDAY_SLOTS: list[TimeSlot] = [
    TimeSlot(1, "08:00", "08:40"),
    TimeSlot(2, "08:40", "09:20"),
    TimeSlot(3, "09:20", "10:00"),
    TimeSlot(0, "10:00", "10:20", is_break=True, label="Short Break"),
    TimeSlot(4, "10:20", "11:00"),
    TimeSlot(5, "11:00", "11:40"),
]

_ALL_CLASSES = ("c1", "c2", "c3")


def _teacher(tid: str, name: str, role: TeacherRole, subject: str, per_day: int, per_week: int, days=DAYS) -> Teacher:
    return Teacher(
        teacher_id=tid,
        name=name,
        role=role,
        subject_class_map={subject: _ALL_CLASSES},
        max_periods_per_day=per_day,
        max_periods_per_week=per_week,
        available_days=frozenset(days),
        subjects_can_teach=(subject,),
    )


def demo_teachers() -> list[Teacher]:
    return [
        _teacher("t1", "Mrs. Sharma", TeacherRole.CLASS_TEACHER, "Mathematics", 6, 30),
        _teacher("t2", "Mr. Patel", TeacherRole.SUBJECT_TEACHER, "Science", 6, 28),
        _teacher("t3", "Ms. Gupta", TeacherRole.SUBJECT_TEACHER, "English", 7, 32),
        _teacher("t4", "Mr. Kumar", TeacherRole.CLASS_TEACHER, "Hindi", 6, 30, days=WEEKDAYS),
        _teacher("t5", "Mrs. Reddy", TeacherRole.SUBJECT_TEACHER, "Social Science", 5, 25),
        _teacher("t6", "Mr. Singh", TeacherRole.SUBJECT_TEACHER, "Physical Education", 8, 35),
        _teacher("t7", "Ms. Iyer", TeacherRole.CLASS_TEACHER, "Computer Science", 6, 28),
    ]


def demo_classes() -> list[ClassInfo]:
    return [
        ClassInfo("c1", "X", "A", class_teacher_id="t1"),
        ClassInfo("c2", "X", "B", class_teacher_id="t4"),
        ClassInfo("c3", "IX", "A", class_teacher_id="t7"),
    ]


# (name, periods/week, max/day, priority, lab, playground, double period)
_CURRICULUM = [
    ("Mathematics", 6, 2, SubjectPriority.CORE, False, False, False),
    ("Science", 6, 2, SubjectPriority.CORE, False, False, True),
    ("English", 6, 2, SubjectPriority.CORE, False, False, False),
    ("Hindi", 5, 1, SubjectPriority.CORE, False, False, False),
    ("Social Science", 5, 1, SubjectPriority.CORE, False, False, False),
    ("Physical Education", 3, 1, SubjectPriority.ACTIVITY, False, True, False),
    ("Computer Science", 3, 1, SubjectPriority.ELECTIVE, True, False, True),
]


def demo_subjects(classes: list[ClassInfo]) -> list[Subject]:
    out: list[Subject] = []
    for cls in classes:
        for name, per_week, per_day, priority, lab, playground, double in _CURRICULUM:
            slug = name.lower().replace(" ", "_")
            out.append(
                Subject(
                    subject_id=f"{cls.class_id}_{slug}",
                    class_id=cls.class_id,
                    name=name,
                    periods_per_week=per_week,
                    max_per_day=per_day,
                    priority=priority,
                    is_lab=lab,
                    needs_playground=playground,
                    allow_double_period=double,
                )
            )
    return out


def demo_dataset() -> SchoolDataset:
    teachers = demo_teachers()
    classes = demo_classes()
    return SchoolDataset(
        school=SchoolSettings(
            school_name="Demo Public School",
            board_type="CBSE",
            academic_year="2025-26",
            divisions_per_grade={"IX": ["A"], "X": ["A", "B"]},
        ),
        classes=classes,
        subjects=sync_qualifications(teachers, demo_subjects(classes)),
        teachers=teachers,
        weekday_slots=list(WEEKDAY_SLOTS),
        saturday_slots=list(SATURDAY_SLOTS),
        is_saturday_half_day=True,
    )
