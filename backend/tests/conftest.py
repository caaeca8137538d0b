from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from services.demo_school import demo_dataset
from solver.types import DAYS, ClassInfo, Subject, Teacher, TimeSlot


def teaching_slots(n: int, *, with_break_after: int | None = None) -> list[TimeSlot]:
    out: list[TimeSlot] = []
    for p in range(1, n + 1):
        out.append(TimeSlot(p, f"{7 + p:02d}:00", f"{7 + p:02d}:45"))
        if with_break_after == p:
            out.append(TimeSlot(0, f"{7 + p:02d}:45", f"{8 + p:02d}:00", is_break=True, label="Break"))
    return out


def make_teacher(
    teacher_id: str,
    subjects: dict[str, tuple[str, ...]] | None = None,
    *,
    per_day: int = 6,
    per_week: int = 30,
    days=DAYS,
    absent: bool = False,
    name: str | None = None,
) -> Teacher:
    return Teacher(
        teacher_id=teacher_id,
        name=name or f"Teacher {teacher_id}",
        subject_class_map=dict(subjects or {}),
        max_periods_per_day=per_day,
        max_periods_per_week=per_week,
        available_days=frozenset(days),
        is_absent=absent,
    )


def make_subject(
    subject_id: str,
    class_id: str,
    name: str,
    per_week: int,
    per_day: int,
    qualified: tuple[str, ...] = (),
    **kwargs,
) -> Subject:
    return Subject(
        subject_id=subject_id,
        class_id=class_id,
        name=name,
        periods_per_week=per_week,
        max_per_day=per_day,
        qualified_teacher_ids=qualified,
        **kwargs,
    )


@pytest.fixture
def one_class() -> ClassInfo:
    return ClassInfo("c1", "X", "A")


@pytest.fixture
def demo():
    return demo_dataset()


@pytest.fixture
def client():
    from main import create_app

    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def owner_headers() -> dict[str, str]:
    # Fresh owner per test; the in-memory database is shared by the process.
    return {"X-Owner-Id": f"owner-{uuid.uuid4()}"}
