from __future__ import annotations

from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from services.timetable_service import (
    EntryNotFoundError,
    SubstituteBusyError,
    TimetableLockedError,
    ValidationFailedError,
    apply_substitution_to_version,
    approve_version,
    lock_version,
    regenerate,
    teacher_weekly_load,
    unlock_version,
)
from solver.types import Day, GradeRange, TimetableStatus


NOW = datetime(2025, 6, 2, 8, 0, tzinfo=timezone.utc)


def test_regenerate_creates_draft_version(demo):
    version, result = regenerate(demo, now=NOW)

    assert version.status == TimetableStatus.DRAFT
    assert version.score == result.score
    assert version.generated_at == NOW.isoformat()
    assert list(version.entries) == result.entries


def test_each_version_gets_a_fresh_id(demo):
    first, _ = regenerate(demo, now=NOW)
    second, _ = regenerate(demo, first, now=NOW)
    assert first.version_id != second.version_id
    assert first.entries == second.entries


def test_regenerate_refuses_locked_version(demo):
    version, _ = regenerate(demo, now=NOW)
    with pytest.raises(TimetableLockedError):
        regenerate(demo, lock_version(version), now=NOW)


def test_regenerate_blocked_by_validation(demo):
    broken = replace(demo, teachers=[])
    with pytest.raises(ValidationFailedError) as excinfo:
        regenerate(broken, now=NOW)
    assert "No teachers configured" in excinfo.value.messages
    assert excinfo.value.code == "VALIDATION_FAILED"


def test_grade_range_run_keeps_other_classes(demo):
    full, _ = regenerate(demo, now=NOW)
    partial, result = regenerate(demo, full, GradeRange("IX", "IX"), now=NOW)

    kept = [e for e in full.entries if e.class_id != "c3"]
    assert [e for e in partial.entries if e.class_id != "c3"] == kept
    assert {e.class_id for e in result.entries} == {"c3"}
    assert partial.score == result.score

    seen = Counter((e.teacher_id, e.day, e.period) for e in partial.entries)
    assert all(n == 1 for n in seen.values())


def test_status_transitions(demo):
    version, _ = regenerate(demo, now=NOW)

    locked = lock_version(version)
    assert locked.is_locked
    assert {e.status for e in locked.entries} == {TimetableStatus.LOCKED}
    with pytest.raises(TimetableLockedError):
        approve_version(locked)

    unlocked = unlock_version(locked)
    assert unlocked.status == TimetableStatus.DRAFT

    approved = approve_version(unlocked)
    assert approved.status == TimetableStatus.APPROVED
    assert approved.version_id == version.version_id


def _first_entry_of(version, teacher_id):
    return next(e for e in version.entries if e.teacher_id == teacher_id and e.day == Day.MONDAY)


def _free_teacher(version, teachers, day, period, exclude):
    busy = {e.teacher_id for e in version.entries if e.day == day and e.period == period}
    return next(t.teacher_id for t in teachers if t.teacher_id not in busy and t.teacher_id != exclude)


def test_apply_substitution_to_version(demo):
    version, _ = regenerate(demo, now=NOW)
    target = _first_entry_of(version, "t2")
    sub = _free_teacher(version, demo.teachers, target.day, target.period, "t2")

    updated = apply_substitution_to_version(version, "t2", sub, target.day, target.period)

    moved = next(e for e in updated.entries if e.entry_id == target.entry_id)
    assert moved.teacher_id == sub
    assert updated.score == version.score
    assert sum(1 for a, b in zip(version.entries, updated.entries) if a != b) == 1


def test_apply_substitution_errors(demo):
    version, _ = regenerate(demo, now=NOW)
    target = _first_entry_of(version, "t2")
    busy = next(
        e.teacher_id
        for e in version.entries
        if e.day == target.day and e.period == target.period and e.teacher_id != "t2"
    )

    with pytest.raises(SubstituteBusyError):
        apply_substitution_to_version(version, "t2", busy, target.day, target.period)
    with pytest.raises(EntryNotFoundError):
        apply_substitution_to_version(version, "t2", "t3", Day.MONDAY, 99)
    with pytest.raises(TimetableLockedError):
        apply_substitution_to_version(lock_version(version), "t2", "t3", target.day, target.period)


def test_teacher_weekly_load_breakdown(demo):
    version, _ = regenerate(demo, now=NOW)

    load = teacher_weekly_load(version, "t1", demo.classes, demo.subjects)

    assert load.total == sum(1 for e in version.entries if e.teacher_id == "t1")
    assert sum(n for _label, _name, n in load.breakdown) == load.total
    assert ("X-A", "Mathematics", 6) in load.breakdown
