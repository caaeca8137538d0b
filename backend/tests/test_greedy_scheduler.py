from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone

from conftest import make_subject, make_teacher, teaching_slots
from solver.greedy_scheduler import LAB_ROOM, PLAYGROUND_ROOM, build_day_plan, generate_timetable
from solver.types import (
    WEEKDAYS,
    ClassInfo,
    Day,
    GradeRange,
    SubjectPriority,
    TeacherRole,
    TimeSlot,
    TimetableEntry,
)


FIXED_NOW = datetime(2025, 6, 2, 8, 0, tzinfo=timezone.utc)


def _run(ds, **kwargs):
    return generate_timetable(
        ds.classes,
        ds.subjects,
        ds.teachers,
        ds.weekday_slots,
        ds.saturday_slots,
        now=FIXED_NOW,
        **kwargs,
    )


def test_day_plan_drops_breaks_and_sorts_periods():
    weekday = [
        TimeSlot(2, "09:00", "09:45"),
        TimeSlot(0, "09:45", "10:00", is_break=True),
        TimeSlot(1, "08:00", "08:45"),
    ]
    plan = build_day_plan(weekday, [])
    assert [d for d, _ in plan] == list(WEEKDAYS)
    assert [s.period_number for s in plan[0][1]] == [1, 2]


def test_generation_is_deterministic(demo):
    first = _run(demo)
    second = _run(demo)
    assert first.entries == second.entries
    assert first.errors == second.errors
    assert first.score == second.score


def test_no_teacher_double_booking(demo):
    result = _run(demo)
    seen = Counter((e.teacher_id, e.day, e.period) for e in result.entries)
    assert all(n == 1 for n in seen.values())


def test_one_entry_per_class_slot(demo):
    result = _run(demo)
    seen = Counter((e.class_id, e.day, e.period) for e in result.entries)
    assert all(n == 1 for n in seen.values())


def test_teacher_caps_respected(demo):
    result = _run(demo)
    by_id = {t.teacher_id: t for t in demo.teachers}
    per_day = Counter((e.teacher_id, e.day) for e in result.entries)
    per_week = Counter(e.teacher_id for e in result.entries)
    for (tid, _day), n in per_day.items():
        assert n <= by_id[tid].max_periods_per_day
    for tid, n in per_week.items():
        assert n <= by_id[tid].max_periods_per_week


def test_availability_respected(demo):
    result = _run(demo)
    by_id = {t.teacher_id: t for t in demo.teachers}
    for e in result.entries:
        assert e.day in by_id[e.teacher_id].available_days
    # Mr. Kumar (Hindi) does not work Saturdays.
    assert not [e for e in result.entries if e.teacher_id == "t4" and e.day == Day.SATURDAY]


def test_absent_teacher_never_assigned(demo):
    from dataclasses import replace

    teachers = [replace(t, is_absent=True) if t.teacher_id == "t2" else t for t in demo.teachers]
    result = generate_timetable(demo.classes, demo.subjects, teachers, demo.weekday_slots, demo.saturday_slots)
    assert not [e for e in result.entries if e.teacher_id == "t2"]
    assert any("Science under-assigned" in msg for msg in result.errors)


def test_shared_rooms_exclusive_across_classes(demo):
    result = _run(demo)
    lab = Counter((e.day, e.period) for e in result.entries if e.room == LAB_ROOM)
    ground = Counter((e.day, e.period) for e in result.entries if e.room == PLAYGROUND_ROOM)
    assert lab and ground
    assert all(n == 1 for n in lab.values())
    assert all(n == 1 for n in ground.values())


def test_per_day_subject_cap(demo):
    result = _run(demo)
    caps = {s.subject_id: s.max_per_day for s in demo.subjects}
    counts = Counter((e.class_id, e.subject_id, e.day) for e in result.entries)
    for (_cid, sid, _day), n in counts.items():
        assert n <= caps[sid]


def test_score_bounds_and_totals(demo):
    result = _run(demo)
    assert 0 <= result.score <= 100
    assert result.filled_slots == len(result.entries)
    # 3 classes x (8 periods x 5 weekdays + 5 on Saturday)
    assert result.total_slots == 3 * 45


def test_entries_carry_ids_rooms_and_stamp(demo):
    result = _run(demo)
    e = result.entries[0]
    assert e.entry_id == f"tt_{e.class_id}_{e.day.value}_{e.period}"
    assert e.generated_at == FIXED_NOW.isoformat()
    assert e.time_slot == "08:00 - 08:40"
    regular = [x for x in result.entries if x.room not in (LAB_ROOM, PLAYGROUND_ROOM)]
    assert {x.room for x in regular if x.class_id == "c1"} == {"Room X-A"}


def test_minimal_fill_scenario(one_class):
    t1 = make_teacher("T1", {"Mathematics": ("c1",)}, per_day=5, per_week=30)
    math = make_subject("m", "c1", "Mathematics", 3, 1, ("T1",))
    weekday = teaching_slots(6)
    saturday = teaching_slots(4)

    result = generate_timetable([one_class], [math], [t1], weekday, saturday)

    assert len(result.entries) == 3
    assert {e.subject_id for e in result.entries} == {"m"}
    assert len({e.day for e in result.entries}) == 3
    assert result.errors == []
    assert result.total_slots == 6 * 5 + 4
    assert result.score == 9


def test_unsatisfiable_subject_reports_zero_assigned(one_class):
    t1 = make_teacher("T1", {"English": ("c1",)})
    english = make_subject("e", "c1", "English", 2, 1, ("T1",))
    art = make_subject("a", "c1", "Art", 4, 1, ())

    result = generate_timetable([one_class], [english, art], [t1], teaching_slots(3), [])

    assert "Class X-A: Art under-assigned (0/4 periods)" in result.errors
    assert not [e for e in result.entries if e.subject_id == "a"]


def test_sole_teacher_is_not_double_booked():
    a = ClassInfo("a", "X", "A")
    b = ClassInfo("b", "X", "B")
    t1 = make_teacher("T1", {"Mathematics": ("a", "b")}, per_day=5, per_week=10)
    subjects = [
        make_subject("a_m", "a", "Mathematics", 5, 1, ("T1",)),
        make_subject("b_m", "b", "Mathematics", 5, 1, ("T1",)),
    ]

    result = generate_timetable([a, b], subjects, [t1], teaching_slots(1), [])

    assert len([e for e in result.entries if e.class_id == "a"]) == 5
    assert not [e for e in result.entries if e.class_id == "b"]
    assert "Class X-B: no subject/teacher available for Monday period 1" in result.errors
    assert "Class X-B: Mathematics under-assigned (0/5 periods)" in result.errors


def test_second_qualified_teacher_takes_the_clash():
    a = ClassInfo("a", "X", "A")
    b = ClassInfo("b", "X", "B")
    t1 = make_teacher("T1", {"Mathematics": ("a", "b")})
    t2 = make_teacher("T2", {"Mathematics": ("b",)})
    subjects = [
        make_subject("a_m", "a", "Mathematics", 5, 1, ("T1",)),
        make_subject("b_m", "b", "Mathematics", 5, 1, ("T1", "T2")),
    ]

    result = generate_timetable([a, b], subjects, [t1, t2], teaching_slots(1), [])

    assert {e.teacher_id for e in result.entries if e.class_id == "b"} == {"T2"}
    assert result.errors == []


def test_locked_teacher_is_stable_across_week(one_class):
    t1 = make_teacher("T1", {"Science": ("c1",)})
    t2 = make_teacher("T2", {"Science": ("c1",)})
    sci = make_subject("s", "c1", "Science", 5, 1, ("T1", "T2"))

    result = generate_timetable([one_class], [sci], [t1, t2], teaching_slots(2), [])

    assert {e.teacher_id for e in result.entries} == {"T1"}


def test_fallback_when_locked_teacher_is_capped(one_class):
    t1 = make_teacher("T1", {"Science": ("c1",)}, per_day=1, per_week=2)
    t2 = make_teacher("T2", {"Science": ("c1",)})
    sci = make_subject("s", "c1", "Science", 4, 1, ("T1", "T2"))

    result = generate_timetable([one_class], [sci], [t1, t2], teaching_slots(1), [])

    assert [e.teacher_id for e in result.entries] == ["T1", "T1", "T2", "T2"]


def test_priority_order_core_before_activity(one_class):
    t1 = make_teacher("T1", {"Mathematics": ("c1",), "Dance": ("c1",)})
    dance = make_subject("d", "c1", "Dance", 1, 1, ("T1",), priority=SubjectPriority.ACTIVITY)
    math = make_subject("m", "c1", "Mathematics", 1, 1, ("T1",))

    result = generate_timetable([one_class], [dance, math], [t1], teaching_slots(2), [])

    monday = sorted((e for e in result.entries if e.day == Day.MONDAY), key=lambda e: e.period)
    assert [e.subject_id for e in monday] == ["m", "d"]


def test_double_period_rule(one_class):
    t1 = make_teacher("T1", {"Mathematics": ("c1",), "Science": ("c1",)})
    math = make_subject("m", "c1", "Mathematics", 3, 3, ("T1",))
    sci = make_subject("s", "c1", "Science", 2, 2, ("T1",), allow_double_period=True)

    result = generate_timetable([one_class], [math, sci], [t1], teaching_slots(3), [], allow_overfill=False)

    monday = {e.period: e.subject_id for e in result.entries if e.day == Day.MONDAY}
    assert monday == {1: "m", 2: "s", 3: "m"}
    for p in (1, 2):
        if monday.get(p) == "m":
            assert monday.get(p + 1) != "m"


def test_class_teacher_opens_and_closes_the_day():
    cls = ClassInfo("c1", "X", "A", class_teacher_id="CT")
    ct = make_teacher("CT", {"Hindi": ("c1",)})
    other = make_teacher("T2", {"English": ("c1",)})
    hindi = make_subject("h", "c1", "Hindi", 10, 2, ("CT",))
    english = make_subject("e", "c1", "English", 20, 4, ("T2",), allow_double_period=True)

    result = generate_timetable([cls], [english, hindi], [other, ct], teaching_slots(6), [])

    for day in WEEKDAYS:
        periods = {e.period: e.teacher_id for e in result.entries if e.day == day}
        assert periods[1] == "CT"
        assert periods[6] == "CT"


def test_demo_class_teacher_opens_monday(demo):
    roles = {t.teacher_id: t.role for t in demo.teachers}
    assert roles["t1"] == TeacherRole.CLASS_TEACHER
    result = _run(demo)
    monday = {e.period: e.teacher_id for e in result.entries if e.class_id == "c1" and e.day == Day.MONDAY}
    assert monday[1] == "t1"
    assert monday[8] == "t1"


def test_overfill_fills_spare_slots_by_one(one_class):
    t1 = make_teacher("T1", {"Mathematics": ("c1",)})
    math = make_subject("m", "c1", "Mathematics", 2, 1, ("T1",))
    weekday = teaching_slots(1)

    strict = generate_timetable([one_class], [math], [t1], weekday, [])
    relaxed = generate_timetable([one_class], [math], [t1], weekday, [], allow_overfill=True)

    assert len(strict.entries) == 2
    assert strict.errors == []
    assert len(relaxed.entries) == 3
    assert relaxed.errors[-1] == "Class X-A: Mathematics over-assigned (3/2 periods)"


def _overfill_setup():
    tm = make_teacher("TM", {"Mathematics": ("c1",)})
    td = make_teacher("TD", {"Dance": ("c1",)}, days=(Day.MONDAY,))
    math = make_subject("m", "c1", "Mathematics", 2, 1, ("TM",))
    dance = make_subject(
        "d", "c1", "Dance", 2, 1, ("TD",), priority=SubjectPriority.ACTIVITY, allow_double_period=True
    )
    return [tm, td], [math, dance]


def test_overfill_prefers_short_subject_over_higher_tier(one_class):
    teachers, subjects = _overfill_setup()

    strict = generate_timetable([one_class], subjects, teachers, teaching_slots(3), [])
    relaxed = generate_timetable([one_class], subjects, teachers, teaching_slots(3), [], allow_overfill=True)

    assert "Class X-A: Dance under-assigned (1/2 periods)" in strict.errors
    monday = {e.period: e.subject_id for e in relaxed.entries if e.day == Day.MONDAY}
    # Monday p3 is the only slot Dance can still use; Mathematics must not take it.
    assert monday == {1: "m", 2: "d", 3: "d"}
    assert relaxed.errors == ["Class X-A: Mathematics over-assigned (3/2 periods)"]


def test_overfill_daily_cap_is_one_over_max_per_day(one_class):
    teachers, subjects = _overfill_setup()
    caps = {s.subject_id: s.max_per_day for s in subjects}

    result = generate_timetable([one_class], subjects, teachers, teaching_slots(3), [], allow_overfill=True)

    per_day = Counter((e.subject_id, e.day) for e in result.entries)
    assert all(n <= caps[sid] + 1 for (sid, _day), n in per_day.items())
    assert per_day[("d", Day.MONDAY)] == 2
    assert per_day[("m", Day.TUESDAY)] == 2


def test_grade_range_limits_classes(demo):
    result = _run(demo, grade_range=GradeRange("IX", "IX"))
    assert {e.class_id for e in result.entries} == {"c3"}
    assert result.total_slots == 45


def test_disabled_class_is_skipped(one_class):
    from dataclasses import replace

    t1 = make_teacher("T1", {"Mathematics": ("c1",)})
    math = make_subject("m", "c1", "Mathematics", 2, 1, ("T1",))
    result = generate_timetable([replace(one_class, is_enabled=False)], [math], [t1], teaching_slots(2), [])
    assert result.entries == []
    assert result.total_slots == 0
    assert result.score == 0


def test_reserved_entries_block_teacher(one_class):
    t1 = make_teacher("T1", {"Mathematics": ("c1",)})
    math = make_subject("m", "c1", "Mathematics", 1, 1, ("T1",))
    held = TimetableEntry(
        entry_id="tt_other_Monday_1",
        class_id="other",
        day=Day.MONDAY,
        period=1,
        time_slot="08:00 - 08:45",
        subject_id="other_math",
        teacher_id="T1",
        room="Room IX-A",
    )

    result = generate_timetable([one_class], [math], [t1], teaching_slots(1), [], reserved_entries=[held])

    assert [(e.day, e.period) for e in result.entries] == [(Day.TUESDAY, 1)]
