from __future__ import annotations

from dataclasses import replace

from solver.types import Subject, Teacher


def sync_qualifications(teachers: list[Teacher], subjects: list[Subject]) -> list[Subject]:
    """Recompute every subject's qualified teachers from the teachers' subject->class maps.

    Teacher records are the source of truth; call this after any teacher edit.
    Ids keep teacher input order.
    """

    out: list[Subject] = []
    for subject in subjects:
        qualified = tuple(t.teacher_id for t in teachers if t.teaches(subject.name, subject.class_id))
        if qualified != subject.qualified_teacher_ids:
            subject = replace(subject, qualified_teacher_ids=qualified)
        out.append(subject)
    return out
