from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, replace

from solver.types import Day, Subject, Teacher, TimetableEntry


MATCH_CEILING = 100
MATCH_FLOOR = 85
MATCH_STEP = 3
OTHER_CEILING = 60
OTHER_FLOOR = 40
OTHER_STEP = 4


@dataclass(frozen=True)
class SubstitutionSuggestion:
    teacher_id: str
    teacher_name: str
    reason: str
    compatibility: int
    current_load: int
    subject_match: bool


@dataclass(frozen=True)
class PeriodSuggestions:
    entry: TimetableEntry
    subject_name: str
    suggestions: list[SubstitutionSuggestion] = field(default_factory=list)


def compatibility(subject_match: bool, load: int) -> int:
    """Higher for subject-matched candidates; decreases with the candidate's load that day."""
    if subject_match:
        return max(MATCH_FLOOR, MATCH_CEILING - MATCH_STEP * load)
    return max(OTHER_FLOOR, OTHER_CEILING - OTHER_STEP * load)


def absent_periods(entries: list[TimetableEntry], teacher_id: str, day: Day) -> list[TimetableEntry]:
    return sorted(
        (e for e in entries if e.teacher_id == teacher_id and e.day == day),
        key=lambda e: (e.period, e.class_id),
    )


def _reason(subject_match: bool, subject_name: str, load: int) -> str:
    if subject_match:
        return f"Teaches {subject_name}, free this period ({load} periods today)"
    return f"Free this period, different subject area ({load} periods today)"


def suggest_substitutes(
    entries: list[TimetableEntry],
    teachers: list[Teacher],
    subjects: list[Subject],
    absent_teacher_id: str,
    day: Day,
) -> list[PeriodSuggestions]:
    """Rank cover candidates for each period the absent teacher holds on `day`.

    A candidate must be present, not the absent teacher, and not already holding a
    class in that period according to `entries`. Substitutions already applied to
    `entries` therefore exclude their substitute from the same period.
    """

    subject_by_id = {s.subject_id: s for s in subjects}
    order = {t.teacher_id: i for i, t in enumerate(teachers)}

    busy: set[tuple[str, int]] = set()
    load: dict[str, int] = defaultdict(int)
    for e in entries:
        if e.day != day:
            continue
        busy.add((e.teacher_id, e.period))
        load[e.teacher_id] += 1

    out: list[PeriodSuggestions] = []
    for entry in absent_periods(entries, absent_teacher_id, day):
        subj = subject_by_id.get(entry.subject_id)
        subject_name = subj.name if subj is not None else entry.subject_id

        ranked: list[SubstitutionSuggestion] = []
        for t in teachers:
            if t.teacher_id == absent_teacher_id or t.is_absent:
                continue
            if (t.teacher_id, entry.period) in busy:
                continue
            match = subject_name in t.teachable_subjects
            n = load[t.teacher_id]
            ranked.append(
                SubstitutionSuggestion(
                    teacher_id=t.teacher_id,
                    teacher_name=t.name,
                    reason=_reason(match, subject_name, n),
                    compatibility=compatibility(match, n),
                    current_load=n,
                    subject_match=match,
                )
            )
        ranked.sort(key=lambda s: (not s.subject_match, s.current_load, -s.compatibility, order[s.teacher_id]))
        out.append(PeriodSuggestions(entry=entry, subject_name=subject_name, suggestions=ranked))
    return out


def apply_substitution(
    entries: list[TimetableEntry],
    absent_teacher_id: str,
    substitute_teacher_id: str,
    day: Day,
    period: int,
) -> list[TimetableEntry]:
    """Return a new entry list with the absent teacher's (day, period) entry handed to the substitute.

    Teacher caps are not re-checked: emergency cover may exceed a substitute's daily maximum.
    """

    return [
        replace(e, teacher_id=substitute_teacher_id)
        if e.teacher_id == absent_teacher_id and e.day == day and e.period == period
        else e
        for e in entries
    ]
