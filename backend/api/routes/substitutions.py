from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_owner_id, get_store, load_dataset, require_version
from schemas.substitution import (
    AssignSubstituteRequest,
    ListSubstitutionSuggestionsResponse,
    PeriodSuggestionsOut,
    SubstitutionSuggestionOut,
)
from schemas.timetable import TimetableVersionOut
from services.school_data import SchoolDataset
from services.school_store import SchoolStore
from services.timetable_service import (
    EntryNotFoundError,
    SubstituteBusyError,
    TimetableLockedError,
    apply_substitution_to_version,
)
from solver.substitution import suggest_substitutes
from solver.types import Day, TimetableVersion


router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/suggestions", response_model=ListSubstitutionSuggestionsResponse)
def list_suggestions(
    teacher_id: str = Query(min_length=1),
    day: Day = Query(),
    dataset: SchoolDataset = Depends(load_dataset),
    version: TimetableVersion = Depends(require_version),
) -> ListSubstitutionSuggestionsResponse:
    if dataset.teacher_by_id(teacher_id) is None:
        raise HTTPException(status_code=404, detail="TEACHER_NOT_FOUND")

    periods = suggest_substitutes(list(version.entries), dataset.teachers, dataset.subjects, teacher_id, day)
    return ListSubstitutionSuggestionsResponse(
        absent_teacher_id=teacher_id,
        day=day,
        periods=[
            PeriodSuggestionsOut(
                entry_id=p.entry.entry_id,
                class_id=p.entry.class_id,
                period=p.entry.period,
                time_slot=p.entry.time_slot,
                subject_id=p.entry.subject_id,
                subject_name=p.subject_name,
                suggestions=[
                    SubstitutionSuggestionOut(
                        teacher_id=s.teacher_id,
                        teacher_name=s.teacher_name,
                        reason=s.reason,
                        compatibility=s.compatibility,
                        current_load=s.current_load,
                        subject_match=s.subject_match,
                    )
                    for s in p.suggestions
                ],
            )
            for p in periods
        ],
    )


@router.post("/assign", response_model=TimetableVersionOut)
def assign_substitute(
    payload: AssignSubstituteRequest,
    dataset: SchoolDataset = Depends(load_dataset),
    version: TimetableVersion = Depends(require_version),
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> TimetableVersionOut:
    if payload.absent_teacher_id == payload.substitute_teacher_id:
        raise HTTPException(status_code=400, detail="SUBSTITUTE_IS_ABSENT_TEACHER")
    substitute = dataset.teacher_by_id(payload.substitute_teacher_id)
    if substitute is None:
        raise HTTPException(status_code=404, detail="TEACHER_NOT_FOUND")
    if substitute.is_absent:
        raise HTTPException(status_code=400, detail="SUBSTITUTE_ABSENT")

    try:
        updated = apply_substitution_to_version(
            version,
            payload.absent_teacher_id,
            payload.substitute_teacher_id,
            payload.day,
            payload.period,
        )
    except TimetableLockedError as exc:
        raise HTTPException(status_code=409, detail={"code": exc.code, "message": str(exc)})
    except SubstituteBusyError as exc:
        raise HTTPException(status_code=409, detail={"code": exc.code, "message": str(exc)})
    except EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": exc.code, "message": str(exc)})

    store.save_version(owner_id, updated)
    return TimetableVersionOut.from_domain(updated)
