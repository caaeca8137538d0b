from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_owner_id, get_store, load_dataset
from core.config import settings
from schemas.solver import (
    GenerateTimetableRequest,
    GenerateTimetableResponse,
    SolverConflict,
    ValidateTimetableRequest,
    ValidateTimetableResponse,
)
from services.school_data import SchoolDataset
from services.school_store import SchoolStore
from services.solver_validation import validate_prereqs
from services.timetable_service import TimetableLockedError, ValidationFailedError, regenerate
from solver.solver_diagnostics import summarize_diagnostics


router = APIRouter()

logger = logging.getLogger(__name__)


@router.post("/validate", response_model=ValidateTimetableResponse)
def validate_timetable(
    payload: ValidateTimetableRequest,
    dataset: SchoolDataset = Depends(load_dataset),
) -> ValidateTimetableResponse:
    grade_range = payload.grade_range.to_domain() if payload.grade_range is not None else None
    conflicts = validate_prereqs(
        dataset.classes,
        dataset.subjects,
        dataset.teachers,
        dataset.weekday_slots,
        grade_range,
    )
    return ValidateTimetableResponse(
        status="FAILED_VALIDATION" if conflicts else "READY_FOR_GENERATION",
        errors=[c.message for c in conflicts],
        conflicts=[
            SolverConflict(
                severity=c.severity,
                conflict_type=c.conflict_type,
                message=c.message,
                class_id=c.class_id,
                subject_id=c.subject_id,
            )
            for c in conflicts
        ],
    )


@router.post("/generate", response_model=GenerateTimetableResponse)
def generate(
    payload: GenerateTimetableRequest,
    dataset: SchoolDataset = Depends(load_dataset),
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> GenerateTimetableResponse:
    grade_range = payload.grade_range.to_domain() if payload.grade_range is not None else None
    allow_overfill = (
        payload.allow_overfill if payload.allow_overfill is not None else settings.timetable_allow_overfill
    )

    try:
        version, result = regenerate(
            dataset,
            store.load_version(owner_id),
            grade_range,
            allow_overfill=allow_overfill,
        )
    except TimetableLockedError as exc:
        raise HTTPException(status_code=409, detail={"code": exc.code, "message": str(exc)})
    except ValidationFailedError as exc:
        raise HTTPException(status_code=422, detail={"code": exc.code, "errors": exc.messages})

    store.save_version(owner_id, version)
    logger.info(
        "Timetable version %s saved (score=%d, entries=%d)",
        version.version_id,
        version.score,
        len(version.entries),
    )
    return GenerateTimetableResponse(
        version_id=version.version_id,
        score=version.score,
        entries_written=len(result.entries),
        filled_slots=result.filled_slots,
        total_slots=result.total_slots,
        errors=list(result.errors),
        reason_summary=summarize_diagnostics(result.errors),
        diagnostics=list(result.diagnostics),
    )
