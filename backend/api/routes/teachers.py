from __future__ import annotations

import logging
from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_owner_id, get_store, load_dataset
from schemas.school import TeacherAbsenceIn, TeacherIn
from services.school_data import SchoolDataset
from services.school_store import SchoolStore


router = APIRouter()

logger = logging.getLogger(__name__)


def _validate_teacher_constraints(*, max_per_day: int, max_per_week: int, available_days: int) -> None:
    errors: list[str] = []

    if int(max_per_day) > int(max_per_week):
        errors.append("MAX_PER_DAY_GT_MAX_PER_WEEK")
    if int(available_days) == 0 and int(max_per_week) > 0:
        errors.append("NO_AVAILABLE_DAYS")

    if errors:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "INVALID_TEACHER_CONSTRAINTS",
                "errors": errors,
            },
        )


@router.get("", response_model=list[TeacherIn])
def list_teachers(dataset: SchoolDataset = Depends(load_dataset)) -> list[TeacherIn]:
    return [TeacherIn.from_domain(t) for t in dataset.teachers]


@router.put("/{teacher_id}", response_model=TeacherIn)
def put_teacher(
    teacher_id: str,
    payload: TeacherIn,
    dataset: SchoolDataset = Depends(load_dataset),
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> TeacherIn:
    if payload.teacher_id != teacher_id:
        raise HTTPException(status_code=400, detail="TEACHER_ID_MISMATCH")
    _validate_teacher_constraints(
        max_per_day=payload.max_periods_per_day,
        max_per_week=payload.max_periods_per_week,
        available_days=len(payload.available_days),
    )

    teacher = payload.to_domain()
    store.save_dataset(owner_id, dataset.upsert_teacher(teacher))
    logger.info("Teacher %s saved; qualifications re-synced", teacher_id)
    return TeacherIn.from_domain(teacher)


@router.patch("/{teacher_id}/absence", response_model=TeacherIn)
def set_teacher_absence(
    teacher_id: str,
    payload: TeacherAbsenceIn,
    dataset: SchoolDataset = Depends(load_dataset),
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> TeacherIn:
    teacher = dataset.teacher_by_id(teacher_id)
    if teacher is None:
        raise HTTPException(status_code=404, detail="TEACHER_NOT_FOUND")

    updated = replace(teacher, is_absent=payload.is_absent)
    store.save_dataset(owner_id, dataset.upsert_teacher(updated))
    logger.info("Teacher %s marked %s", teacher_id, "absent" if payload.is_absent else "present")
    return TeacherIn.from_domain(updated)
