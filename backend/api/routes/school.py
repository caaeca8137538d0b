from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_owner_id, get_store, load_dataset
from schemas.school import SchoolDataIn
from services.school_data import SchoolDataset, dataset_from_schema, dataset_to_schema
from services.school_store import SchoolStore


router = APIRouter()

logger = logging.getLogger(__name__)


def _duplicates(ids: list[str]) -> list[str]:
    seen: set[str] = set()
    dupes: list[str] = []
    for i in ids:
        if i in seen and i not in dupes:
            dupes.append(i)
        seen.add(i)
    return dupes


def _validate_school_payload(payload: SchoolDataIn) -> None:
    errors: list[str] = []

    if _duplicates([c.class_id for c in payload.classes]):
        errors.append("DUPLICATE_CLASS_ID")
    if _duplicates([s.subject_id for s in payload.subjects]):
        errors.append("DUPLICATE_SUBJECT_ID")
    if _duplicates([t.teacher_id for t in payload.teachers]):
        errors.append("DUPLICATE_TEACHER_ID")

    teacher_ids = {t.teacher_id for t in payload.teachers}
    if any(c.class_teacher_id and c.class_teacher_id not in teacher_ids for c in payload.classes):
        errors.append("CLASS_TEACHER_NOT_FOUND")

    if errors:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "INVALID_SCHOOL_DATA",
                "errors": errors,
            },
        )


@router.get("", response_model=SchoolDataIn)
def get_school(dataset: SchoolDataset = Depends(load_dataset)) -> SchoolDataIn:
    return dataset_to_schema(dataset)


@router.put("", response_model=SchoolDataIn)
def put_school(
    payload: SchoolDataIn,
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> SchoolDataIn:
    _validate_school_payload(payload)

    dataset = dataset_from_schema(payload)
    store.save_dataset(owner_id, dataset)
    logger.info(
        "School data replaced: %d classes, %d subjects, %d teachers",
        len(dataset.classes),
        len(dataset.subjects),
        len(dataset.teachers),
    )
    return dataset_to_schema(dataset)
