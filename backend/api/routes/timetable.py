from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_owner_id, get_store, load_dataset, require_version
from schemas.timetable import TeacherLoadBreakdownOut, TeacherLoadOut, TimetableGridEntryOut, TimetableVersionOut
from services.school_data import SchoolDataset
from services.school_store import SchoolStore
from services.timetable_service import (
    TimetableLockedError,
    approve_version,
    lock_version,
    teacher_weekly_load,
    unlock_version,
)
from solver.types import DAYS, TimetableVersion


router = APIRouter()

logger = logging.getLogger(__name__)

_DAY_ORDER = {d: i for i, d in enumerate(DAYS)}


@router.get("", response_model=TimetableVersionOut)
def get_timetable(version: TimetableVersion = Depends(require_version)) -> TimetableVersionOut:
    return TimetableVersionOut.from_domain(version)


@router.get("/class/{class_id}", response_model=list[TimetableGridEntryOut])
def get_class_grid(
    class_id: str,
    dataset: SchoolDataset = Depends(load_dataset),
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> list[TimetableGridEntryOut]:
    cls = dataset.class_by_id(class_id)
    if cls is None:
        raise HTTPException(status_code=404, detail="CLASS_NOT_FOUND")

    version = store.load_version(owner_id)
    if version is None:
        return []

    subject_name = {s.subject_id: s.name for s in dataset.subjects}
    teacher_by_id = {t.teacher_id: t for t in dataset.teachers}
    rows = sorted(
        (e for e in version.entries if e.class_id == class_id),
        key=lambda e: (_DAY_ORDER[e.day], e.period),
    )

    out: list[TimetableGridEntryOut] = []
    for e in rows:
        teacher = teacher_by_id.get(e.teacher_id)
        out.append(
            TimetableGridEntryOut(
                day=e.day,
                period=e.period,
                time_slot=e.time_slot,
                class_label=cls.label,
                subject_name=subject_name.get(e.subject_id, "Unknown"),
                teacher_name=teacher.name if teacher is not None else "Unknown",
                room=e.room,
                teacher_absent=bool(teacher is not None and teacher.is_absent),
            )
        )
    return out


@router.get("/teachers/{teacher_id}/load", response_model=TeacherLoadOut)
def get_teacher_load(
    teacher_id: str,
    dataset: SchoolDataset = Depends(load_dataset),
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> TeacherLoadOut:
    if dataset.teacher_by_id(teacher_id) is None:
        raise HTTPException(status_code=404, detail="TEACHER_NOT_FOUND")

    version = store.load_version(owner_id)
    if version is None:
        return TeacherLoadOut(teacher_id=teacher_id, total=0)

    load = teacher_weekly_load(version, teacher_id, dataset.classes, dataset.subjects)
    return TeacherLoadOut(
        teacher_id=load.teacher_id,
        total=load.total,
        breakdown=[
            TeacherLoadBreakdownOut(class_label=label, subject_name=name, count=n) for label, name, n in load.breakdown
        ],
    )


def _save(store: SchoolStore, owner_id: str | None, version: TimetableVersion) -> TimetableVersionOut:
    store.save_version(owner_id, version)
    logger.info("Timetable version %s is now %s", version.version_id, version.status.value)
    return TimetableVersionOut.from_domain(version)


@router.post("/lock", response_model=TimetableVersionOut)
def lock_timetable(
    version: TimetableVersion = Depends(require_version),
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> TimetableVersionOut:
    return _save(store, owner_id, lock_version(version))


@router.post("/unlock", response_model=TimetableVersionOut)
def unlock_timetable(
    version: TimetableVersion = Depends(require_version),
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> TimetableVersionOut:
    return _save(store, owner_id, unlock_version(version))


@router.post("/approve", response_model=TimetableVersionOut)
def approve_timetable(
    version: TimetableVersion = Depends(require_version),
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> TimetableVersionOut:
    try:
        approved = approve_version(version)
    except TimetableLockedError as exc:
        raise HTTPException(status_code=409, detail={"code": exc.code, "message": str(exc)})
    return _save(store, owner_id, approved)
