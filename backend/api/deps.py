from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request

from core.database import get_db
from services.school_data import SchoolDataset
from services.school_store import SchoolStore, SqlSchoolStore
from solver.types import TimetableVersion


def get_owner_id(x_owner_id: str | None = Header(default=None)) -> str | None:
    """Owner identity for scoping stored data. Absent or blank means anonymous."""
    owner = (x_owner_id or "").strip()
    return owner or None


def get_store(request: Request, owner_id: str | None = Depends(get_owner_id)):
    # Anonymous callers get the process-local store; identified owners are persisted.
    if owner_id is None:
        yield request.app.state.memory_store
        return

    sessions = get_db()
    db = next(sessions)
    try:
        yield SqlSchoolStore(db)
    finally:
        sessions.close()


def load_dataset(
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> SchoolDataset:
    return store.load_dataset(owner_id)


def require_version(
    store: SchoolStore = Depends(get_store),
    owner_id: str | None = Depends(get_owner_id),
) -> TimetableVersion:
    version = store.load_version(owner_id)
    if version is None:
        raise HTTPException(status_code=404, detail="TIMETABLE_NOT_FOUND")
    return version
