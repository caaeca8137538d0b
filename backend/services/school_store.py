from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from models import (
    ClassRecord,
    SchoolSettingsRecord,
    SubjectRecord,
    TeacherRecord,
    TimeSlotConfig,
    TimetableVersionRecord,
)
from schemas.school import ClassIn, SubjectIn, TeacherIn, TimeSlotIn
from schemas.timetable import TimetableVersionOut
from services.demo_school import demo_dataset
from services.school_data import SchoolDataset, SchoolSettings
from solver.types import TimetableVersion


logger = logging.getLogger(__name__)


class SchoolStore(Protocol):
    """Where an owner's school data and latest timetable live."""

    def load_dataset(self, owner_id: str | None) -> SchoolDataset: ...

    def save_dataset(self, owner_id: str | None, dataset: SchoolDataset) -> None: ...

    def load_version(self, owner_id: str | None) -> TimetableVersion | None: ...

    def save_version(self, owner_id: str | None, version: TimetableVersion) -> None: ...


class MemorySchoolStore:
    """Process-local store; unknown owners start from the demo school."""

    def __init__(self) -> None:
        self._datasets: dict[str | None, SchoolDataset] = {}
        self._versions: dict[str | None, TimetableVersion] = {}

    def load_dataset(self, owner_id: str | None) -> SchoolDataset:
        if owner_id not in self._datasets:
            self._datasets[owner_id] = demo_dataset()
        return self._datasets[owner_id]

    def save_dataset(self, owner_id: str | None, dataset: SchoolDataset) -> None:
        self._datasets[owner_id] = dataset

    def load_version(self, owner_id: str | None) -> TimetableVersion | None:
        return self._versions.get(owner_id)

    def save_version(self, owner_id: str | None, version: TimetableVersion) -> None:
        self._versions[owner_id] = version


class SqlSchoolStore:
    """SQLAlchemy-backed store. Collections are written replace-all per owner."""

    def __init__(self, db: Session):
        self.db = db

    def _owner(self, owner_id: str | None) -> str:
        # Anonymous callers share one row set.
        return owner_id or ""

    def load_dataset(self, owner_id: str | None) -> SchoolDataset:
        owner = self._owner(owner_id)
        settings_row = self.db.get(SchoolSettingsRecord, owner)
        slot_row = self.db.get(TimeSlotConfig, owner)
        teachers = self._rows(TeacherRecord, owner)
        classes = self._rows(ClassRecord, owner)
        subjects = self._rows(SubjectRecord, owner)

        if settings_row is None and slot_row is None and not (teachers or classes or subjects):
            logger.info("No stored school for owner=%r; serving demo dataset", owner)
            return demo_dataset()

        school = SchoolSettings()
        if settings_row is not None:
            school = SchoolSettings(
                school_name=settings_row.school_name,
                board_type=settings_row.board_type,
                academic_year=settings_row.academic_year,
                divisions_per_grade=dict(settings_row.divisions_per_grade or {}),
                custom_subjects=list(settings_row.custom_subjects or []),
            )

        weekday_slots = []
        saturday_slots = []
        half_day = True
        if slot_row is not None:
            weekday_slots = [TimeSlotIn.model_validate(s).to_domain() for s in slot_row.weekday_slots or []]
            saturday_slots = [TimeSlotIn.model_validate(s).to_domain() for s in slot_row.saturday_slots or []]
            half_day = bool(slot_row.is_saturday_half_day)

        return SchoolDataset(
            school=school,
            classes=[ClassIn.model_validate(r.data).to_domain() for r in classes],
            subjects=[SubjectIn.model_validate(r.data).to_domain() for r in subjects],
            teachers=[TeacherIn.model_validate(r.data).to_domain() for r in teachers],
            weekday_slots=weekday_slots,
            saturday_slots=saturday_slots,
            is_saturday_half_day=half_day,
        )

    def _rows(self, model, owner: str) -> list:
        q = select(model).where(model.owner_id == owner).order_by(model.position.asc())
        return list(self.db.execute(q).scalars().all())

    def save_dataset(self, owner_id: str | None, dataset: SchoolDataset) -> None:
        owner = self._owner(owner_id)
        s = dataset.school
        self.db.merge(
            SchoolSettingsRecord(
                owner_id=owner,
                school_name=s.school_name,
                board_type=s.board_type,
                academic_year=s.academic_year,
                divisions_per_grade=s.divisions_per_grade,
                custom_subjects=s.custom_subjects,
            )
        )
        self.db.merge(
            TimeSlotConfig(
                owner_id=owner,
                weekday_slots=[TimeSlotIn.from_domain(ts).model_dump(mode="json") for ts in dataset.weekday_slots],
                saturday_slots=[TimeSlotIn.from_domain(ts).model_dump(mode="json") for ts in dataset.saturday_slots],
                is_saturday_half_day=dataset.is_saturday_half_day,
            )
        )

        # Delete all then insert (simpler than diffing).
        for model in (TeacherRecord, ClassRecord, SubjectRecord):
            self.db.execute(delete(model).where(model.owner_id == owner))
        for i, t in enumerate(dataset.teachers):
            self.db.add(
                TeacherRecord(
                    owner_id=owner,
                    teacher_id=t.teacher_id,
                    position=i,
                    data=TeacherIn.from_domain(t).model_dump(mode="json"),
                )
            )
        for i, c in enumerate(dataset.classes):
            self.db.add(
                ClassRecord(owner_id=owner, class_id=c.class_id, position=i, data=ClassIn.from_domain(c).model_dump(mode="json"))
            )
        for i, subj in enumerate(dataset.subjects):
            self.db.add(
                SubjectRecord(
                    owner_id=owner,
                    subject_id=subj.subject_id,
                    position=i,
                    data=SubjectIn.from_domain(subj).model_dump(mode="json"),
                )
            )
        self.db.commit()

    def load_version(self, owner_id: str | None) -> TimetableVersion | None:
        row = self.db.get(TimetableVersionRecord, self._owner(owner_id))
        if row is None:
            return None
        return TimetableVersionOut.model_validate(row.version_data).to_domain()

    def save_version(self, owner_id: str | None, version: TimetableVersion) -> None:
        self.db.merge(
            TimetableVersionRecord(
                owner_id=self._owner(owner_id),
                version_id=version.version_id,
                generated_at=version.generated_at,
                score=version.score,
                status=version.status.value,
                version_data=TimetableVersionOut.from_domain(version).model_dump(mode="json"),
            )
        )
        self.db.commit()
