from __future__ import annotations

from pydantic import BaseModel, Field

from solver.types import Day, TimetableEntry, TimetableStatus, TimetableVersion


class TimetableEntryOut(BaseModel):
    entry_id: str
    class_id: str
    day: Day
    period: int
    time_slot: str
    subject_id: str
    teacher_id: str
    room: str
    status: TimetableStatus = TimetableStatus.DRAFT
    generated_at: str = ""

    def to_domain(self) -> TimetableEntry:
        return TimetableEntry(**self.model_dump())

    @classmethod
    def from_domain(cls, e: TimetableEntry) -> "TimetableEntryOut":
        return cls(
            entry_id=e.entry_id,
            class_id=e.class_id,
            day=e.day,
            period=e.period,
            time_slot=e.time_slot,
            subject_id=e.subject_id,
            teacher_id=e.teacher_id,
            room=e.room,
            status=e.status,
            generated_at=e.generated_at,
        )


class TimetableVersionOut(BaseModel):
    version_id: str
    generated_at: str
    score: int = Field(ge=0, le=100)
    status: TimetableStatus = TimetableStatus.DRAFT
    entries: list[TimetableEntryOut] = Field(default_factory=list)

    def to_domain(self) -> TimetableVersion:
        return TimetableVersion(
            version_id=self.version_id,
            generated_at=self.generated_at,
            score=self.score,
            status=self.status,
            entries=tuple(e.to_domain() for e in self.entries),
        )

    @classmethod
    def from_domain(cls, v: TimetableVersion) -> "TimetableVersionOut":
        return cls(
            version_id=v.version_id,
            generated_at=v.generated_at,
            score=v.score,
            status=v.status,
            entries=[TimetableEntryOut.from_domain(e) for e in v.entries],
        )


class TimetableGridEntryOut(BaseModel):
    day: Day
    period: int
    time_slot: str

    class_label: str
    subject_name: str
    teacher_name: str
    room: str
    teacher_absent: bool = False


class TeacherLoadBreakdownOut(BaseModel):
    class_label: str
    subject_name: str
    count: int


class TeacherLoadOut(BaseModel):
    teacher_id: str
    total: int
    breakdown: list[TeacherLoadBreakdownOut] = Field(default_factory=list)
