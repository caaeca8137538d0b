from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from solver.grades import grade_ordinal
from solver.types import GradeRange


class GradeRangeIn(BaseModel):
    from_grade: str = Field(min_length=1)
    to_grade: str = Field(min_length=1)

    @model_validator(mode="after")
    def _check_grades(self) -> "GradeRangeIn":
        grade_ordinal(self.from_grade)
        grade_ordinal(self.to_grade)
        return self

    def to_domain(self) -> GradeRange:
        return GradeRange(from_grade=self.from_grade, to_grade=self.to_grade)


class ValidateTimetableRequest(BaseModel):
    grade_range: GradeRangeIn | None = None


class GenerateTimetableRequest(ValidateTimetableRequest):
    # None falls back to the TIMETABLE_ALLOW_OVERFILL setting.
    allow_overfill: bool | None = None


class SolverConflict(BaseModel):
    severity: Literal["INFO", "WARN", "ERROR"] = "ERROR"
    conflict_type: str
    message: str
    class_id: str | None = None
    subject_id: str | None = None


class ValidateTimetableResponse(BaseModel):
    status: Literal["FAILED_VALIDATION", "READY_FOR_GENERATION"]
    errors: list[str] = Field(default_factory=list)
    conflicts: list[SolverConflict] = Field(default_factory=list)


class GenerateTimetableResponse(BaseModel):
    version_id: str
    score: int
    entries_written: int = 0
    filled_slots: int = 0
    total_slots: int = 0
    errors: list[str] = Field(default_factory=list)
    reason_summary: str | None = None
    diagnostics: list[dict[str, Any]] = Field(default_factory=list)
