from __future__ import annotations

from pydantic import BaseModel, Field

from solver.types import Day


class SubstitutionSuggestionOut(BaseModel):
    teacher_id: str
    teacher_name: str
    reason: str
    compatibility: int
    current_load: int
    subject_match: bool


class PeriodSuggestionsOut(BaseModel):
    entry_id: str
    class_id: str
    period: int
    time_slot: str
    subject_id: str
    subject_name: str
    suggestions: list[SubstitutionSuggestionOut] = Field(default_factory=list)


class ListSubstitutionSuggestionsResponse(BaseModel):
    absent_teacher_id: str
    day: Day
    periods: list[PeriodSuggestionsOut] = Field(default_factory=list)


class AssignSubstituteRequest(BaseModel):
    absent_teacher_id: str = Field(min_length=1)
    substitute_teacher_id: str = Field(min_length=1)
    day: Day
    period: int = Field(ge=1)
