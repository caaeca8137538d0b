from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, Integer, Text
from sqlalchemy.types import JSON

from models.base import Base


class TimetableVersionRecord(Base):
    """Latest generated timetable per owner; a new generation overwrites it."""

    __tablename__ = "timetable_versions"

    owner_id = Column(Text, primary_key=True)
    version_id = Column(Text, nullable=False)
    generated_at = Column(Text, nullable=False)
    score = Column(Integer, nullable=False, default=0)
    status = Column(Text, nullable=False, default="draft")
    version_data = Column(JSON, nullable=False)

    __table_args__ = (
        CheckConstraint("score >= 0 and score <= 100", name="ck_timetable_versions_score"),
        CheckConstraint("status in ('draft', 'approved', 'locked')", name="ck_timetable_versions_status"),
    )
