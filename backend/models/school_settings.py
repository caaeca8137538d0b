from __future__ import annotations

from sqlalchemy import Column, DateTime, Text
from sqlalchemy.types import JSON
from sqlalchemy.sql import func

from models.base import Base


class SchoolSettingsRecord(Base):
    __tablename__ = "school_settings"

    owner_id = Column(Text, primary_key=True)
    school_name = Column(Text, nullable=False, default="")
    board_type = Column(Text, nullable=False, default="CBSE")
    academic_year = Column(Text, nullable=False, default="")
    divisions_per_grade = Column(JSON, nullable=False, default=dict)
    custom_subjects = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
