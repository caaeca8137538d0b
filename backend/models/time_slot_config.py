from __future__ import annotations

from sqlalchemy import Boolean, Column, Text
from sqlalchemy.types import JSON

from models.base import Base


class TimeSlotConfig(Base):
    __tablename__ = "time_slot_config"

    owner_id = Column(Text, primary_key=True)
    weekday_slots = Column(JSON, nullable=False, default=list)
    saturday_slots = Column(JSON, nullable=False, default=list)
    is_saturday_half_day = Column(Boolean, nullable=False, default=True)
