from __future__ import annotations

from sqlalchemy import Column, Integer, Text, UniqueConstraint
from sqlalchemy.types import JSON

from models.base import Base


# Replace-all collections: each row keeps one record's JSON payload plus its
# position so loads return the order the owner saved.


class TeacherRecord(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    teacher_id = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    data = Column(JSON, nullable=False)

    __table_args__ = (UniqueConstraint("owner_id", "teacher_id", name="uq_teachers_owner_teacher"),)


class ClassRecord(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    class_id = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    data = Column(JSON, nullable=False)

    __table_args__ = (UniqueConstraint("owner_id", "class_id", name="uq_classes_owner_class"),)


class SubjectRecord(Base):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    subject_id = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    data = Column(JSON, nullable=False)

    __table_args__ = (UniqueConstraint("owner_id", "subject_id", name="uq_subjects_owner_subject"),)
