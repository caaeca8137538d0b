from models.base import Base
from models.school_record import ClassRecord, SubjectRecord, TeacherRecord
from models.school_settings import SchoolSettingsRecord
from models.time_slot_config import TimeSlotConfig
from models.timetable_version import TimetableVersionRecord

__all__ = [
	"Base",
	"ClassRecord",
	"SchoolSettingsRecord",
	"SubjectRecord",
	"TeacherRecord",
	"TimeSlotConfig",
	"TimetableVersionRecord",
]
