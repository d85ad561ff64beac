from app.models.custom_instruction import CustomInstruction
from app.models.event_flag import EventFlag
from app.models.happening import Happening
from app.models.scrape_log import ScrapeLog
from app.models.user_attendance import UserAttendance
from app.models.user_profile import UserProfile

__all__ = [
    "CustomInstruction",
    "EventFlag",
    "Happening",
    "ScrapeLog",
    "UserAttendance",
    "UserProfile",
]
