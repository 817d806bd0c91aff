"""ORM models exposed for metadata discovery."""
from mentiva.db.models.daily_task import DailyTask
from mentiva.db.models.enfoque import Enfoque
from mentiva.db.models.north_star import NorthStar
from mentiva.db.models.streak import StreakDay
from mentiva.db.models.user import AllowedEmail, User, UserSession
from mentiva.db.models.vision_board import SystemInstructionProfile, VisionBoard
from mentiva.db.models.weekly_plan import FocusArea, WeeklyPlan

__all__ = [
    "AllowedEmail",
    "DailyTask",
    "Enfoque",
    "FocusArea",
    "NorthStar",
    "StreakDay",
    "SystemInstructionProfile",
    "User",
    "UserSession",
    "VisionBoard",
    "WeeklyPlan",
]
