"""
Entity access modules
"""

from igreja.repositories.appointments import AppointmentRepository
from igreja.repositories.dashboard import DashboardRepository, DashboardStats
from igreja.repositories.events import EventRepository
from igreja.repositories.leaders import LeaderRepository
from igreja.repositories.members import MemberRepository
from igreja.repositories.public import PublicDirectory
from igreja.repositories.settings import SettingsRepository
from igreja.repositories.users import UserRepository

__all__ = [
    "AppointmentRepository",
    "DashboardRepository",
    "DashboardStats",
    "EventRepository",
    "LeaderRepository",
    "MemberRepository",
    "PublicDirectory",
    "SettingsRepository",
    "UserRepository",
]
