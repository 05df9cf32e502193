"""Authorization and activity engine"""
from .access_control import AccessDecision, resolve
from .access_guard import AccessGuard
from .activity_logger import ActivityLogger

__all__ = [
    "AccessDecision",
    "resolve",
    "AccessGuard",
    "ActivityLogger",
]
