"""Time helpers shared by the test modules"""
from datetime import datetime, timedelta

from lexdesk.utils.time import utc_now


def in_days(days: float) -> datetime:
    """A UTC instant `days` from now, truncated to whole seconds"""
    return (utc_now() + timedelta(days=days)).replace(microsecond=0)


def ago(minutes: float) -> datetime:
    return (utc_now() - timedelta(minutes=minutes)).replace(microsecond=0)
