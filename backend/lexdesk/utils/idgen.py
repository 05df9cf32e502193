"""ID Generation Utilities"""
import uuid
from datetime import datetime, timezone
from typing import Optional


def generate_id(prefix: Optional[str] = None) -> str:
    """
    Generate a unique ID with optional prefix

    Args:
        prefix: Optional prefix for the ID (e.g., 'CASE', 'TSK', 'RMD')

    Returns:
        Unique ID string

    Examples:
        >>> generate_id('TSK')
        'TSK-a1b2c3d4e5f6'
        >>> generate_id()
        'a1b2c3d4e5f6'
    """
    unique_part = uuid.uuid4().hex[:12]

    if prefix:
        return f"{prefix}-{unique_part}"
    return unique_part


def generate_user_id() -> str:
    return generate_id("USR")


def generate_case_id() -> str:
    return generate_id("CASE")


def generate_task_id() -> str:
    return generate_id("TSK")


def generate_reminder_id() -> str:
    return generate_id("RMD")


def generate_timeline_event_id() -> str:
    return generate_id("TLE")


def generate_document_id() -> str:
    return generate_id("DOC")


def generate_message_id() -> str:
    return generate_id("MSG")


def generate_notification_id() -> str:
    return generate_id("NTF")


def generate_activity_id() -> str:
    return generate_id("ACT")


def generate_connection_id() -> str:
    return generate_id("CON")


def generate_note_id() -> str:
    return generate_id("NOTE")


def generate_correlation_id() -> str:
    """
    Generate a correlation ID for request tracing

    Returns:
        Correlation ID string with timestamp prefix
    """
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    unique_part = uuid.uuid4().hex[:8]
    return f"COR-{timestamp}-{unique_part}"


def format_case_number(prefix: str, year: int, sequence: int) -> str:
    """Human readable case number, e.g. CASE/2024/000042"""
    return f"{prefix}/{year}/{sequence:06d}"
