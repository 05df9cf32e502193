"""
Request Schemas

Request bodies for the case-management API. Update requests carry only
the fields the client sent (exclude_unset) to the services.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from ...domain.models import (
    RelatedEntity, Recurrence, EventLocation, EventParticipant, HearingDetails,
    AccessPermissions
)
from ...domain.enums import (
    CaseCategory, CaseStatus, CasePriority, TaskType, TaskStatus, Priority, ReminderType,
    DeliveryChannel, TimelineEventType, HearingType, MilestoneType, DocumentCategory,
    DocumentStatus, MessageType, NoteCategory, NotePriority, NoteStatus
)


# =============================================================================
# Cases
# =============================================================================

class CreateCaseRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    category: CaseCategory
    description: str = ""
    client_id: Optional[str] = None
    advocate_id: Optional[str] = None
    paralegal_ids: List[str] = Field(default_factory=list)
    priority: CasePriority = CasePriority.MEDIUM
    sub_category: Optional[str] = None
    court_name: Optional[str] = None
    court_location: Optional[str] = None
    judge_assigned: Optional[str] = None
    opposing_party: Optional[str] = None
    case_value: Optional[float] = None
    tags: List[str] = Field(default_factory=list)
    filing_date: Optional[datetime] = None


class UpdateCaseRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[CaseCategory] = None
    sub_category: Optional[str] = None
    status: Optional[CaseStatus] = None
    priority: Optional[CasePriority] = None
    court_name: Optional[str] = None
    court_location: Optional[str] = None
    judge_assigned: Optional[str] = None
    opposing_party: Optional[str] = None
    case_value: Optional[float] = None
    tags: Optional[List[str]] = None
    filing_date: Optional[datetime] = None
    next_hearing_date: Optional[datetime] = None


class CloseCaseRequest(BaseModel):
    outcome: str = Field(..., description="won, lost or closed")


class AssignParalegalRequest(BaseModel):
    paralegal_id: str


# =============================================================================
# Tasks
# =============================================================================

class CreateTaskRequest(BaseModel):
    case_id: str
    title: str = Field(..., min_length=1, max_length=200)
    assigned_to: str
    due_date: datetime
    description: str = ""
    task_type: TaskType = TaskType.OTHER
    priority: Priority = Priority.NORMAL
    estimated_hours: Optional[float] = None
    notes: Optional[str] = None


class UpdateTaskRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    task_type: Optional[TaskType] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    notes: Optional[str] = None


class TaskStatusRequest(BaseModel):
    status: TaskStatus


class TaskProgressRequest(BaseModel):
    progress: int


class CommentRequest(BaseModel):
    comment: str = Field(..., max_length=1000)


class AttachmentRequest(BaseModel):
    name: str
    url: str


# =============================================================================
# Reminders
# =============================================================================

class CreateReminderRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)
    reminder_type: ReminderType
    reminder_date: datetime
    recipients: List[str] = Field(default_factory=list)
    related_entity: Optional[RelatedEntity] = None
    event_date: Optional[datetime] = None
    priority: Priority = Priority.NORMAL
    is_recurring: bool = False
    recurrence: Optional[Recurrence] = None
    notification_channels: Optional[List[DeliveryChannel]] = None
    action_url: Optional[str] = None
    action_text: Optional[str] = Field(None, max_length=50)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class UpdateReminderRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    message: Optional[str] = Field(None, min_length=1, max_length=1000)
    reminder_date: Optional[datetime] = None
    event_date: Optional[datetime] = None
    recipients: Optional[List[str]] = None
    priority: Optional[Priority] = None
    notification_channels: Optional[List[DeliveryChannel]] = None
    action_url: Optional[str] = None
    action_text: Optional[str] = Field(None, max_length=50)
    metadata: Optional[Dict[str, Any]] = None


class SnoozeRequest(BaseModel):
    minutes: int = 60


# =============================================================================
# Timeline
# =============================================================================

class CreateEventRequest(BaseModel):
    case_id: str
    title: str = Field(..., min_length=1, max_length=200)
    event_type: TimelineEventType
    event_date: datetime
    description: str = ""
    event_time: Optional[str] = None
    location: Optional[EventLocation] = None
    is_milestone: bool = False
    milestone_type: Optional[MilestoneType] = None
    priority: CasePriority = CasePriority.MEDIUM
    participants: List[EventParticipant] = Field(default_factory=list)
    notes: Optional[str] = None


class CreateHearingRequest(BaseModel):
    case_id: str
    event_date: datetime
    title: Optional[str] = Field(None, max_length=200)
    hearing_type: HearingType = HearingType.REGULAR_HEARING
    judge_assigned: Optional[str] = None
    expected_duration: Optional[int] = None
    event_time: Optional[str] = None
    location: Optional[EventLocation] = None
    description: str = ""
    priority: CasePriority = CasePriority.HIGH
    participants: List[EventParticipant] = Field(default_factory=list)


class UpdateEventRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    event_time: Optional[str] = None
    location: Optional[EventLocation] = None
    priority: Optional[CasePriority] = None
    participants: Optional[List[EventParticipant]] = None
    notes: Optional[str] = None
    hearing_details: Optional[HearingDetails] = None


class CompleteHearingRequest(BaseModel):
    outcome: Optional[str] = None
    actual_duration: Optional[int] = None
    next_hearing_date: Optional[datetime] = None
    notes: Optional[str] = None


class PostponeHearingRequest(BaseModel):
    reason: Optional[str] = None
    new_date: Optional[datetime] = None


class MilestoneRequest(BaseModel):
    milestone_type: MilestoneType = MilestoneType.OTHER


# =============================================================================
# Documents
# =============================================================================

class UploadDocumentRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: DocumentCategory
    case_id: Optional[str] = None
    note_id: Optional[str] = None
    timeline_event_id: Optional[str] = None
    description: str = ""
    sub_category: Optional[str] = None
    file_url: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    confidential: bool = False
    access_permissions: Optional[AccessPermissions] = None


class UpdateDocumentRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[DocumentCategory] = None
    sub_category: Optional[str] = None
    tags: Optional[List[str]] = None
    confidential: Optional[bool] = None
    status: Optional[DocumentStatus] = None


# =============================================================================
# Messages & connections
# =============================================================================

class SendMessageRequest(BaseModel):
    content: str = Field(..., max_length=5000)
    receiver_id: Optional[str] = None
    case_id: Optional[str] = None
    connection_id: Optional[str] = None
    reply_to: Optional[str] = None
    message_type: MessageType = MessageType.TEXT
    priority: Priority = Priority.NORMAL


class ConnectionRequestBody(BaseModel):
    recipient_id: Optional[str] = None
    connection_type: Optional[str] = None
    message: Optional[str] = Field(None, max_length=500)


class ConnectionResponseBody(BaseModel):
    message: Optional[str] = Field(None, max_length=500)


# =============================================================================
# Notes
# =============================================================================

class CreateNoteRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    category: NoteCategory = NoteCategory.PERSONAL
    priority: NotePriority = NotePriority.MEDIUM
    tags: List[str] = Field(default_factory=list)
    status: NoteStatus = NoteStatus.ACTIVE


class UpdateNoteRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    category: Optional[NoteCategory] = None
    priority: Optional[NotePriority] = None
    tags: Optional[List[str]] = None
    status: Optional[NoteStatus] = None


# =============================================================================
# Generic responses
# =============================================================================

class ActionResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    count: Optional[int] = None
