"""Domain Models - Pydantic schemas for all entities

Entity methods apply their mutation unconditionally. Whether the call was
legal to make (actor, current status) is decided by the calling service.
"""
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field

from .enums import (
    UserRole, CaseCategory, CaseStatus, CasePriority, ConnectionType, ConnectionStatus,
    TaskStatus, TaskType, Priority, ReminderType, ReminderStatus, RecipientStatus,
    RecurrenceFrequency, DeliveryChannel, EntityType, TimelineEventType,
    TimelineEventStatus, HearingType, MilestoneType, DocumentCategory, DocumentStatus,
    DocumentPermission, MessageType, NotificationType, ActivityType, ActivityImportance,
    NoteCategory, NotePriority, NoteStatus
)
from ..utils.time import utc_now, ensure_utc, add_minutes, is_overdue


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


# ============================================================================
# Identity
# ============================================================================

class ActorContext(BaseModel):
    """Current actor context from JWT token"""
    model_config = ConfigDict(extra="forbid")

    user_id: str = Field(..., description="User ID")
    email: EmailStr = Field(..., description="User email")
    name: str = Field(..., description="User display name")
    role: UserRole = Field(..., description="User role")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class User(BaseModel):
    """Registered user profile"""
    model_config = ConfigDict(extra="forbid")

    user_id: str
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    role: UserRole
    phone: Optional[str] = None
    specialization: Optional[str] = None
    is_active: bool = True
    created_at: UtcDatetime


class RelatedEntity(BaseModel):
    """Reference to another entity by type and id"""
    model_config = ConfigDict(extra="forbid")

    entity_type: EntityType
    entity_id: str


# ============================================================================
# Case
# ============================================================================

class Case(BaseModel):
    """Legal case with exactly one client and one advocate"""
    model_config = ConfigDict(extra="forbid")

    case_id: str
    case_number: str = Field(..., description="CASE/<year>/<6-digit sequence>")
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    category: CaseCategory
    sub_category: Optional[str] = None
    status: CaseStatus = CaseStatus.DRAFT
    priority: CasePriority = CasePriority.MEDIUM

    client_id: str
    advocate_id: str
    paralegal_ids: List[str] = Field(default_factory=list)

    court_name: Optional[str] = None
    court_location: Optional[str] = None
    judge_assigned: Optional[str] = None
    opposing_party: Optional[str] = None
    case_value: Optional[float] = None
    tags: List[str] = Field(default_factory=list)

    filing_date: Optional[UtcDatetime] = None
    next_hearing_date: Optional[UtcDatetime] = None
    closed_date: Optional[UtcDatetime] = None

    is_archived: bool = False
    archived_at: Optional[UtcDatetime] = None

    total_documents: int = 0
    total_tasks: int = 0

    created_by: str
    created_at: UtcDatetime
    updated_at: UtcDatetime

    def has_paralegal(self, user_id: str) -> bool:
        return user_id in self.paralegal_ids

    def close(self, outcome: CaseStatus) -> None:
        """Set the closing outcome and stamp closed_date"""
        self.status = outcome
        self.closed_date = utc_now()

    def archive(self) -> None:
        self.is_archived = True
        self.archived_at = utc_now()

    def unarchive(self) -> None:
        self.is_archived = False
        self.archived_at = None


# ============================================================================
# Connection
# ============================================================================

class Connection(BaseModel):
    """Client to advocate/paralegal connection"""
    model_config = ConfigDict(extra="forbid")

    connection_id: str
    requester_id: str
    recipient_id: str
    connection_type: ConnectionType
    status: ConnectionStatus = ConnectionStatus.PENDING
    is_active: bool = True
    request_message: str = Field("", max_length=500)
    response_message: str = Field("", max_length=500)
    requested_at: UtcDatetime
    responded_at: Optional[UtcDatetime] = None

    def involves(self, user_id: str) -> bool:
        return user_id in (self.requester_id, self.recipient_id)

    def other_party(self, user_id: str) -> str:
        return self.recipient_id if user_id == self.requester_id else self.requester_id

    def accept(self, message: Optional[str] = None) -> None:
        self.status = ConnectionStatus.ACCEPTED
        self.responded_at = utc_now()
        if message:
            self.response_message = message

    def reject(self, message: Optional[str] = None) -> None:
        self.status = ConnectionStatus.REJECTED
        self.responded_at = utc_now()
        self.is_active = False
        if message:
            self.response_message = message

    def block(self) -> None:
        self.status = ConnectionStatus.BLOCKED
        self.is_active = False


# ============================================================================
# Task
# ============================================================================

class TaskComment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str
    comment: str = Field(..., min_length=1, max_length=1000)
    created_at: UtcDatetime


class TaskAttachment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    url: str
    uploaded_by: str
    uploaded_at: UtcDatetime


class Task(BaseModel):
    """Work item assigned by an advocate to a paralegal"""
    model_config = ConfigDict(extra="forbid")

    task_id: str
    case_id: str
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    task_type: TaskType = TaskType.OTHER
    assigned_by: str
    assigned_to: str
    status: TaskStatus = TaskStatus.PENDING
    priority: Priority = Priority.NORMAL
    due_date: UtcDatetime
    start_date: Optional[UtcDatetime] = None
    completed_date: Optional[UtcDatetime] = None
    progress: int = Field(0, ge=0, le=100)
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    notes: Optional[str] = None
    comments: List[TaskComment] = Field(default_factory=list)
    attachments: List[TaskAttachment] = Field(default_factory=list)
    created_at: UtcDatetime
    updated_at: UtcDatetime

    def update_status(self, status: TaskStatus) -> None:
        """Any target status is accepted; completion and start are stamped"""
        self.status = status
        if status == TaskStatus.COMPLETED:
            self.completed_date = utc_now()
            self.progress = 100
        elif status == TaskStatus.IN_PROGRESS and self.start_date is None:
            self.start_date = utc_now()

    def update_progress(self, progress: int) -> None:
        """Clamp to [0, 100] and derive status from the new value"""
        self.progress = max(0, min(100, progress))
        if self.progress == 100 and self.status != TaskStatus.COMPLETED:
            self.status = TaskStatus.COMPLETED
            self.completed_date = utc_now()
        elif self.progress > 0 and self.status == TaskStatus.PENDING:
            self.status = TaskStatus.IN_PROGRESS
            if self.start_date is None:
                self.start_date = utc_now()

    def add_comment(self, user_id: str, comment: str) -> TaskComment:
        entry = TaskComment(user_id=user_id, comment=comment, created_at=utc_now())
        self.comments.append(entry)
        return entry

    def add_attachment(self, name: str, url: str, uploaded_by: str) -> TaskAttachment:
        attachment = TaskAttachment(
            name=name, url=url, uploaded_by=uploaded_by, uploaded_at=utc_now()
        )
        self.attachments.append(attachment)
        return attachment

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        if self.status in (TaskStatus.COMPLETED, TaskStatus.CANCELLED):
            return False
        return is_overdue(self.due_date, now)


# ============================================================================
# Reminder
# ============================================================================

class ReminderRecipient(BaseModel):
    """Per-user delivery state owned by its reminder"""
    model_config = ConfigDict(extra="forbid")

    user_id: str
    status: RecipientStatus = RecipientStatus.PENDING
    sent_at: Optional[UtcDatetime] = None
    dismissed_at: Optional[UtcDatetime] = None
    snoozed_until: Optional[UtcDatetime] = None


class Recurrence(BaseModel):
    model_config = ConfigDict(extra="forbid")

    frequency: Optional[RecurrenceFrequency] = None
    interval: int = Field(1, ge=1)
    end_date: Optional[UtcDatetime] = None
    days_of_week: List[int] = Field(default_factory=list, description="0=Sunday .. 6=Saturday")
    day_of_month: Optional[int] = Field(None, ge=1, le=31)


class Reminder(BaseModel):
    """Scheduled reminder fanned out to recipients by the poller"""
    model_config = ConfigDict(extra="forbid")

    reminder_id: str
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)
    reminder_type: ReminderType
    related_entity: Optional[RelatedEntity] = None
    reminder_date: UtcDatetime
    event_date: Optional[UtcDatetime] = None
    recipients: List[ReminderRecipient] = Field(default_factory=list)
    created_by: str
    is_recurring: bool = False
    recurrence: Optional[Recurrence] = None
    priority: Priority = Priority.NORMAL
    status: ReminderStatus = ReminderStatus.SCHEDULED
    notification_channels: List[DeliveryChannel] = Field(
        default_factory=lambda: [DeliveryChannel.IN_APP]
    )
    action_url: Optional[str] = None
    action_text: str = Field("View", max_length=50)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: UtcDatetime
    updated_at: UtcDatetime

    def get_recipient(self, user_id: str) -> Optional[ReminderRecipient]:
        for recipient in self.recipients:
            if recipient.user_id == user_id:
                return recipient
        return None

    def pending_recipients(self) -> List[ReminderRecipient]:
        return [r for r in self.recipients if r.status == RecipientStatus.PENDING]

    def is_related_to_case(self) -> bool:
        return (
            self.related_entity is not None
            and self.related_entity.entity_type == EntityType.CASE
        )

    def send(self) -> None:
        """Mark the reminder sent and flip every still-pending recipient"""
        now = utc_now()
        self.status = ReminderStatus.SENT
        for recipient in self.pending_recipients():
            recipient.status = RecipientStatus.SENT
            recipient.sent_at = now

    def cancel(self) -> None:
        self.status = ReminderStatus.CANCELLED

    def mark_failed(self) -> None:
        self.status = ReminderStatus.FAILED

    def snooze(self, user_id: str, minutes: int = 60) -> None:
        recipient = self.get_recipient(user_id)
        if recipient is not None:
            recipient.status = RecipientStatus.SNOOZED
            recipient.snoozed_until = add_minutes(utc_now(), minutes)

    def dismiss(self, user_id: str) -> None:
        recipient = self.get_recipient(user_id)
        if recipient is not None:
            recipient.status = RecipientStatus.DISMISSED
            recipient.dismissed_at = utc_now()


# ============================================================================
# Timeline
# ============================================================================

class EventLocation(BaseModel):
    model_config = ConfigDict(extra="forbid")

    court_name: Optional[str] = None
    court_room: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None


class HearingDetails(BaseModel):
    model_config = ConfigDict(extra="forbid")

    hearing_type: Optional[HearingType] = None
    judge_assigned: Optional[str] = None
    expected_duration: Optional[int] = Field(None, description="Minutes")
    actual_duration: Optional[int] = Field(None, description="Minutes")
    outcome: Optional[str] = None
    next_hearing_date: Optional[UtcDatetime] = None
    is_completed: bool = False
    is_postponed: bool = False
    postponement_reason: Optional[str] = None


class EventParticipant(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str
    role: Optional[str] = None
    attended: bool = False


class TimelineEvent(BaseModel):
    """Case timeline entry; hearings carry hearing_details"""
    model_config = ConfigDict(extra="forbid")

    event_id: str
    case_id: str
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    event_type: TimelineEventType
    event_date: UtcDatetime
    event_time: Optional[str] = Field(
        None, pattern=r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$", description="HH:MM (24-hour)"
    )
    location: Optional[EventLocation] = None
    hearing_details: Optional[HearingDetails] = None
    is_milestone: bool = False
    milestone_type: Optional[MilestoneType] = None
    priority: CasePriority = CasePriority.MEDIUM
    status: TimelineEventStatus = TimelineEventStatus.SCHEDULED
    participants: List[EventParticipant] = Field(default_factory=list)
    notes: Optional[str] = None
    is_visible: bool = True
    created_by: str
    updated_by: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime

    @property
    def is_hearing(self) -> bool:
        return self.hearing_details is not None

    def mark_completed(
        self,
        outcome: Optional[str] = None,
        actual_duration: Optional[int] = None,
        next_hearing_date: Optional[datetime] = None
    ) -> None:
        self.status = TimelineEventStatus.COMPLETED
        if self.hearing_details is not None:
            self.hearing_details.is_completed = True
            if outcome:
                self.hearing_details.outcome = outcome
            if actual_duration is not None:
                self.hearing_details.actual_duration = actual_duration
            if next_hearing_date is not None:
                self.hearing_details.next_hearing_date = ensure_utc(next_hearing_date)

    def mark_postponed(self, reason: str, new_date: Optional[datetime] = None) -> None:
        """Record postponement; event_date itself is left as scheduled"""
        self.status = TimelineEventStatus.POSTPONED
        if self.hearing_details is not None:
            self.hearing_details.is_postponed = True
            self.hearing_details.postponement_reason = reason
            if new_date is not None:
                self.hearing_details.next_hearing_date = ensure_utc(new_date)

    def cancel(self) -> None:
        self.status = TimelineEventStatus.CANCELLED

    def hide(self) -> None:
        self.is_visible = False


# ============================================================================
# Document
# ============================================================================

class UserGrant(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str
    permission: DocumentPermission = DocumentPermission.VIEW


class AccessPermissions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    is_public: bool = False
    allowed_users: List[UserGrant] = Field(default_factory=list)
    allowed_roles: List[UserRole] = Field(default_factory=list)

    def grant_for(self, user_id: str) -> Optional[DocumentPermission]:
        for grant in self.allowed_users:
            if grant.user_id == user_id:
                return grant.permission
        return None


class Document(BaseModel):
    """Uploaded file metadata; bytes live in external storage"""
    model_config = ConfigDict(extra="forbid")

    document_id: str
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    category: DocumentCategory
    sub_category: Optional[str] = None
    case_id: Optional[str] = None
    note_id: Optional[str] = None
    timeline_event_id: Optional[str] = None
    file_url: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    uploaded_by: str
    uploaded_at: UtcDatetime
    access_permissions: AccessPermissions = Field(default_factory=AccessPermissions)
    status: DocumentStatus = DocumentStatus.APPROVED
    tags: List[str] = Field(default_factory=list)
    confidential: bool = False
    is_deleted: bool = False
    deleted_at: Optional[UtcDatetime] = None
    deleted_by: Optional[str] = None
    download_count: int = 0
    last_downloaded_at: Optional[UtcDatetime] = None
    last_downloaded_by: Optional[str] = None
    updated_at: UtcDatetime

    def soft_delete(self, user_id: str) -> None:
        self.is_deleted = True
        self.deleted_at = utc_now()
        self.deleted_by = user_id

    def restore(self) -> None:
        self.is_deleted = False
        self.deleted_at = None
        self.deleted_by = None

    def record_download(self, user_id: str) -> None:
        self.download_count += 1
        self.last_downloaded_at = utc_now()
        self.last_downloaded_by = user_id


# ============================================================================
# Message
# ============================================================================

class Message(BaseModel):
    """Direct, case-scoped or connection-scoped message"""
    model_config = ConfigDict(extra="forbid")

    message_id: str
    content: str = Field(..., min_length=1, max_length=5000)
    message_type: MessageType = MessageType.TEXT
    sender_id: str
    receiver_id: Optional[str] = None
    case_id: Optional[str] = None
    connection_id: Optional[str] = None
    reply_to: Optional[str] = None
    thread_id: str
    priority: Priority = Priority.NORMAL
    is_read: bool = False
    read_at: Optional[UtcDatetime] = None
    is_deleted: bool = False
    deleted_at: Optional[UtcDatetime] = None
    deleted_by: Optional[str] = None
    created_at: UtcDatetime

    def mark_read(self) -> None:
        if not self.is_read:
            self.is_read = True
            self.read_at = utc_now()

    def soft_delete(self, user_id: str) -> None:
        self.is_deleted = True
        self.deleted_at = utc_now()
        self.deleted_by = user_id


# ============================================================================
# Notification
# ============================================================================

class Notification(BaseModel):
    """In-app notification addressed to a single user"""
    model_config = ConfigDict(extra="forbid")

    notification_id: str
    user_id: str
    notification_type: NotificationType
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=500)
    related_entity: Optional[RelatedEntity] = None
    action_url: Optional[str] = None
    action_text: str = Field("View", max_length=50)
    priority: Priority = Priority.NORMAL
    icon: str = "bell"
    color: str = "blue"
    is_read: bool = False
    read_at: Optional[UtcDatetime] = None
    expires_at: Optional[UtcDatetime] = None
    created_at: UtcDatetime

    def mark_read(self) -> None:
        if not self.is_read:
            self.is_read = True
            self.read_at = utc_now()


# ============================================================================
# Activity
# ============================================================================

class FieldChange(BaseModel):
    model_config = ConfigDict(extra="forbid")

    field: str
    old_value: Any = None
    new_value: Any = None


class Activity(BaseModel):
    """Append-only case activity entry"""
    model_config = ConfigDict(extra="forbid")

    activity_id: str
    case_id: str
    user_id: str
    activity_type: ActivityType
    description: str
    action: str
    related_entity: Optional[RelatedEntity] = None
    changes: List[FieldChange] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    importance: ActivityImportance = ActivityImportance.MEDIUM
    is_visible: bool = True
    correlation_id: Optional[str] = None
    created_at: UtcDatetime


# ============================================================================
# Note
# ============================================================================

class Note(BaseModel):
    """Private note owned by a single user"""
    model_config = ConfigDict(extra="forbid")

    note_id: str
    user_id: str
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    category: NoteCategory = NoteCategory.PERSONAL
    priority: NotePriority = NotePriority.MEDIUM
    tags: List[str] = Field(default_factory=list, max_length=10)
    status: NoteStatus = NoteStatus.ACTIVE
    created_at: UtcDatetime
    updated_at: UtcDatetime

    def archive(self) -> None:
        self.status = NoteStatus.ARCHIVED

