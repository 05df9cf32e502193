"""Domain Enumerations - All status and type definitions"""
from enum import Enum


class UserRole(str, Enum):
    """Actor role (immutable per user record)"""
    CLIENT = "client"
    ADVOCATE = "advocate"
    PARALEGAL = "paralegal"
    ADMIN = "admin"


# ============================================================================
# Case
# ============================================================================

class CaseCategory(str, Enum):
    CIVIL = "civil"
    CRIMINAL = "criminal"
    FAMILY = "family"
    PROPERTY = "property"
    CORPORATE = "corporate"
    LABOR = "labor"
    TAX = "tax"
    CONSTITUTIONAL = "constitutional"
    OTHER = "other"


class CaseStatus(str, Enum):
    """Case lifecycle status; archived is a separate flag"""
    DRAFT = "draft"
    ACTIVE = "active"
    PENDING = "pending"
    ON_HOLD = "on_hold"
    CLOSED = "closed"
    WON = "won"
    LOST = "lost"


class CasePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Outcomes accepted by Case.close()
CLOSE_OUTCOMES = (CaseStatus.WON, CaseStatus.LOST, CaseStatus.CLOSED)


# ============================================================================
# Connection
# ============================================================================

class ConnectionType(str, Enum):
    ADVOCATE = "advocate"
    PARALEGAL = "paralegal"


class ConnectionStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    BLOCKED = "blocked"


# ============================================================================
# Task
# ============================================================================

class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ON_HOLD = "on_hold"


class Priority(str, Enum):
    """Priority scale shared by tasks, reminders, messages and notifications"""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class TaskType(str, Enum):
    RESEARCH = "research"
    DOCUMENT_PREPARATION = "document_preparation"
    FILING = "filing"
    CLIENT_COMMUNICATION = "client_communication"
    COURT_APPEARANCE = "court_appearance"
    EVIDENCE_COLLECTION = "evidence_collection"
    OTHER = "other"


# ============================================================================
# Reminder
# ============================================================================

class ReminderType(str, Enum):
    HEARING_REMINDER = "hearing_reminder"
    DEADLINE_REMINDER = "deadline_reminder"
    TASK_REMINDER = "task_reminder"
    DOCUMENT_REMINDER = "document_reminder"
    PAYMENT_REMINDER = "payment_reminder"
    MEETING_REMINDER = "meeting_reminder"
    CUSTOM_REMINDER = "custom_reminder"


class ReminderStatus(str, Enum):
    """Record-level reminder status"""
    SCHEDULED = "scheduled"
    SENT = "sent"
    CANCELLED = "cancelled"
    FAILED = "failed"


class RecipientStatus(str, Enum):
    """Per-recipient delivery status inside a reminder"""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    DISMISSED = "dismissed"
    SNOOZED = "snoozed"


class RecurrenceFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class DeliveryChannel(str, Enum):
    IN_APP = "in-app"
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class EntityType(str, Enum):
    """Kinds of entity a reminder, notification or activity can point at"""
    CASE = "Case"
    TASK = "Task"
    DOCUMENT = "Document"
    TIMELINE = "Timeline"
    HEARING = "Hearing"
    NOTE = "Note"
    MESSAGE = "Message"
    CONNECTION = "Connection"
    USER = "User"
    COMMENT = "Comment"


# ============================================================================
# Timeline
# ============================================================================

class TimelineEventType(str, Enum):
    CASE_CREATED = "case_created"
    CASE_FILED = "case_filed"
    HEARING_SCHEDULED = "hearing_scheduled"
    HEARING_COMPLETED = "hearing_completed"
    HEARING_POSTPONED = "hearing_postponed"
    DOCUMENT_SUBMITTED = "document_submitted"
    DOCUMENT_RECEIVED = "document_received"
    EVIDENCE_SUBMITTED = "evidence_submitted"
    WITNESS_EXAMINED = "witness_examined"
    ARGUMENT_PRESENTED = "argument_presented"
    JUDGMENT_RESERVED = "judgment_reserved"
    JUDGMENT_DELIVERED = "judgment_delivered"
    STATUS_CHANGED = "status_changed"
    PARALEGAL_ASSIGNED = "paralegal_assigned"
    PARALEGAL_REMOVED = "paralegal_removed"
    CASE_CLOSED = "case_closed"
    CASE_ARCHIVED = "case_archived"
    MILESTONE = "milestone"
    DEADLINE = "deadline"
    NOTE = "note"
    OTHER = "other"


class TimelineEventStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    POSTPONED = "postponed"
    CANCELLED = "cancelled"


class HearingType(str, Enum):
    FIRST_HEARING = "first_hearing"
    REGULAR_HEARING = "regular_hearing"
    FINAL_HEARING = "final_hearing"
    EVIDENCE = "evidence"
    ARGUMENT = "argument"
    JUDGMENT = "judgment"
    OTHER = "other"


class MilestoneType(str, Enum):
    CASE_FILED = "case_filed"
    FIRST_HEARING = "first_hearing"
    EVIDENCE_COMPLETE = "evidence_complete"
    ARGUMENT_COMPLETE = "argument_complete"
    JUDGMENT = "judgment"
    CASE_WON = "case_won"
    CASE_LOST = "case_lost"
    OTHER = "other"


# ============================================================================
# Document
# ============================================================================

class DocumentCategory(str, Enum):
    EVIDENCE = "evidence"
    CONTRACT = "contract"
    AGREEMENT = "agreement"
    COURT_ORDER = "court_order"
    PETITION = "petition"
    AFFIDAVIT = "affidavit"
    NOTICE = "notice"
    CORRESPONDENCE = "correspondence"
    IDENTITY_PROOF = "identity_proof"
    PROPERTY_DOCUMENT = "property_document"
    FINANCIAL_DOCUMENT = "financial_document"
    MEDICAL_RECORD = "medical_record"
    POLICE_REPORT = "police_report"
    WITNESS_STATEMENT = "witness_statement"
    LEGAL_OPINION = "legal_opinion"
    CASE_LAW = "case_law"
    OTHER = "other"


class DocumentStatus(str, Enum):
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    ARCHIVED = "archived"


class DocumentPermission(str, Enum):
    """Per-user grant on a document"""
    VIEW = "view"
    DOWNLOAD = "download"
    EDIT = "edit"
    DELETE = "delete"


# ============================================================================
# Message
# ============================================================================

class MessageType(str, Enum):
    TEXT = "text"
    FILE = "file"
    SYSTEM = "system"


# ============================================================================
# Notification
# ============================================================================

class NotificationType(str, Enum):
    """In-app notification types, including the reminder types the poller forwards"""
    MESSAGE_RECEIVED = "message_received"
    MESSAGE_READ = "message_read"
    CASE_CREATED = "case_created"
    CASE_UPDATED = "case_updated"
    CASE_CLOSED = "case_closed"
    HEARING_SCHEDULED = "hearing_scheduled"
    HEARING_REMINDER = "hearing_reminder"
    HEARING_COMPLETED = "hearing_completed"
    DOCUMENT_UPLOADED = "document_uploaded"
    DOCUMENT_SHARED = "document_shared"
    TASK_ASSIGNED = "task_assigned"
    TASK_COMPLETED = "task_completed"
    TASK_OVERDUE = "task_overdue"
    TASK_COMMENT = "task_comment"
    CONNECTION_REQUEST = "connection_request"
    CONNECTION_ACCEPTED = "connection_accepted"
    CONNECTION_REJECTED = "connection_rejected"
    DEADLINE_APPROACHING = "deadline_approaching"
    PARALEGAL_ASSIGNED = "paralegal_assigned"
    CASE_STATUS_CHANGED = "case_status_changed"
    SYSTEM_ANNOUNCEMENT = "system_announcement"
    DEADLINE_REMINDER = "deadline_reminder"
    TASK_REMINDER = "task_reminder"
    DOCUMENT_REMINDER = "document_reminder"
    PAYMENT_REMINDER = "payment_reminder"
    MEETING_REMINDER = "meeting_reminder"
    CUSTOM_REMINDER = "custom_reminder"
    CUSTOM = "custom"


# ============================================================================
# Activity
# ============================================================================

class ActivityType(str, Enum):
    """Activity trail entry types"""
    # Case
    CASE_CREATED = "case_created"
    CASE_UPDATED = "case_updated"
    CASE_STATUS_CHANGED = "case_status_changed"
    CASE_CLOSED = "case_closed"
    CASE_ARCHIVED = "case_archived"
    CASE_DELETED = "case_deleted"
    # Assignments
    CLIENT_ASSIGNED = "client_assigned"
    ADVOCATE_ASSIGNED = "advocate_assigned"
    PARALEGAL_ASSIGNED = "paralegal_assigned"
    PARALEGAL_REMOVED = "paralegal_removed"
    # Timeline
    TIMELINE_EVENT_ADDED = "timeline_event_added"
    TIMELINE_EVENT_UPDATED = "timeline_event_updated"
    TIMELINE_EVENT_DELETED = "timeline_event_deleted"
    MILESTONE_MARKED = "milestone_marked"
    # Hearings
    HEARING_SCHEDULED = "hearing_scheduled"
    HEARING_UPDATED = "hearing_updated"
    HEARING_COMPLETED = "hearing_completed"
    HEARING_POSTPONED = "hearing_postponed"
    HEARING_CANCELLED = "hearing_cancelled"
    # Documents
    DOCUMENT_UPLOADED = "document_uploaded"
    DOCUMENT_UPDATED = "document_updated"
    DOCUMENT_DELETED = "document_deleted"
    DOCUMENT_DOWNLOADED = "document_downloaded"
    DOCUMENT_SHARED = "document_shared"
    # Messages
    MESSAGE_SENT = "message_sent"
    MESSAGE_DELETED = "message_deleted"
    # Notes
    NOTE_CREATED = "note_created"
    NOTE_UPDATED = "note_updated"
    NOTE_DELETED = "note_deleted"
    # Tasks
    TASK_CREATED = "task_created"
    TASK_STATUS_CHANGED = "task_status_changed"
    TASK_DELETED = "task_deleted"
    # Reminders
    REMINDER_CREATED = "reminder_created"
    REMINDER_SENT = "reminder_sent"
    REMINDER_CANCELLED = "reminder_cancelled"
    # Other
    COMMENT_ADDED = "comment_added"
    STATUS_UPDATED = "status_updated"
    PRIORITY_CHANGED = "priority_changed"
    NOTIFICATION_SENT = "notification_sent"


class ActivityImportance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# ============================================================================
# Note
# ============================================================================

class NoteCategory(str, Enum):
    PERSONAL = "personal"
    LEGAL = "legal"
    EVIDENCE = "evidence"
    IMPORTANT = "important"
    OTHER = "other"


class NotePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NoteStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"
