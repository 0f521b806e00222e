from __future__ import annotations

from enum import Enum


class Department(str, Enum):
    """Inventory departments (closed set)."""

    CLEANING = "cleaning"
    MAINTENANCE = "maintenance"
    OFFICE = "office"
    PAINT = "paint"
    TOOLS = "tools"
    CANTEEN = "canteen"


class BriefingShift(str, Enum):
    MORNING = "morning"
    EVENING = "evening"
    NIGHT = "night"


class ActionItemStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AttachmentType(str, Enum):
    IMAGE = "image"
    DOCUMENT = "document"
    VIDEO = "video"


class TrainingType(str, Enum):
    SAFETY = "safety"
    TECHNICAL = "technical"
    SOFT_SKILLS = "soft_skills"
    COMPLIANCE = "compliance"
    OTHER = "other"


class TrainingStatus(str, Enum):
    """Lifecycle of a training session."""

    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MachineStatus(str, Enum):
    OPERATIONAL = "operational"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out-of-service"
