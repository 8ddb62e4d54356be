from enum import Enum


class CycleType(str, Enum):
    PRIVATE = "private"
    INSTITUTIONAL_PER_CHILD = "institutional_per_child"
    INSTITUTIONAL_FIXED = "institutional_fixed"


class ActivityType(str, Enum):
    FRONTAL = "frontal"
    ONLINE = "online"
    PRIVATE_LESSON = "private_lesson"


class CycleStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class MeetingStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"


class RegistrationStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EmploymentType(str, Enum):
    FREELANCER = "freelancer"
    EMPLOYEE = "employee"


class CycleExpenseType(str, Enum):
    MATERIALS = "materials"
    WRAPAROUND_HOURS = "wraparound_hours"
    EQUIPMENT = "equipment"
    TRAVEL_FIXED = "travel_fixed"
    ADDITIONAL_INSTRUCTOR = "additional_instructor"
    OTHER = "other"


class MeetingExpenseType(str, Enum):
    TRAVEL = "travel"
    TAXI = "taxi"
    EXTRA_INSTRUCTOR = "extra_instructor"
    MATERIALS = "materials"
    OTHER = "other"


class ExpenseStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UpsellLeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    CONVERTED = "converted"
    DISMISSED = "dismissed"


def parse_enum(enum_cls, value, field):
    """Return the member of `enum_cls` named by `value`, or raise ValidationError."""
    from errors import ValidationError

    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field} '{value}' (expected one of: {allowed})")
