from enum import Enum

from errors import ValidationError
from models import EmploymentType

DEFAULT_EMPLOYEE_MULTIPLIER = 1.3


class RateKind(str, Enum):
    FRONTAL = "frontal"
    ONLINE = "online"
    PRIVATE_LESSON = "private_lesson"
    PREPARATION = "preparation"


def _rate(value):
    return float(value) if value else 0.0


def base_rate(instructor, kind):
    kind = parse_rate_kind(kind)
    if kind is RateKind.FRONTAL:
        return _rate(instructor.rate_frontal)
    if kind is RateKind.ONLINE:
        return _rate(instructor.rate_online) or _rate(instructor.rate_frontal)
    if kind is RateKind.PRIVATE_LESSON:
        return _rate(instructor.rate_private) or _rate(instructor.rate_frontal)
    return _rate(instructor.rate_preparation)


def employment_multiplier(employment_type, employee_multiplier=DEFAULT_EMPLOYEE_MULTIPLIER):
    if employment_type == EmploymentType.EMPLOYEE.value:
        return employee_multiplier
    return 1.0


def resolve_hourly_rate(instructor, kind, employment_type=None,
                        employee_multiplier=DEFAULT_EMPLOYEE_MULTIPLIER):
    if employment_type is None:
        employment_type = instructor.employment_type
    return base_rate(instructor, kind) * employment_multiplier(employment_type, employee_multiplier)


def parse_rate_kind(kind):
    if isinstance(kind, RateKind):
        return kind
    value = getattr(kind, "value", kind)
    try:
        return RateKind(value)
    except ValueError:
        raise ValidationError(f"Unknown rate kind '{value}'")
