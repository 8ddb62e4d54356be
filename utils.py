from datetime import datetime, date
from decimal import Decimal, ROUND_HALF_UP

from errors import ValidationError

def normalize_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value[:10], "%Y-%m-%d").date()
        except ValueError:
            raise ValidationError(f"Invalid date format: {value}")
    raise ValidationError(f"Unrecognized date type: {type(value)}")

def month_key(value):
    return normalize_date(value).strftime("%Y-%m")

def first_of_month(value):
    return normalize_date(value).replace(day=1)

def add_months(value, months):
    d = first_of_month(value)
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)

def month_keys(start, count):
    """Keys of `count` consecutive months starting at the month of `start`."""
    return [month_key(add_months(start, i)) for i in range(count)]

def round_currency(value):
    """Round to the nearest whole currency unit, halves away from zero."""
    if value is None:
        return 0
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def to_number(value):
    if value is None:
        return 0.0
    return float(value)

def parse_bool(value):
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "true", "yes", "on")

def parse_positive_int(value, default, name):
    if value in (None, ""):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")
    if number <= 0:
        raise ValidationError(f"{name} must be greater than 0")
    return number
