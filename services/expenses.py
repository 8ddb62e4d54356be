import logging
from dataclasses import dataclass

from db import db
from errors import ConflictError, NotFoundError, ValidationError
from models import (
    CycleExpense,
    CycleExpenseType,
    ExpenseStatus,
    Instructor,
    MeetingExpense,
    MeetingExpenseType,
)
from models.enums import parse_enum
from services.financials import expected_meeting_revenue, meeting_duration_hours
from services.rates import RateKind, parse_rate_kind, resolve_hourly_rate
from services.settings import FinanceSettings
from utils import parse_bool, round_currency, to_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeetingProfitBreakdown:
    revenue: float
    instructor_payment: float
    profit: float
    cycle_expense_share: float
    meeting_expenses: float
    adjusted_profit: float

    def to_dict(self):
        return {
            "revenue": self.revenue,
            "instructorPayment": self.instructor_payment,
            "profit": self.profit,
            "cycleExpenseShare": self.cycle_expense_share,
            "meetingExpenses": self.meeting_expenses,
            "adjustedProfit": self.adjusted_profit,
        }


def _positive_number(value, field):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if number <= 0:
        raise ValidationError(f"{field} must be greater than 0")
    return number


def _load_instructor(instructor_id, expense_type):
    if not instructor_id:
        raise ValidationError(f"{expense_type} expenses require an instructor")
    instructor = db.session.get(Instructor, instructor_id)
    if instructor is None:
        raise NotFoundError(f"Instructor {instructor_id} not found")
    return instructor


# ---- cycle expenses ------------------------------------------------------

def cycle_revenue(cycle, settings=None):
    return expected_meeting_revenue(cycle, settings) * (cycle.total_meetings or 0)


def is_hours_based(expense):
    if expense.type == CycleExpenseType.ADDITIONAL_INSTRUCTOR.value:
        return True
    return bool(expense.hours and expense.instructor_id and expense.rate_type)


def resolve_cycle_expense_amount(expense, revenue=None, settings=None):
    settings = settings or FinanceSettings.current()
    if expense.is_percentage:
        if revenue is None:
            revenue = cycle_revenue(expense.cycle, settings)
        return to_number(expense.percentage) / 100 * revenue
    if is_hours_based(expense):
        if expense.instructor is None:
            raise ValidationError(f"Cycle expense {expense.id} has no instructor")
        rate = resolve_hourly_rate(expense.instructor, expense.rate_type,
                                   employee_multiplier=settings.employee_multiplier)
        return to_number(expense.hours) * rate
    return to_number(expense.amount)


def cycle_expense_total(cycle, settings=None):
    settings = settings or FinanceSettings.current()
    revenue = None
    if any(e.is_percentage for e in cycle.expenses):
        revenue = cycle_revenue(cycle, settings)
    return sum(resolve_cycle_expense_amount(e, revenue, settings) for e in cycle.expenses)


def cycle_expense_share(cycle, settings=None):
    if not cycle.total_meetings:
        return 0.0
    return cycle_expense_total(cycle, settings) / cycle.total_meetings


def create_cycle_expense(cycle, payload, settings=None):
    settings = settings or FinanceSettings.current()
    expense_type = parse_enum(CycleExpenseType, payload.get("type"), "expense type")
    expense = CycleExpense(
        type=expense_type.value,
        description=payload.get("description"),
    )

    hours = payload.get("hours")
    instructor_id = payload.get("instructorId")
    rate_type = payload.get("rateType")

    if expense_type is CycleExpenseType.ADDITIONAL_INSTRUCTOR or (hours and instructor_id and rate_type):
        instructor = _load_instructor(instructor_id, expense_type.value)
        kind = parse_rate_kind(rate_type or cycle.activity_type)
        expense.hours = _positive_number(hours, "hours")
        expense.instructor_id = instructor.id
        expense.instructor = instructor
        expense.rate_type = kind.value
        # snapshot for display; totals re-resolve from the rate card
        expense.amount = expense.hours * resolve_hourly_rate(
            instructor, kind, employee_multiplier=settings.employee_multiplier)
    elif parse_bool(payload.get("isPercentage")):
        expense.is_percentage = True
        expense.percentage = _positive_number(payload.get("percentage"), "percentage")
    else:
        expense.amount = _positive_number(payload.get("amount"), "amount")

    cycle.expenses.append(expense)
    logger.info("Cycle expense %s added to cycle %s", expense_type.value, cycle.id)
    return expense


def instructor_cost_estimate(cycle, instructor, settings=None):
    settings = settings or FinanceSettings.current()
    hourly_rate = resolve_hourly_rate(instructor, cycle.activity_type,
                                      employee_multiplier=settings.employee_multiplier)
    cost_per_meeting = round_currency(hourly_rate * (cycle.duration_minutes or 0) / 60)
    return {
        "hourlyRate": hourly_rate,
        "costPerMeeting": cost_per_meeting,
        "totalCost": cost_per_meeting * (cycle.total_meetings or 0),
        "durationMinutes": cycle.duration_minutes,
        "totalMeetings": cycle.total_meetings,
        "activityType": cycle.activity_type,
    }


# ---- meeting expenses ----------------------------------------------------

def extra_instructor_amount(instructor, rate_type, hours, settings=None):
    settings = settings or FinanceSettings.current()
    rate = resolve_hourly_rate(instructor, rate_type, employee_multiplier=settings.employee_multiplier)
    return round_currency(hours * rate)


def create_meeting_expense(meeting, payload, submitted_by=None, settings=None):
    expense_type = parse_enum(MeetingExpenseType, payload.get("type"), "expense type")
    expense = MeetingExpense(
        type=expense_type.value,
        description=payload.get("description"),
        status=ExpenseStatus.PENDING.value,
        submitted_by=submitted_by,
    )

    if expense_type is MeetingExpenseType.EXTRA_INSTRUCTOR:
        instructor = _load_instructor(payload.get("instructorId"), expense_type.value)
        kind = parse_rate_kind(payload.get("rateType") or RateKind.PREPARATION)
        hours = payload.get("hours")
        hours = _positive_number(hours, "hours") if hours not in (None, "") else meeting_duration_hours(meeting)
        expense.instructor_id = instructor.id
        expense.rate_type = kind.value
        expense.hours = hours
        expense.amount = extra_instructor_amount(instructor, kind, hours, settings)
    else:
        expense.amount = _positive_number(payload.get("amount"), "amount")

    meeting.expenses.append(expense)
    logger.info("Meeting expense %s x %s submitted for meeting %s",
                expense_type.value, expense.amount, meeting.id)
    return expense


def _require_pending(expense):
    if expense.status != ExpenseStatus.PENDING.value:
        raise ConflictError(f"Expense {expense.id} is already {expense.status}")


def approve_meeting_expense(expense, reviewer=None):
    _require_pending(expense)
    expense.status = ExpenseStatus.APPROVED.value
    expense.reviewed_by = reviewer
    return expense


def reject_meeting_expense(expense, reason, reviewer=None):
    _require_pending(expense)
    if not reason or not str(reason).strip():
        raise ValidationError("A rejection reason is required")
    expense.status = ExpenseStatus.REJECTED.value
    expense.rejection_reason = str(reason).strip()
    expense.reviewed_by = reviewer
    return expense


def meeting_expenses_total(meeting):
    return sum(to_number(e.amount) for e in meeting.expenses if e.counts_toward_totals)


def meeting_profit_breakdown(meeting, settings=None):
    share = cycle_expense_share(meeting.cycle, settings)
    expenses = meeting_expenses_total(meeting)
    profit = to_number(meeting.profit)
    return MeetingProfitBreakdown(
        revenue=to_number(meeting.revenue),
        instructor_payment=to_number(meeting.instructor_payment),
        profit=profit,
        cycle_expense_share=share,
        meeting_expenses=expenses,
        adjusted_profit=profit - share - expenses,
    )


def adjusted_profit(meeting, settings=None):
    return meeting_profit_breakdown(meeting, settings).adjusted_profit
