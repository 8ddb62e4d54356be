import logging
from dataclasses import dataclass

from errors import ValidationError
from models import CycleType, MeetingStatus, RegistrationStatus
from models.enums import parse_enum
from services.rates import resolve_hourly_rate
from services.settings import FinanceSettings
from utils import round_currency, to_number

logger = logging.getLogger(__name__)

BILLABLE_REGISTRATION_STATUSES = (
    RegistrationStatus.ACTIVE.value,
    RegistrationStatus.COMPLETED.value,
)


@dataclass(frozen=True)
class MeetingFinancials:
    revenue: float
    instructor_payment: float
    profit: float

    def to_dict(self):
        return {
            "revenue": self.revenue,
            "instructorPayment": self.instructor_payment,
            "profit": self.profit,
        }


def billable_registration_total(cycle):
    return sum(to_number(r.amount) for r in cycle.registrations
               if r.status in BILLABLE_REGISTRATION_STATUSES)


def active_registration_count(cycle):
    return sum(1 for r in cycle.registrations if r.status == RegistrationStatus.ACTIVE.value)


# Private cycles: which formula the business actually bills by is still to be
# confirmed, so each reading is a named formula selected by PRIVATE_REVENUE_FORMULA.

def private_split_evenly(cycle):
    if not cycle.total_meetings:
        return 0
    return round_currency(billable_registration_total(cycle) / cycle.total_meetings)


def private_per_meeting(cycle):
    return round_currency(billable_registration_total(cycle))


PRIVATE_REVENUE_FORMULAS = {
    "split_evenly": private_split_evenly,
    "per_meeting": private_per_meeting,
}


def private_revenue(cycle, settings):
    try:
        formula = PRIVATE_REVENUE_FORMULAS[settings.private_revenue_formula]
    except KeyError:
        raise ValidationError(f"Unknown private revenue formula '{settings.private_revenue_formula}'")
    return formula(cycle)


def per_child_revenue(cycle, settings):
    student_count = cycle.student_count or active_registration_count(cycle)
    return round_currency(to_number(cycle.price_per_student) * student_count)


def fixed_revenue(cycle, settings):
    return to_number(cycle.meeting_revenue)


REVENUE_STRATEGIES = {
    CycleType.PRIVATE: private_revenue,
    CycleType.INSTITUTIONAL_PER_CHILD: per_child_revenue,
    CycleType.INSTITUTIONAL_FIXED: fixed_revenue,
}


def expected_meeting_revenue(cycle, settings=None):
    settings = settings or FinanceSettings.current()
    cycle_type = parse_enum(CycleType, cycle.type, "cycle type")
    return REVENUE_STRATEGIES[cycle_type](cycle, settings)


def meeting_activity_kind(meeting):
    return meeting.activity_type or meeting.cycle.activity_type


def meeting_duration_hours(meeting):
    minutes = meeting.duration_minutes or meeting.cycle.duration_minutes or 0
    return minutes / 60


def project_meeting_financials(meeting, settings=None):
    settings = settings or FinanceSettings.current()
    revenue = expected_meeting_revenue(meeting.cycle, settings)
    if meeting.instructor is None:
        logger.warning("Meeting %s (cycle %s) has no instructor, instructor payment set to 0",
                       meeting.id, meeting.cycle_id)
        instructor_payment = 0
    else:
        rate = resolve_hourly_rate(meeting.instructor, meeting_activity_kind(meeting),
                                   employee_multiplier=settings.employee_multiplier)
        instructor_payment = round_currency(rate * meeting_duration_hours(meeting))
    return MeetingFinancials(revenue, instructor_payment, revenue - instructor_payment)


def compute_meeting_financials(meeting, settings=None):
    if meeting.status != MeetingStatus.COMPLETED.value:
        raise ValidationError(f"Can only calculate financials for completed meetings "
                              f"(meeting {meeting.id} is {meeting.status})")
    return project_meeting_financials(meeting, settings)


def stored_financials(meeting):
    return MeetingFinancials(meeting.revenue, meeting.instructor_payment, meeting.profit)


def calculate_meeting_financials(meeting, force=False, settings=None):
    if meeting.status != MeetingStatus.COMPLETED.value:
        raise ValidationError(f"Can only recalculate completed meetings "
                              f"(meeting {meeting.id} is {meeting.status})")
    if meeting.has_financials and not force:
        return stored_financials(meeting), True

    financials = compute_meeting_financials(meeting, settings)
    meeting.revenue = financials.revenue
    meeting.instructor_payment = financials.instructor_payment
    meeting.profit = financials.profit

    if financials.profit < 0:
        logger.warning("Negative profit on meeting %s (cycle %s): revenue=%s cost=%s profit=%s",
                       meeting.id, meeting.cycle_id, financials.revenue,
                       financials.instructor_payment, financials.profit)
    return financials, False


def reset_meeting_financials(meeting):
    meeting.revenue = None
    meeting.instructor_payment = None
    meeting.profit = None
