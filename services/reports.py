from models import MeetingStatus, RegistrationStatus
from services.expenses import cycle_expense_total
from utils import to_number


def _percent(part, whole):
    return round(part / whole * 100) if whole else 0


def cycle_summary(cycle, settings=None):
    completed = [m for m in cycle.meetings if m.status == MeetingStatus.COMPLETED.value]
    postponed = [m for m in cycle.meetings if m.status == MeetingStatus.POSTPONED.value]
    registrations = list(cycle.registrations)
    cancelled = [r for r in registrations if r.status == RegistrationStatus.CANCELLED.value]
    finished = [r for r in registrations if r.status == RegistrationStatus.COMPLETED.value]
    instructors = {m.instructor_id for m in cycle.meetings if m.instructor_id is not None}

    total_revenue = sum(to_number(m.revenue) for m in completed)
    total_instructor_cost = sum(to_number(m.instructor_payment) for m in completed)

    return {
        "cycleId": cycle.id,
        "cycleName": cycle.name,
        "status": cycle.status,
        "totalMeetings": cycle.total_meetings,
        "completedMeetings": len(completed),
        "postponedMeetings": len(postponed),
        "totalRevenue": total_revenue,
        "totalInstructorCost": total_instructor_cost,
        "totalProfit": total_revenue - total_instructor_cost,
        "cycleExpenses": cycle_expense_total(cycle, settings),
        "studentsStarted": len(registrations),
        "studentsFinished": len(finished),
        "cancellationRate": _percent(len(cancelled), len(registrations)),
        "postponementRate": _percent(len(postponed), cycle.total_meetings),
        "uniqueInstructorCount": len(instructors),
        "hadInstructorChanges": len(instructors) > 1,
    }
