import logging
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from db import db, supports_row_locks
from errors import NotFoundError, ServiceError
from models import (
    Cycle,
    CycleStatus,
    Meeting,
    MeetingStatus,
    RegistrationStatus,
    UpsellLead,
    UpsellLeadStatus,
)
from services.reports import cycle_summary

logger = logging.getLogger(__name__)


@dataclass
class ProgressSnapshot:
    completed_meetings: int
    remaining_meetings: int
    total_meetings: int
    meetings_in_table: int

    def to_dict(self):
        return {
            "completedMeetings": self.completed_meetings,
            "remainingMeetings": self.remaining_meetings,
            "totalMeetings": self.total_meetings,
            "meetingsInTable": self.meetings_in_table,
        }


@dataclass
class CompletionResult:
    cycle_id: int
    completed_meetings: int
    remaining_meetings: int
    total_meetings: int
    cycle_completed: bool = False
    registrations_completed: int = 0
    leads_created: int = 0
    meetings_deleted: int = 0

    def to_dict(self):
        return {
            "cycleId": self.cycle_id,
            "completedMeetings": self.completed_meetings,
            "remainingMeetings": self.remaining_meetings,
            "totalMeetings": self.total_meetings,
            "cycleCompleted": self.cycle_completed,
            "registrationsCompleted": self.registrations_completed,
            "leadsCreated": self.leads_created,
            "meetingsDeleted": self.meetings_deleted,
        }


def recount_progress(cycle):
    db.session.flush()
    completed = (
        db.session.query(func.count(Meeting.id))
        .filter(Meeting.cycle_id == cycle.id, Meeting.status == MeetingStatus.COMPLETED.value)
        .scalar()
    )
    in_table = db.session.query(func.count(Meeting.id)).filter(Meeting.cycle_id == cycle.id).scalar()
    total = cycle.total_meetings or 0

    cycle.completed_meetings = completed
    cycle.remaining_meetings = total - completed
    return ProgressSnapshot(completed, total - completed, total, in_table)


def is_due_for_completion(cycle):
    total = cycle.total_meetings or 0
    return (
        cycle.status == CycleStatus.ACTIVE.value
        and total > 0
        and cycle.completed_meetings >= total
    )


def _load_cycle(cycle_id):
    query = Cycle.query.filter(Cycle.id == cycle_id)
    if supports_row_locks():
        query = query.with_for_update()
    cycle = query.one_or_none()
    if cycle is None:
        raise NotFoundError(f"Cycle {cycle_id} not found")
    return cycle


def _claim_completion(cycle):
    db.session.flush()
    changed = (
        Cycle.query
        .filter(Cycle.id == cycle.id, Cycle.status == CycleStatus.ACTIVE.value)
        .update({Cycle.status: CycleStatus.COMPLETED.value}, synchronize_session="evaluate")
    )
    return changed == 1


def _lead_exists(cycle_id, student_id):
    return UpsellLead.query.filter_by(cycle_id=cycle_id, student_id=student_id).first() is not None


def _create_lead(cycle, registration):
    if _lead_exists(cycle.id, registration.student_id):
        return False
    try:
        with db.session.begin_nested():
            db.session.add(UpsellLead(
                cycle_id=cycle.id,
                customer_id=registration.student.customer_id,
                student_id=registration.student_id,
                registration_id=registration.id,
                completed_course=cycle.name,
                status=UpsellLeadStatus.NEW.value,
            ))
    except IntegrityError:
        logger.info("Upsell lead for student %s in cycle %s already exists",
                    registration.student_id, cycle.id)
        return False
    return True


def _run_cascade(cycle, result):
    registrations = [r for r in cycle.registrations if r.status == RegistrationStatus.ACTIVE.value]
    for registration in registrations:
        registration.status = RegistrationStatus.COMPLETED.value
    result.registrations_completed = len(registrations)
    logger.info("Cycle %s: completed %d registrations", cycle.id, len(registrations))

    result.leads_created = sum(1 for r in registrations if _create_lead(cycle, r))
    logger.info("Cycle %s: created %d upsell leads", cycle.id, result.leads_created)

    scheduled = [m for m in cycle.meetings if m.status == MeetingStatus.SCHEDULED.value]
    for meeting in scheduled:
        db.session.delete(meeting)
    result.meetings_deleted = len(scheduled)
    logger.info("Cycle %s: deleted %d leftover scheduled meetings", cycle.id, len(scheduled))


def evaluate_cycle(cycle_id):
    try:
        cycle = _load_cycle(cycle_id)
        snapshot = recount_progress(cycle)
        result = CompletionResult(
            cycle_id=cycle.id,
            completed_meetings=snapshot.completed_meetings,
            remaining_meetings=snapshot.remaining_meetings,
            total_meetings=snapshot.total_meetings,
        )
        if is_due_for_completion(cycle):
            if _claim_completion(cycle):
                logger.info("Completing cycle %s (%s) at %d/%d meetings", cycle.id, cycle.name,
                            snapshot.completed_meetings, snapshot.total_meetings)
                _run_cascade(cycle, result)
                result.cycle_completed = True
            else:
                logger.info("Cycle %s was already completed by another request", cycle.id)
        db.session.commit()
    except (ServiceError, SQLAlchemyError):
        db.session.rollback()
        logger.exception("Completion check failed for cycle %s", cycle_id)
        raise

    if result.cycle_completed:
        logger.info("Cycle %s summary: %s", cycle_id, cycle_summary(db.session.get(Cycle, cycle_id)))
    return result


def evaluate_cycles(cycle_ids):
    results = []
    errors = []
    for cycle_id in dict.fromkeys(cycle_ids):
        try:
            results.append(evaluate_cycle(cycle_id))
        except (ServiceError, SQLAlchemyError) as error:
            errors.append({"cycleId": cycle_id, "error": getattr(error, "message", str(error))})
    return results, errors
