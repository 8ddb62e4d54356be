import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from db import db
from errors import NotFoundError, ServiceError, ValidationError
from models import Cycle, Meeting, MeetingStatus
from models.enums import parse_enum
from services.completion import evaluate_cycle, evaluate_cycles, recount_progress
from services.expenses import meeting_profit_breakdown
from services.financials import calculate_meeting_financials, reset_meeting_financials

logger = logging.getLogger(__name__)


def get_meeting(meeting_id):
    meeting = db.session.get(Meeting, meeting_id)
    if meeting is None:
        raise NotFoundError(f"Meeting {meeting_id} not found")
    return meeting


def get_cycle(cycle_id):
    cycle = db.session.get(Cycle, cycle_id)
    if cycle is None:
        raise NotFoundError(f"Cycle {cycle_id} not found")
    return cycle


def _error_message(error):
    return getattr(error, "message", None) or str(error)


def _parse_ids(ids):
    if not isinstance(ids, list) or not ids:
        raise ValidationError("ids must be a non-empty list")
    return ids


def apply_status(meeting, status):
    new_status = parse_enum(MeetingStatus, status, "meeting status")
    previous = meeting.status
    meeting.status = new_status.value
    meeting.status_updated_at = datetime.utcnow()

    if new_status is MeetingStatus.COMPLETED:
        financials, _ = calculate_meeting_financials(meeting, force=previous != MeetingStatus.COMPLETED.value)
        return financials
    if previous == MeetingStatus.COMPLETED.value:
        logger.info("Meeting %s left completed (%s), clearing financials", meeting.id, new_status.value)
        reset_meeting_financials(meeting)
    return None


def run_completion(cycle_id):
    try:
        return evaluate_cycle(cycle_id).to_dict(), None
    except (ServiceError, SQLAlchemyError) as error:
        return None, _error_message(error)


def update_meeting_status(meeting_id, status):
    meeting = get_meeting(meeting_id)
    try:
        financials = apply_status(meeting, status)
        db.session.commit()
    except (ServiceError, SQLAlchemyError):
        db.session.rollback()
        raise
    logger.info("Meeting %s -> %s", meeting.id, meeting.status)

    # the meeting write is already committed; a cascade failure is only reported
    completion, completion_error = run_completion(meeting.cycle_id)

    return {
        "meeting": meeting.to_dict(),
        "financials": meeting_profit_breakdown(meeting).to_dict() if financials is not None else None,
        "completion": completion,
        "completionError": completion_error,
    }


def bulk_update_status(ids, status):
    ids = _parse_ids(ids)
    parse_enum(MeetingStatus, status, "meeting status")

    updated = 0
    errors = []
    touched_cycles = []
    for meeting_id in ids:
        try:
            meeting = get_meeting(meeting_id)
            apply_status(meeting, status)
            db.session.commit()
        except (ServiceError, SQLAlchemyError) as error:
            db.session.rollback()
            logger.warning("Bulk status update failed for meeting %s: %s", meeting_id, _error_message(error))
            errors.append({"id": meeting_id, "error": _error_message(error)})
            continue
        updated += 1
        touched_cycles.append(meeting.cycle_id)

    results, completion_errors = evaluate_cycles(touched_cycles)
    errors.extend(completion_errors)
    return {
        "updated": updated,
        "errors": errors,
        "completions": [result.to_dict() for result in results],
    }


def recalculate_meeting(meeting_id, force=False):
    meeting = get_meeting(meeting_id)
    try:
        _, skipped = calculate_meeting_financials(meeting, force=force)
        db.session.commit()
    except (ServiceError, SQLAlchemyError):
        db.session.rollback()
        raise
    return {"meeting": meeting.to_dict(), "skipped": skipped}


def bulk_recalculate(ids, force=False):
    ids = _parse_ids(ids)
    updated = 0
    skipped = 0
    errors = []
    for meeting_id in ids:
        try:
            meeting = get_meeting(meeting_id)
            _, was_skipped = calculate_meeting_financials(meeting, force=force)
            db.session.commit()
        except (ServiceError, SQLAlchemyError) as error:
            db.session.rollback()
            logger.warning("Recalculation failed for meeting %s: %s", meeting_id, _error_message(error))
            errors.append({"id": meeting_id, "error": _error_message(error)})
            continue
        if was_skipped:
            skipped += 1
        else:
            updated += 1
    logger.info("Bulk recalculation: %d updated, %d skipped, %d failed", updated, skipped, len(errors))
    return {"updated": updated, "skipped": skipped, "errors": errors}


def meeting_financials(meeting_id):
    meeting = get_meeting(meeting_id)
    if not meeting.has_financials:
        return {
            "meetingId": meeting.id,
            "status": meeting.status,
            "revenue": None,
            "instructorPayment": None,
            "profit": None,
            "cycleExpenseShare": None,
            "meetingExpenses": None,
            "adjustedProfit": None,
        }
    return {"meetingId": meeting.id, "status": meeting.status, **meeting_profit_breakdown(meeting).to_dict()}


def sync_cycle_progress(cycle_id):
    cycle = get_cycle(cycle_id)
    snapshot = recount_progress(cycle)
    db.session.commit()
    logger.info("Synced progress of cycle %s: %s", cycle.id, snapshot)
    return snapshot.to_dict()
