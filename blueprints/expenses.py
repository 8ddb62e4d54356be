import logging

from flask import Blueprint, jsonify, request

from db import db
from decorators import current_user, protected, manager_or_admin
from errors import NotFoundError
from models import CycleExpense, MeetingExpense
from services import expenses as expense_service
from services.meetings import get_cycle, get_meeting
from services.settings import FinanceSettings

logger = logging.getLogger(__name__)

expenses_bp = Blueprint('expenses', __name__, url_prefix='/api/expenses')


def _json_body():
    return request.get_json(silent=True) or {}


def _get_or_404(model, expense_id):
    expense = db.session.get(model, expense_id)
    if expense is None:
        raise NotFoundError(f"Expense {expense_id} not found")
    return expense


# --- cycle expenses ---

@expenses_bp.route('/cycle/<int:cycle_id>', methods=['GET'])
@protected
def list_cycle_expenses(cycle_id):
    cycle = get_cycle(cycle_id)
    settings = FinanceSettings.current()
    revenue = expense_service.cycle_revenue(cycle, settings)
    items = []
    for expense in cycle.expenses:
        item = expense.to_dict()
        item['resolvedAmount'] = expense_service.resolve_cycle_expense_amount(expense, revenue, settings)
        items.append(item)
    return jsonify({
        'expenses': items,
        'cycleRevenue': revenue,
        'total': sum(item['resolvedAmount'] for item in items),
        'perMeetingShare': expense_service.cycle_expense_share(cycle, settings),
    })


@expenses_bp.route('/cycle/<int:cycle_id>', methods=['POST'])
@manager_or_admin
def create_cycle_expense(cycle_id):
    cycle = get_cycle(cycle_id)
    expense = expense_service.create_cycle_expense(cycle, _json_body())
    db.session.commit()
    return jsonify(expense.to_dict()), 201


@expenses_bp.route('/cycle/<int:expense_id>', methods=['DELETE'])
@manager_or_admin
def delete_cycle_expense(expense_id):
    expense = _get_or_404(CycleExpense, expense_id)
    db.session.delete(expense)
    db.session.commit()
    logger.info("Cycle expense %s deleted by %s", expense_id, current_user())
    return jsonify({'deleted': expense_id})


# --- meeting expenses ---

@expenses_bp.route('/meeting/<int:meeting_id>', methods=['GET'])
@protected
def list_meeting_expenses(meeting_id):
    meeting = get_meeting(meeting_id)
    return jsonify({
        'expenses': [expense.to_dict() for expense in meeting.expenses],
        'total': expense_service.meeting_expenses_total(meeting),
    })


@expenses_bp.route('/meeting/<int:meeting_id>', methods=['POST'])
@protected
def create_meeting_expense(meeting_id):
    meeting = get_meeting(meeting_id)
    expense = expense_service.create_meeting_expense(meeting, _json_body(), submitted_by=current_user())
    db.session.commit()
    return jsonify(expense.to_dict()), 201


@expenses_bp.route('/meeting/<int:expense_id>/approve', methods=['POST'])
@manager_or_admin
def approve_meeting_expense(expense_id):
    expense = _get_or_404(MeetingExpense, expense_id)
    expense_service.approve_meeting_expense(expense, reviewer=current_user())
    db.session.commit()
    return jsonify(expense.to_dict())


@expenses_bp.route('/meeting/<int:expense_id>/reject', methods=['POST'])
@manager_or_admin
def reject_meeting_expense(expense_id):
    expense = _get_or_404(MeetingExpense, expense_id)
    expense_service.reject_meeting_expense(expense, _json_body().get('reason'), reviewer=current_user())
    db.session.commit()
    return jsonify(expense.to_dict())


@expenses_bp.route('/meeting/<int:expense_id>', methods=['DELETE'])
@manager_or_admin
def delete_meeting_expense(expense_id):
    expense = _get_or_404(MeetingExpense, expense_id)
    db.session.delete(expense)
    db.session.commit()
    logger.info("Meeting expense %s deleted by %s", expense_id, current_user())
    return jsonify({'deleted': expense_id})
