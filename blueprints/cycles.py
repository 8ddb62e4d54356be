from flask import Blueprint, jsonify

from db import db
from decorators import protected, manager_or_admin
from errors import NotFoundError
from models import Instructor
from services.expenses import instructor_cost_estimate
from services.meetings import get_cycle, sync_cycle_progress
from services.reports import cycle_summary

cycles_bp = Blueprint('cycles', __name__, url_prefix='/api/cycles')


@cycles_bp.route('/<int:cycle_id>/sync-progress', methods=['POST'])
@manager_or_admin
def sync_progress(cycle_id):
    return jsonify(sync_cycle_progress(cycle_id))


@cycles_bp.route('/<int:cycle_id>/summary', methods=['GET'])
@protected
def summary(cycle_id):
    return jsonify(cycle_summary(get_cycle(cycle_id)))


@cycles_bp.route('/<int:cycle_id>/instructor-cost/<int:instructor_id>', methods=['GET'])
@manager_or_admin
def instructor_cost(cycle_id, instructor_id):
    cycle = get_cycle(cycle_id)
    instructor = db.session.get(Instructor, instructor_id)
    if instructor is None:
        raise NotFoundError(f"Instructor {instructor_id} not found")
    estimate = instructor_cost_estimate(cycle, instructor)
    estimate['instructorId'] = instructor.id
    estimate['instructorName'] = instructor.name
    return jsonify(estimate)
