from flask import Blueprint, jsonify, request

from decorators import protected, manager_or_admin
from services import meetings as meeting_service
from utils import parse_bool

meetings_bp = Blueprint('meetings', __name__, url_prefix='/api/meetings')


def _json_body():
    return request.get_json(silent=True) or {}


def _force_flag(body):
    if 'force' in request.args:
        return parse_bool(request.args.get('force'))
    return parse_bool(body.get('force'))


@meetings_bp.route('/<int:meeting_id>/status', methods=['PATCH'])
@manager_or_admin
def update_status(meeting_id):
    body = _json_body()
    return jsonify(meeting_service.update_meeting_status(meeting_id, body.get('status')))


@meetings_bp.route('/bulk-update-status', methods=['POST'])
@manager_or_admin
def bulk_update_status():
    body = _json_body()
    return jsonify(meeting_service.bulk_update_status(body.get('ids'), body.get('status')))


@meetings_bp.route('/<int:meeting_id>/recalculate', methods=['POST'])
@manager_or_admin
def recalculate(meeting_id):
    body = _json_body()
    return jsonify(meeting_service.recalculate_meeting(meeting_id, force=_force_flag(body)))


@meetings_bp.route('/bulk-recalculate', methods=['POST'])
@manager_or_admin
def bulk_recalculate():
    body = _json_body()
    return jsonify(meeting_service.bulk_recalculate(body.get('ids'), force=_force_flag(body)))


@meetings_bp.route('/<int:meeting_id>/financials', methods=['GET'])
@protected
def financials(meeting_id):
    return jsonify(meeting_service.meeting_financials(meeting_id))
