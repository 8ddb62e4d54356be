from flask import Blueprint, current_app, jsonify, request

from decorators import manager_or_admin
from services.upsell_leads import list_leads, update_lead
from utils import parse_positive_int

upsell_leads_bp = Blueprint('upsell_leads', __name__, url_prefix='/api/upsell-leads')


@upsell_leads_bp.route('', methods=['GET'])
@manager_or_admin
def index():
    page = parse_positive_int(request.args.get('page'), 1, 'page')
    limit = parse_positive_int(request.args.get('limit'), current_app.config['UPSELL_PAGE_SIZE'], 'limit')
    return jsonify(list_leads(status=request.args.get('status'), page=page, per_page=limit))


@upsell_leads_bp.route('/<int:lead_id>', methods=['PATCH'])
@manager_or_admin
def update(lead_id):
    lead = update_lead(lead_id, request.get_json(silent=True) or {})
    return jsonify(lead.to_dict())
