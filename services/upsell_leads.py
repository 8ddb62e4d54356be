from db import db
from errors import NotFoundError
from models import UpsellLead, UpsellLeadStatus
from models.enums import parse_enum


def list_leads(status=None, page=1, per_page=20):
    query = UpsellLead.query
    # unknown status values are ignored rather than rejected
    if status in {s.value for s in UpsellLeadStatus}:
        query = query.filter(UpsellLead.status == status)
    query = query.order_by(UpsellLead.created_at.desc(), UpsellLead.id.desc())
    pagination = query.paginate(page=page, per_page=per_page, error_out=False)
    return {
        "data": [lead.to_dict() for lead in pagination.items],
        "pagination": {
            "page": page,
            "limit": per_page,
            "total": pagination.total,
            "totalPages": pagination.pages,
        },
    }


def update_lead(lead_id, payload):
    lead = db.session.get(UpsellLead, lead_id)
    if lead is None:
        raise NotFoundError(f"Upsell lead {lead_id} not found")
    if payload.get("status"):
        lead.status = parse_enum(UpsellLeadStatus, payload["status"], "lead status").value
    if "notes" in payload:
        lead.notes = payload["notes"]
    db.session.commit()
    return lead
