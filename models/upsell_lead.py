from datetime import datetime

from . import db
from .enums import UpsellLeadStatus

class UpsellLead(db.Model):
    __tablename__ = 'upsell_leads'
    # second idempotence layer for the completion cascade
    __table_args__ = (db.UniqueConstraint('cycle_id', 'student_id', name='uq_upsell_lead_cycle_student'),)
    id = db.Column(db.Integer, primary_key=True)
    cycle_id = db.Column(db.Integer, db.ForeignKey('cycles.id'), nullable=False)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False)
    registration_id = db.Column(db.Integer, db.ForeignKey('registrations.id'))
    completed_course = db.Column(db.String(255))
    status = db.Column(db.String(20), nullable=False, default=UpsellLeadStatus.NEW.value)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    customer = db.relationship('Customer')
    student = db.relationship('Student')

    def to_dict(self):
        return {
            'id': self.id,
            'cycleId': self.cycle_id,
            'customerId': self.customer_id,
            'studentId': self.student_id,
            'registrationId': self.registration_id,
            'completedCourse': self.completed_course,
            'status': self.status,
            'notes': self.notes,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
            'customer': self.customer.to_dict() if self.customer else None,
            'student': self.student.to_dict() if self.student else None,
        }

    def __repr__(self):
        return f"<UpsellLead cycle={self.cycle_id} student={self.student_id} | {self.status}>"
