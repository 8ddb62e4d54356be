from datetime import datetime

from . import db
from .enums import ExpenseStatus

class CycleExpense(db.Model):
    __tablename__ = 'cycle_expenses'
    id = db.Column(db.Integer, primary_key=True)
    cycle_id = db.Column(db.Integer, db.ForeignKey('cycles.id'), nullable=False)
    type = db.Column(db.String(40), nullable=False)  # CycleExpenseType
    description = db.Column(db.Text)
    amount = db.Column(db.Float)
    is_percentage = db.Column(db.Boolean, nullable=False, default=False)
    percentage = db.Column(db.Float)
    hours = db.Column(db.Float)
    rate_type = db.Column(db.String(20))
    instructor_id = db.Column(db.Integer, db.ForeignKey('instructors.id'))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    instructor = db.relationship('Instructor')

    def to_dict(self):
        return {
            'id': self.id,
            'cycleId': self.cycle_id,
            'type': self.type,
            'description': self.description,
            'amount': self.amount,
            'isPercentage': self.is_percentage,
            'percentage': self.percentage,
            'hours': self.hours,
            'rateType': self.rate_type,
            'instructorId': self.instructor_id,
        }

    def __repr__(self):
        return f"<CycleExpense {self.type} | cycle={self.cycle_id}>"


class MeetingExpense(db.Model):
    __tablename__ = 'meeting_expenses'
    id = db.Column(db.Integer, primary_key=True)
    meeting_id = db.Column(db.Integer, db.ForeignKey('meetings.id'), nullable=False)
    type = db.Column(db.String(40), nullable=False)  # MeetingExpenseType
    description = db.Column(db.Text)
    amount = db.Column(db.Float, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default=ExpenseStatus.PENDING.value)
    rejection_reason = db.Column(db.Text)
    submitted_by = db.Column(db.String(100))
    reviewed_by = db.Column(db.String(100))
    instructor_id = db.Column(db.Integer, db.ForeignKey('instructors.id'))
    rate_type = db.Column(db.String(20))
    hours = db.Column(db.Float)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    instructor = db.relationship('Instructor')

    @property
    def counts_toward_totals(self):
        return self.status != ExpenseStatus.REJECTED.value

    def to_dict(self):
        return {
            'id': self.id,
            'meetingId': self.meeting_id,
            'type': self.type,
            'description': self.description,
            'amount': self.amount,
            'status': self.status,
            'rejectionReason': self.rejection_reason,
            'submittedBy': self.submitted_by,
            'reviewedBy': self.reviewed_by,
            'instructorId': self.instructor_id,
            'rateType': self.rate_type,
            'hours': self.hours,
        }

    def __repr__(self):
        return f"<MeetingExpense {self.type} x {self.amount} | {self.status}>"
