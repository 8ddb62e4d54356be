from . import db
from .enums import MeetingStatus

class Meeting(db.Model):
    __tablename__ = 'meetings'
    id = db.Column(db.Integer, primary_key=True)
    cycle_id = db.Column(db.Integer, db.ForeignKey('cycles.id'), nullable=False)
    instructor_id = db.Column(db.Integer, db.ForeignKey('instructors.id'))
    scheduled_date = db.Column(db.Date, nullable=False)
    duration_minutes = db.Column(db.Integer)  # None: use the cycle's
    activity_type = db.Column(db.String(20))  # None: use the cycle's
    status = db.Column(db.String(20), nullable=False, default=MeetingStatus.SCHEDULED.value)
    status_updated_at = db.Column(db.DateTime)
    # None until computed on completion or explicit recalculation
    revenue = db.Column(db.Float)
    instructor_payment = db.Column(db.Float)
    profit = db.Column(db.Float)

    instructor = db.relationship('Instructor')
    expenses = db.relationship('MeetingExpense', backref='meeting', lazy=True,
                               cascade='all, delete-orphan')

    @property
    def has_financials(self):
        return self.revenue is not None

    def to_dict(self):
        return {
            'id': self.id,
            'cycleId': self.cycle_id,
            'instructorId': self.instructor_id,
            'scheduledDate': self.scheduled_date.isoformat() if self.scheduled_date else None,
            'durationMinutes': self.duration_minutes,
            'activityType': self.activity_type,
            'status': self.status,
            'statusUpdatedAt': self.status_updated_at.isoformat() if self.status_updated_at else None,
            'revenue': self.revenue,
            'instructorPayment': self.instructor_payment,
            'profit': self.profit,
        }

    def __repr__(self):
        return f"<Meeting {self.scheduled_date} | {self.status}>"
