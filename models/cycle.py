from . import db
from .enums import CycleStatus

class Cycle(db.Model):
    __tablename__ = 'cycles'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    instructor_id = db.Column(db.Integer, db.ForeignKey('instructors.id'))
    type = db.Column(db.String(40), nullable=False)  # CycleType
    activity_type = db.Column(db.String(20), nullable=False)  # ActivityType
    duration_minutes = db.Column(db.Integer, nullable=False, default=60)
    # set at creation or explicit edit only; progress never touches it
    total_meetings = db.Column(db.Integer, nullable=False, default=0)
    completed_meetings = db.Column(db.Integer, nullable=False, default=0)
    remaining_meetings = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default=CycleStatus.ACTIVE.value)
    price_per_student = db.Column(db.Float)
    meeting_revenue = db.Column(db.Float)
    student_count = db.Column(db.Integer)

    instructor = db.relationship('Instructor')
    meetings = db.relationship('Meeting', backref='cycle', lazy=True,
                               cascade='all, delete-orphan')
    registrations = db.relationship('Registration', backref='cycle', lazy=True)
    expenses = db.relationship('CycleExpense', backref='cycle', lazy=True,
                               cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'instructorId': self.instructor_id,
            'type': self.type,
            'activityType': self.activity_type,
            'durationMinutes': self.duration_minutes,
            'totalMeetings': self.total_meetings,
            'completedMeetings': self.completed_meetings,
            'remainingMeetings': self.remaining_meetings,
            'status': self.status,
            'pricePerStudent': self.price_per_student,
            'meetingRevenue': self.meeting_revenue,
            'studentCount': self.student_count,
        }

    def __repr__(self):
        return f"<Cycle {self.name} | {self.completed_meetings}/{self.total_meetings} {self.status}>"
