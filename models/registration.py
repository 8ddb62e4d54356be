from . import db
from .enums import RegistrationStatus

class Registration(db.Model):
    __tablename__ = 'registrations'
    __table_args__ = (db.UniqueConstraint('student_id', 'cycle_id', name='uq_registration_student_cycle'),)
    id = db.Column(db.Integer, primary_key=True)
    cycle_id = db.Column(db.Integer, db.ForeignKey('cycles.id'), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=RegistrationStatus.ACTIVE.value)
    amount = db.Column(db.Float)
    payment_status = db.Column(db.String(20))

    student = db.relationship('Student')

    def to_dict(self):
        return {
            'id': self.id,
            'cycleId': self.cycle_id,
            'studentId': self.student_id,
            'status': self.status,
            'amount': self.amount,
            'paymentStatus': self.payment_status,
        }

    def __repr__(self):
        return f"<Registration student={self.student_id} cycle={self.cycle_id} | {self.status}>"
