from . import db
from .enums import EmploymentType

class Instructor(db.Model):
    __tablename__ = 'instructors'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(50))
    email = db.Column(db.String(255))
    rate_frontal = db.Column(db.Float)
    rate_online = db.Column(db.Float)
    rate_private = db.Column(db.Float)
    rate_preparation = db.Column(db.Float)
    employment_type = db.Column(db.String(20), nullable=False, default=EmploymentType.FREELANCER.value)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'rateFrontal': self.rate_frontal,
            'rateOnline': self.rate_online,
            'ratePrivate': self.rate_private,
            'ratePreparation': self.rate_preparation,
            'employmentType': self.employment_type,
        }

    def __repr__(self):
        return f"<Instructor {self.name} | {self.employment_type}>"
