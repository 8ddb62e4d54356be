from . import db

class Customer(db.Model):
    __tablename__ = 'customers'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(50))
    email = db.Column(db.String(255))

    students = db.relationship('Student', backref='customer', lazy=True)

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'phone': self.phone, 'email': self.email}

    def __repr__(self):
        return f"<Customer {self.name}>"


class Student(db.Model):
    __tablename__ = 'students'
    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False)
    name = db.Column(db.String(255), nullable=False)

    def to_dict(self):
        return {'id': self.id, 'customerId': self.customer_id, 'name': self.name}

    def __repr__(self):
        return f"<Student {self.name}>"
