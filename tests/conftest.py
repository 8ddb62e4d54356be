from datetime import date

import pytest
from app import create_app
from config import TestingConfig
from models import (
    db, Customer, Cycle, Instructor, Meeting, MeetingExpense, Registration, Student,
)

@pytest.fixture
def app():
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    return app.test_client()

def _login(client, role):
    with client.session_transaction() as session:
        session['authenticated'] = True
        session['user'] = f"{role}@example.com"
        session['role'] = role
    return client

@pytest.fixture
def admin_client(app):
    return _login(app.test_client(), 'admin')

@pytest.fixture
def instructor_client(app):
    return _login(app.test_client(), 'instructor')

@pytest.fixture
def make_instructor(app):
    def factory(**fields):
        fields.setdefault('name', 'Dana Levi')
        fields.setdefault('rate_frontal', 100)
        fields.setdefault('employment_type', 'freelancer')
        instructor = Instructor(**fields)
        db.session.add(instructor)
        db.session.commit()
        return instructor
    return factory

@pytest.fixture
def make_cycle(app, make_instructor):
    def factory(instructor=None, **fields):
        instructor = instructor or make_instructor()
        fields.setdefault('name', 'Robotics Tuesday')
        fields.setdefault('type', 'institutional_fixed')
        fields.setdefault('activity_type', 'frontal')
        fields.setdefault('duration_minutes', 60)
        fields.setdefault('total_meetings', 2)
        fields.setdefault('meeting_revenue', 500)
        fields.setdefault('status', 'active')
        fields.setdefault('completed_meetings', 0)
        fields.setdefault('remaining_meetings', fields['total_meetings'])
        cycle = Cycle(instructor_id=instructor.id, **fields)
        db.session.add(cycle)
        db.session.commit()
        return cycle
    return factory

@pytest.fixture
def make_meeting(app):
    def factory(cycle, scheduled_date=date(2026, 1, 5), status='scheduled', **fields):
        fields.setdefault('instructor_id', cycle.instructor_id)
        meeting = Meeting(cycle_id=cycle.id, scheduled_date=scheduled_date, status=status, **fields)
        db.session.add(meeting)
        db.session.commit()
        return meeting
    return factory

@pytest.fixture
def make_registration(app):
    def factory(cycle, amount=1000, status='active', student_name='Noa'):
        customer = Customer(name=f"Parent of {student_name}", phone='050-0000000')
        db.session.add(customer)
        db.session.flush()
        student = Student(customer_id=customer.id, name=student_name)
        db.session.add(student)
        db.session.flush()
        registration = Registration(cycle_id=cycle.id, student_id=student.id, amount=amount, status=status)
        db.session.add(registration)
        db.session.commit()
        return registration
    return factory

@pytest.fixture
def make_meeting_expense(app):
    def factory(meeting, amount=50, status='pending', type='taxi'):
        expense = MeetingExpense(meeting_id=meeting.id, type=type, amount=amount, status=status)
        db.session.add(expense)
        db.session.commit()
        return expense
    return factory
