from db import db

from .enums import (
    ActivityType,
    CycleExpenseType,
    CycleStatus,
    CycleType,
    EmploymentType,
    ExpenseStatus,
    MeetingExpenseType,
    MeetingStatus,
    RegistrationStatus,
    UpsellLeadStatus,
)
from .customer import Customer, Student
from .instructor import Instructor
from .cycle import Cycle
from .meeting import Meeting
from .registration import Registration
from .expense import CycleExpense, MeetingExpense
from .upsell_lead import UpsellLead
