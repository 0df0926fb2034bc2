# tests/conftest.py

from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth.models import User

from accounts.models import UserProfile
from fees.models import Fee, StudentFee
from students.models import Student
from supplies.models import Supply
from utils.context import ServiceContext


@pytest.fixture
def make_user(db):
    def _make_user(role, username=None):
        user = User.objects.create_user(
            username=username or f"{role}_user",
            password="secret-pass-123",
            first_name=role.replace('_', ' ').title(),
        )
        UserProfile.objects.create(user=user, role=role)
        return user
    return _make_user


@pytest.fixture
def admin_user(make_user):
    return make_user(UserProfile.ROLE_ADMIN)


@pytest.fixture
def finance_user(make_user):
    return make_user(UserProfile.ROLE_FINANCE_OFFICER)


@pytest.fixture
def supply_user(make_user):
    return make_user(UserProfile.ROLE_SUPPLY_OFFICER)


@pytest.fixture
def student_officer(make_user):
    return make_user(UserProfile.ROLE_STUDENT_OFFICER)


@pytest.fixture
def finance_context(finance_user):
    return ServiceContext(user_id=finance_user.pk, role=UserProfile.ROLE_FINANCE_OFFICER, ip_address='10.0.0.5')


@pytest.fixture
def admin_context(admin_user):
    return ServiceContext(user_id=admin_user.pk, role=UserProfile.ROLE_ADMIN)


@pytest.fixture
def supply_context(supply_user):
    return ServiceContext(user_id=supply_user.pk, role=UserProfile.ROLE_SUPPLY_OFFICER)


@pytest.fixture
def make_student(db):
    counter = {'n': 0}

    def _make_student(**overrides):
        counter['n'] += 1
        data = {
            'student_number': f"STU-{counter['n']:04d}",
            'first_name': 'Student',
            'last_name': f"Number{counter['n']}",
            'date_of_birth': date(2012, 5, 17),
            'gender': 'F',
            'class_year': 'Grade 6',
            'address': '12 School Road',
            'status': Student.STATUS_ACTIVE,
        }
        data.update(overrides)
        return Student.objects.create(**data)
    return _make_student


@pytest.fixture
def student(make_student):
    return make_student(first_name='Amina', last_name='Okello')


@pytest.fixture
def fee(db):
    return Fee.objects.create(
        name='Tuition',
        amount=Decimal('1000.00'),
        academic_year='2024-2025',
        due_date=date(2024, 9, 30),
    )


@pytest.fixture
def student_fee(student, fee):
    return StudentFee.objects.create(student=student, fee=fee)


@pytest.fixture
def supply(db):
    return Supply.objects.create(name='Exercise Books', unit='pieces', quantity_available=10)


@pytest.fixture
def payment_data():
    def _payment_data(amount, **overrides):
        data = {
            'amount': amount,
            'payment_date': date(2024, 9, 15),
            'payment_method': 'cash',
            'notes': '',
        }
        data.update(overrides)
        return data
    return _payment_data
