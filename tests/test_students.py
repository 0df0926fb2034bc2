# tests/test_students.py

from datetime import date

import pytest

from fees.models import Payment, StudentFee
from fees.services import PaymentService
from students.models import Student
from students.services import StudentService
from supplies.models import SupplyDistribution
from supplies.services import SupplyService
from utils.context import ServiceContext
from utils.exceptions import NotFoundError, ValidationError
from utils.models import AuditLog


@pytest.fixture
def officer_context(student_officer):
    return ServiceContext(user_id=student_officer.pk, role='student_officer')


def student_data(**overrides):
    data = {
        'student_number': 'STU-9001',
        'first_name': 'Brian',
        'last_name': 'Mugisha',
        'date_of_birth': date(2011, 2, 3),
        'gender': 'M',
        'class_year': 'Grade 7',
        'address': 'Plot 4, Hill Road',
    }
    data.update(overrides)
    return data


def test_create_student_defaults_to_active(officer_context, student_officer):
    student = StudentService.create_student(officer_context, student_data())

    assert student.status == Student.STATUS_ACTIVE
    assert student.created_by_id == str(student_officer.pk)
    assert Student.active.filter(pk=student.pk).exists()
    entry = AuditLog.get_object_history(student).get()
    assert entry.action == 'student_created'


def test_duplicate_student_number_is_rejected(officer_context, student):
    with pytest.raises(ValidationError) as excinfo:
        StudentService.create_student(officer_context, student_data(student_number=student.student_number))

    assert 'student_number' in excinfo.value.field_errors
    assert Student.objects.count() == 1


def test_missing_required_fields(officer_context, db):
    with pytest.raises(ValidationError) as excinfo:
        StudentService.create_student(officer_context, student_data(first_name='', address=None))

    assert set(excinfo.value.field_errors) == {'first_name', 'address'}


def test_update_student_keeps_own_number(officer_context, student):
    updated = StudentService.update_student(officer_context, student.pk, {
        'student_number': student.student_number,
        'class_year': 'Grade 8',
        'status': 'withdrawn',
    })

    assert updated.class_year == 'Grade 8'
    assert updated.first_name == 'Amina'
    assert not Student.active.filter(pk=student.pk).exists()
    assert AuditLog.objects.filter(action='student_updated').count() == 1


def test_update_to_taken_number_is_rejected(officer_context, student, make_student):
    other = make_student()
    with pytest.raises(ValidationError):
        StudentService.update_student(officer_context, other.pk, {'student_number': student.student_number})


def test_unknown_student(officer_context, db):
    with pytest.raises(NotFoundError):
        StudentService.get_student(12345)
    with pytest.raises(NotFoundError):
        StudentService.delete_student(officer_context, 12345)


def test_delete_student_cascades_ledger_and_distributions(
    admin_context, finance_context, supply_context, student_fee, supply, payment_data
):
    student = student_fee.student
    PaymentService.record_payment(finance_context, student_fee.pk, payment_data('100'))
    SupplyService.distribute_supply(supply_context, supply.pk, {
        'student': student.pk, 'quantity': 2, 'distribution_date': date(2024, 9, 20),
    })

    StudentService.delete_student(admin_context, student.pk)

    assert not Student.objects.filter(pk=student.pk).exists()
    assert not StudentFee.objects.exists()
    assert not Payment.objects.exists()
    assert not SupplyDistribution.objects.exists()
    supply.refresh_from_db()
    assert supply.quantity_available == 8
    assert AuditLog.objects.filter(action='student_deleted').count() == 1
