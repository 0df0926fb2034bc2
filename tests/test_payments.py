# tests/test_payments.py

import re
from datetime import date
from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError

from fees.models import Payment, StudentFee
from fees.services import PaymentService
from utils.exceptions import NotFoundError, OverpaymentError, PersistenceError, ValidationError
from utils.models import AuditLog


def test_partial_payments_until_paid_then_overpayment(finance_context, student_fee, payment_data):
    payment = PaymentService.record_payment(finance_context, student_fee.pk, payment_data('500'))
    assert payment.student_fee.amount_paid == Decimal('500.00')
    assert payment.student_fee.payment_status == StudentFee.STATUS_PARTIAL

    PaymentService.record_payment(finance_context, student_fee.pk, payment_data('200'))
    student_fee.refresh_from_db()
    assert student_fee.amount_paid == Decimal('700.00')
    assert student_fee.payment_status == StudentFee.STATUS_PARTIAL

    PaymentService.record_payment(finance_context, student_fee.pk, payment_data('300'))
    student_fee.refresh_from_db()
    assert student_fee.amount_paid == Decimal('1000.00')
    assert student_fee.payment_status == StudentFee.STATUS_PAID

    with pytest.raises(OverpaymentError):
        PaymentService.record_payment(finance_context, student_fee.pk, payment_data('1'))

    student_fee.refresh_from_db()
    assert student_fee.amount_paid == Decimal('1000.00')
    assert student_fee.payments.count() == 3


def test_overpayment_leaves_state_unchanged(finance_context, student_fee, payment_data):
    PaymentService.record_payment(finance_context, student_fee.pk, payment_data('400'))

    with pytest.raises(OverpaymentError):
        PaymentService.record_payment(finance_context, student_fee.pk, payment_data('600.01'))

    student_fee.refresh_from_db()
    assert student_fee.amount_paid == Decimal('400.00')
    assert student_fee.payment_status == StudentFee.STATUS_PARTIAL
    assert Payment.objects.count() == 1
    assert AuditLog.objects.filter(action='payment_recorded').count() == 1


def test_exact_remaining_balance_is_accepted(finance_context, student_fee, payment_data):
    payment = PaymentService.record_payment(finance_context, student_fee.pk, payment_data('1000.00'))
    assert payment.student_fee.payment_status == StudentFee.STATUS_PAID
    assert payment.student_fee.balance == Decimal('0.00')


def test_payment_records_actor_and_audit_entry(finance_context, finance_user, student_fee, payment_data):
    payment = PaymentService.record_payment(
        finance_context, student_fee.pk, payment_data('250', payment_method='bank_transfer', notes='Term 1')
    )

    assert payment.created_by_id == str(finance_user.pk)
    assert payment.payment_method == Payment.METHOD_BANK_TRANSFER
    assert payment.notes == 'Term 1'

    entry = AuditLog.objects.get(action='payment_recorded')
    assert entry.user_id == str(finance_user.pk)
    assert entry.ip_address == '10.0.0.5'
    assert student_fee.student.student_number in entry.details
    assert payment.receipt_number in entry.details
    assert entry.object_id == str(payment.pk)


def test_unknown_student_fee_raises_not_found(finance_context, db, payment_data):
    with pytest.raises(NotFoundError):
        PaymentService.record_payment(finance_context, 999999, payment_data('10'))


@pytest.mark.parametrize('overrides', [
    {'amount': '0'},
    {'amount': '-10'},
    {'amount': 'ten'},
    {'payment_method': 'card'},
    {'payment_date': ''},
])
def test_invalid_payment_input_is_rejected(finance_context, student_fee, payment_data, overrides):
    data = payment_data('10')
    data.update(overrides)

    with pytest.raises(ValidationError):
        PaymentService.record_payment(finance_context, student_fee.pk, data)

    assert Payment.objects.count() == 0


def test_receipt_numbers_are_sequential_per_day(finance_context, student_fee, payment_data):
    with mock.patch('fees.services.get_school_today', return_value=date(2024, 9, 15)):
        first = PaymentService.record_payment(finance_context, student_fee.pk, payment_data('100'))
        second = PaymentService.record_payment(finance_context, student_fee.pk, payment_data('100'))

    assert re.fullmatch(r'RCPT-\d{8}-\d{4}', first.receipt_number)
    assert first.receipt_number == 'RCPT-20240915-0001'
    assert second.receipt_number == 'RCPT-20240915-0002'


def test_receipt_sequence_restarts_each_day(finance_context, student_fee, payment_data):
    with mock.patch('fees.services.get_school_today', return_value=date(2024, 9, 15)):
        PaymentService.record_payment(finance_context, student_fee.pk, payment_data('100'))
    with mock.patch('fees.services.get_school_today', return_value=date(2024, 9, 16)):
        payment = PaymentService.record_payment(finance_context, student_fee.pk, payment_data('100'))

    assert payment.receipt_number == 'RCPT-20240916-0001'


def test_receipt_collision_is_retried(finance_context, student_fee, payment_data):
    existing = PaymentService.record_payment(finance_context, student_fee.pk, payment_data('100'))

    with mock.patch(
        'fees.services.generate_receipt_number',
        side_effect=[existing.receipt_number, 'RCPT-20240915-0099'],
    ):
        payment = PaymentService.record_payment(finance_context, student_fee.pk, payment_data('100'))

    assert payment.receipt_number == 'RCPT-20240915-0099'
    student_fee.refresh_from_db()
    assert student_fee.amount_paid == Decimal('200.00')
    assert Payment.objects.count() == 2


def test_store_failure_rolls_back_everything(finance_context, student_fee, payment_data):
    with mock.patch('fees.services.log_activity', side_effect=DatabaseError('disk full')):
        with pytest.raises(PersistenceError) as excinfo:
            PaymentService.record_payment(finance_context, student_fee.pk, payment_data('300'))

    assert 'disk full' not in excinfo.value.message
    student_fee.refresh_from_db()
    assert student_fee.amount_paid == Decimal('0.00')
    assert student_fee.payment_status == StudentFee.STATUS_UNPAID
    assert Payment.objects.count() == 0


def test_payment_history_filters_by_student(finance_context, student_fee, make_student, fee, payment_data):
    other = StudentFee.objects.create(student=make_student(), fee=fee)
    PaymentService.record_payment(finance_context, student_fee.pk, payment_data('100'))
    PaymentService.record_payment(finance_context, other.pk, payment_data('50'))

    history = PaymentService.get_payment_history(student_fee.student_id)
    assert [p.amount for p in history] == [Decimal('100.00')]
    assert PaymentService.get_payment_history().count() == 2


def test_sub_cent_amount_is_rejected_not_rounded(finance_context, student_fee, payment_data):
    with pytest.raises(ValidationError) as excinfo:
        PaymentService.record_payment(finance_context, student_fee.pk, payment_data('100.005'))

    assert 'amount' in excinfo.value.field_errors
    assert Payment.objects.count() == 0
    assert not AuditLog.objects.exists()


def test_balance_change_after_locked_read_aborts_payment(finance_context, student_fee, payment_data):
    original_create = PaymentService._create_payment

    def create_then_bump_total(context, target, data):
        payment = original_create(context, target, data)
        StudentFee.objects.filter(pk=target.pk).update(amount_paid=Decimal('50.00'))
        return payment

    with mock.patch.object(PaymentService, '_create_payment', side_effect=create_then_bump_total):
        with pytest.raises(PersistenceError):
            PaymentService.record_payment(finance_context, student_fee.pk, payment_data('200'))

    student_fee.refresh_from_db()
    assert student_fee.amount_paid == Decimal('0.00')
    assert student_fee.payment_status == StudentFee.STATUS_UNPAID
    assert Payment.objects.count() == 0
    assert not AuditLog.objects.exists()
