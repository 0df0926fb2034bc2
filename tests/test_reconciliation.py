# tests/test_reconciliation.py

from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command

from fees.models import Payment, StudentFee
from fees.services import LedgerReconciliationService, PaymentService
from utils.context import ServiceContext
from utils.models import AuditLog


@pytest.fixture
def drifted_fee(finance_context, student_fee, payment_data):
    PaymentService.record_payment(finance_context, student_fee.pk, payment_data('300'))
    StudentFee.objects.filter(pk=student_fee.pk).update(
        amount_paid=Decimal('100.00'), payment_status=StudentFee.STATUS_UNPAID
    )
    return student_fee


def test_consistent_ledger_has_no_discrepancies(finance_context, student_fee, payment_data):
    PaymentService.record_payment(finance_context, student_fee.pk, payment_data('300'))
    assert LedgerReconciliationService.find_discrepancies() == []


def test_find_discrepancies_reports_drift(drifted_fee):
    [item] = LedgerReconciliationService.find_discrepancies()

    assert item['student_fee'].pk == drifted_fee.pk
    assert item['stored_paid'] == Decimal('100.00')
    assert item['payments_total'] == Decimal('300.00')
    assert item['stored_status'] == StudentFee.STATUS_UNPAID
    assert item['expected_status'] == StudentFee.STATUS_PARTIAL
    assert item['exceeds_fee'] is False


def test_repair_rewrites_totals_with_one_audit_entry(drifted_fee):
    repaired = LedgerReconciliationService.repair(ServiceContext.system())

    assert len(repaired) == 1
    drifted_fee.refresh_from_db()
    assert drifted_fee.amount_paid == Decimal('300.00')
    assert drifted_fee.payment_status == StudentFee.STATUS_PARTIAL
    entry = AuditLog.objects.get(action='ledger_reconciled')
    assert entry.user_id is None
    assert LedgerReconciliationService.find_discrepancies() == []


def test_repair_with_nothing_to_do(student_fee):
    assert LedgerReconciliationService.repair(ServiceContext.system()) == []
    assert not AuditLog.objects.filter(action='ledger_reconciled').exists()


def test_payments_exceeding_fee_are_flagged(drifted_fee):
    Payment.objects.create(
        student_fee=drifted_fee, amount=Decimal('800.00'), payment_date=drifted_fee.fee.due_date,
        payment_method=Payment.METHOD_CASH, receipt_number='MANUAL-0001',
    )

    [item] = LedgerReconciliationService.find_discrepancies()
    assert item['exceeds_fee'] is True
    assert item['expected_status'] == StudentFee.STATUS_PAID


def test_command_reports_without_fixing(drifted_fee):
    out = StringIO()
    call_command('reconcile_student_fees', stdout=out)

    assert 'Found 1 inconsistent records' in out.getvalue()
    drifted_fee.refresh_from_db()
    assert drifted_fee.amount_paid == Decimal('100.00')


def test_command_fix_repairs(drifted_fee):
    out = StringIO()
    call_command('reconcile_student_fees', '--fix', stdout=out)

    assert 'Repaired 1 records.' in out.getvalue()
    drifted_fee.refresh_from_db()
    assert drifted_fee.amount_paid == Decimal('300.00')


def test_command_on_consistent_ledger(student_fee):
    out = StringIO()
    call_command('reconcile_student_fees', '--student', student_fee.student.student_number, stdout=out)

    assert 'All student fee records are consistent.' in out.getvalue()
