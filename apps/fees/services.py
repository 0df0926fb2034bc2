# fees/services.py

"""
Fee Ledger Operations

Handles fee definitions, fee assessments per student, payments and ledger
reconciliation. These services are the only writers of
``StudentFee.amount_paid`` and ``StudentFee.payment_status``.

Every mutating operation:
- validates its input before touching the database
- runs in a single service transaction together with its audit entry
- reads the values it checks under ``select_for_update`` and writes
  running totals with ``F()`` expressions
"""

from decimal import Decimal
from django.db import IntegrityError, transaction
from django.db.models import Count, DecimalField, F, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone
import logging

from fees.models import Fee, StudentFee, Payment
from fees.utils import (
    derive_payment_status, generate_receipt_number,
    validate_fee_data, validate_payment_data,
)
from students.models import Student
from utils.audit import log_activity
from utils.exceptions import (
    NotFoundError, OverpaymentError, PersistenceError, ValidationError,
)
from utils.transactions import service_transaction
from core.utils import format_money, get_school_today

logger = logging.getLogger(__name__)

RECEIPT_NUMBER_ATTEMPTS = 5


def _get_fee(fee_id, lock=False):
    queryset = Fee.objects.select_for_update() if lock else Fee.objects.all()
    try:
        return queryset.get(pk=fee_id)
    except (Fee.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Fee not found")


def _get_student(student_id):
    try:
        return Student.objects.get(pk=student_id)
    except (Student.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Student not found")


# =============================================================================
# FEES
# =============================================================================

class FeeService:
    """
    Fee definitions and their assessments against students.
    """

    @staticmethod
    def create_fee(context, fee_data, apply_to_all=False):
        """
        Create a fee and optionally assess it against every active student.

        Args:
            context (ServiceContext): Acting user
            fee_data (dict): Fee information
                Required:
                    - name: str
                    - amount: Decimal or numeric string, > 0
                    - academic_year: str
                    - due_date: date or ISO string
                Optional:
                    - description: str
            apply_to_all (bool): Create an unpaid StudentFee for each
                currently active student

        Returns:
            Fee instance

        Example:
            fee = FeeService.create_fee(context, {
                'name': 'Tuition',
                'amount': '500.00',
                'academic_year': '2024-2025',
                'due_date': date(2024, 9, 30),
            }, apply_to_all=True)
        """
        data = validate_fee_data(fee_data)

        with service_transaction("creating the fee"):
            fee = Fee(**data)
            fee.set_actor(context)
            fee.save()

            assessed = 0
            if apply_to_all:
                student_fees = [
                    StudentFee(
                        student_id=student_id,
                        fee=fee,
                        amount_paid=Decimal('0.00'),
                        payment_status=StudentFee.STATUS_UNPAID,
                        created_by_id=fee.created_by_id,
                        updated_by_id=fee.created_by_id,
                    )
                    for student_id in Student.active.values_list('pk', flat=True)
                ]
                StudentFee.objects.bulk_create(student_fees)
                assessed = len(student_fees)

            details = f"Created fee: {fee.name} ({format_money(fee.amount)}, {fee.academic_year})"
            if apply_to_all:
                details += f", applied to {assessed} active students"
            log_activity(context, 'fee_created', details, target_object=fee)

        logger.info(f"Created fee {fee.pk} '{fee.name}' ({assessed} assessments)")
        return fee

    @staticmethod
    def update_fee(context, fee_id, fee_data):
        """
        Edit a fee definition.

        The payment status of every assessment depends on the fee amount,
        so all of them are re-derived in the same transaction. The amount
        may not drop below what any student has already paid.

        Returns:
            Fee instance
        """
        _get_fee(fee_id)
        data = validate_fee_data(fee_data)

        with service_transaction("updating the fee"):
            fee = _get_fee(fee_id, lock=True)
            student_fees = list(
                StudentFee.objects.select_for_update().filter(fee=fee)
            )

            highest_paid = max((sf.amount_paid for sf in student_fees), default=Decimal('0.00'))
            if data['amount'] < highest_paid:
                raise ValidationError(
                    "Fee amount cannot be lower than an amount already paid",
                    field_errors={
                        'amount': f"At least {format_money(highest_paid)} has already been paid."
                    }
                )

            for field, value in data.items():
                setattr(fee, field, value)
            fee.set_actor(context)
            fee.save()

            changed = []
            for student_fee in student_fees:
                status = derive_payment_status(student_fee.amount_paid, fee.amount)
                if status != student_fee.payment_status:
                    student_fee.payment_status = status
                    student_fee.updated_by_id = fee.updated_by_id
                    student_fee.updated_at = timezone.now()
                    changed.append(student_fee)
            if changed:
                StudentFee.objects.bulk_update(changed, ['payment_status', 'updated_by_id', 'updated_at'])

            log_activity(
                context, 'fee_updated',
                f"Updated fee ID: {fee.pk} ({fee.name}), {len(changed)} statuses re-derived",
                target_object=fee,
            )

        return fee

    @staticmethod
    def assign_fee(context, fee_id, student_id):
        """
        Assess an existing fee against a single student.

        Returns:
            StudentFee instance
        """
        fee = _get_fee(fee_id)
        student = _get_student(student_id)

        with service_transaction("assigning the fee"):
            if StudentFee.objects.filter(student=student, fee=fee).exists():
                raise ValidationError(
                    "This fee is already assigned to the student",
                    field_errors={'student': "Fee already assigned to this student."}
                )

            student_fee = StudentFee(
                student=student,
                fee=fee,
                amount_paid=Decimal('0.00'),
                payment_status=StudentFee.STATUS_UNPAID,
            )
            student_fee.set_actor(context)
            student_fee.save()

            log_activity(
                context, 'fee_assigned',
                f"Assigned fee {fee.name} to student {student.student_number}",
                target_object=student_fee,
            )

        return student_fee

    @staticmethod
    def delete_fee(context, fee_id):
        """
        Delete a fee with all of its assessments and their payments.

        Payments are removed first, then the assessments, then the fee, in
        one transaction with a single ``fee_deleted`` audit entry.

        Returns:
            dict: {'fee_name', 'student_fees_deleted', 'payments_deleted'}
        """
        fee = _get_fee(fee_id)
        fee_name = fee.name

        with service_transaction("deleting the fee"):
            payments_deleted, _ = Payment.objects.filter(student_fee__fee_id=fee.pk).delete()
            student_fees_deleted, _ = StudentFee.objects.filter(fee_id=fee.pk).delete()
            Fee.objects.filter(pk=fee.pk).delete()

            log_activity(
                context, 'fee_deleted',
                f"Deleted fee: {fee_name} ({student_fees_deleted} assessments, "
                f"{payments_deleted} payments)",
                target_object=fee,
            )

        logger.info(
            f"Deleted fee {fee.pk} '{fee_name}' with {student_fees_deleted} assessments "
            f"and {payments_deleted} payments"
        )
        return {
            'fee_name': fee_name,
            'student_fees_deleted': student_fees_deleted,
            'payments_deleted': payments_deleted,
        }

    @staticmethod
    def get_fee_totals(queryset=None):
        """Annotate fees with assessed student count and amount collected."""
        if queryset is None:
            queryset = Fee.objects.all()
        return queryset.annotate(
            assessed_count=Count('student_fees', distinct=True),
            collected=Coalesce(
                Sum('student_fees__amount_paid'),
                Value(Decimal('0.00')),
                output_field=DecimalField(max_digits=12, decimal_places=2),
            ),
        )


# =============================================================================
# PAYMENTS
# =============================================================================

class PaymentService:
    """
    Records payments against fee assessments.
    """

    @staticmethod
    def record_payment(context, student_fee_id, payment_data):
        """
        Record a payment against a StudentFee.

        Args:
            context (ServiceContext): Acting user
            student_fee_id: Primary key of the StudentFee
            payment_data (dict): Payment information
                Required:
                    - amount: Decimal or numeric string, > 0
                    - payment_date: date or ISO string
                    - payment_method: 'cash', 'check' or 'bank_transfer'
                Optional:
                    - notes: str

        Returns:
            Payment instance

        Raises:
            ValidationError: Malformed input
            NotFoundError: Unknown StudentFee
            OverpaymentError: Amount exceeds the remaining balance
            PersistenceError: Database failure; nothing was saved
        """
        data = validate_payment_data(payment_data)
        amount = data['amount']

        with service_transaction("recording the payment"):
            try:
                student_fee = StudentFee.objects.select_for_update().select_related(
                    'fee', 'student'
                ).get(pk=student_fee_id)
            except (StudentFee.DoesNotExist, ValueError, TypeError):
                raise NotFoundError("Student fee record not found")

            current_paid = student_fee.amount_paid
            remaining = student_fee.fee.amount - current_paid
            if amount > remaining:
                raise OverpaymentError(
                    f"Payment amount ({format_money(amount)}) exceeds the remaining "
                    f"balance ({format_money(remaining)})"
                )

            payment = PaymentService._create_payment(context, student_fee, data)

            new_status = derive_payment_status(current_paid + amount, student_fee.fee.amount)
            updated = StudentFee.objects.filter(
                pk=student_fee.pk, amount_paid=current_paid
            ).update(
                amount_paid=F('amount_paid') + amount,
                payment_status=new_status,
                updated_by_id=payment.created_by_id,
                updated_at=timezone.now(),
            )
            if updated != 1:
                raise PersistenceError(
                    "The fee record changed while the payment was being recorded. "
                    "No changes were made."
                )

            log_activity(
                context, 'payment_recorded',
                f"Recorded payment of {format_money(amount)} for student "
                f"{student_fee.student.student_number}, receipt {payment.receipt_number}",
                target_object=payment,
            )

        student_fee.refresh_from_db(fields=['amount_paid', 'payment_status', 'updated_at'])
        payment.student_fee = student_fee

        logger.info(
            f"Recorded payment {payment.receipt_number} of {amount} on student fee "
            f"{student_fee.pk} (now {student_fee.payment_status})"
        )
        return payment

    @staticmethod
    def _create_payment(context, student_fee, data):
        """
        Insert the Payment, retrying in a savepoint when another writer
        takes the same receipt number first.
        """
        receipt_date = get_school_today()

        for attempt in range(1, RECEIPT_NUMBER_ATTEMPTS + 1):
            payment = Payment(student_fee=student_fee, **data)
            payment.receipt_number = generate_receipt_number(receipt_date)
            payment.set_actor(context)
            try:
                with transaction.atomic():
                    payment.save()
                return payment
            except IntegrityError:
                if attempt == RECEIPT_NUMBER_ATTEMPTS:
                    raise
                logger.warning(
                    f"Receipt number {payment.receipt_number} already taken, "
                    f"retrying ({attempt}/{RECEIPT_NUMBER_ATTEMPTS})"
                )

    @staticmethod
    def get_payment_history(student_id=None):
        """Payments newest first, optionally for one student."""
        queryset = Payment.objects.select_related('student_fee__student', 'student_fee__fee')
        if student_id is not None:
            queryset = queryset.filter(student_fee__student_id=student_id)
        return queryset.order_by('-payment_date', '-created_at')


# =============================================================================
# RECONCILIATION
# =============================================================================

class LedgerReconciliationService:
    """
    Detects and repairs StudentFee rows whose stored running total or status
    disagrees with their payments.
    """

    @staticmethod
    def _with_payment_totals(queryset):
        return queryset.select_related('fee', 'student').annotate(
            payments_total=Coalesce(
                Sum('payments__amount'),
                Value(Decimal('0.00')),
                output_field=DecimalField(max_digits=12, decimal_places=2),
            )
        )

    @staticmethod
    def find_discrepancies(queryset=None):
        """
        Compare each StudentFee against the sum of its payments.

        Returns:
            list of dicts with keys: student_fee, stored_paid, payments_total,
            stored_status, expected_status, exceeds_fee
        """
        if queryset is None:
            queryset = StudentFee.objects.all()

        discrepancies = []
        for student_fee in LedgerReconciliationService._with_payment_totals(queryset):
            expected_status = derive_payment_status(student_fee.payments_total, student_fee.fee.amount)
            if (
                student_fee.amount_paid != student_fee.payments_total
                or student_fee.payment_status != expected_status
            ):
                discrepancies.append({
                    'student_fee': student_fee,
                    'stored_paid': student_fee.amount_paid,
                    'payments_total': student_fee.payments_total,
                    'stored_status': student_fee.payment_status,
                    'expected_status': expected_status,
                    'exceeds_fee': student_fee.payments_total > student_fee.fee.amount,
                })

        return discrepancies

    @staticmethod
    def repair(context, queryset=None):
        """
        Rewrite amount_paid and payment_status from the payments, in one
        transaction with a single ``ledger_reconciled`` audit entry.

        Returns:
            list: The discrepancies that were repaired
        """
        if queryset is None:
            queryset = StudentFee.objects.all()

        with service_transaction("reconciling the fee ledger"):
            locked_ids = list(queryset.select_for_update().values_list('pk', flat=True))
            discrepancies = LedgerReconciliationService.find_discrepancies(
                StudentFee.objects.filter(pk__in=locked_ids)
            )
            if not discrepancies:
                return []

            for item in discrepancies:
                StudentFee.objects.filter(pk=item['student_fee'].pk).update(
                    amount_paid=item['payments_total'],
                    payment_status=item['expected_status'],
                    updated_by_id=str(context.user_id) if context.user_id is not None else None,
                    updated_at=timezone.now(),
                )
                if item['exceeds_fee']:
                    logger.warning(
                        f"Student fee {item['student_fee'].pk} payments "
                        f"({item['payments_total']}) exceed the fee amount"
                    )

            log_activity(
                context, 'ledger_reconciled',
                f"Reconciled {len(discrepancies)} student fee records: "
                + ", ".join(str(item['student_fee'].pk) for item in discrepancies),
            )

        logger.info(f"Repaired {len(discrepancies)} student fee records")
        return discrepancies
