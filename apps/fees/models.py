# fees/models.py

"""
Student Fee Ledger Models

- Fee: a billable assessment definition
- StudentFee: the per-student instance of a Fee with its running total
- Payment: an immutable record of one payment against a StudentFee

``StudentFee.amount_paid`` and ``StudentFee.payment_status`` are written
only by fees.services; the status is always
``fees.utils.derive_payment_status(amount_paid, fee.amount)``.
"""

from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import logging

from utils.models import BaseModel
from students.models import Student

logger = logging.getLogger(__name__)


# =============================================================================
# FEE
# =============================================================================

class Fee(BaseModel):
    """Fee assessment definition"""

    name = models.CharField("Fee Name", max_length=100)
    amount = models.DecimalField(
        "Amount",
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.TextField("Description", blank=True)
    academic_year = models.CharField("Academic Year", max_length=20, db_index=True)
    due_date = models.DateField("Due Date")

    class Meta:
        verbose_name = "Fee"
        verbose_name_plural = "Fees"
        ordering = ['-academic_year', 'due_date', 'name']

    def __str__(self):
        return f"{self.name} ({self.academic_year})"


# =============================================================================
# STUDENT FEE
# =============================================================================

class StudentFee(BaseModel):
    """A fee assessed against one student"""

    STATUS_UNPAID = 'unpaid'
    STATUS_PARTIAL = 'partial'
    STATUS_PAID = 'paid'

    PAYMENT_STATUS_CHOICES = (
        (STATUS_UNPAID, 'Unpaid'),
        (STATUS_PARTIAL, 'Partially Paid'),
        (STATUS_PAID, 'Paid'),
    )

    student = models.ForeignKey(
        Student,
        verbose_name="Student",
        on_delete=models.CASCADE,
        related_name='fees'
    )
    fee = models.ForeignKey(
        Fee,
        verbose_name="Fee",
        on_delete=models.CASCADE,
        related_name='student_fees'
    )
    amount_paid = models.DecimalField(
        "Amount Paid",
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    payment_status = models.CharField(
        "Payment Status",
        max_length=10,
        choices=PAYMENT_STATUS_CHOICES,
        default=STATUS_UNPAID,
        db_index=True
    )

    class Meta:
        verbose_name = "Student Fee"
        verbose_name_plural = "Student Fees"
        ordering = ['fee__due_date', 'student__last_name']
        constraints = [
            models.UniqueConstraint(fields=['student', 'fee'], name='unique_student_fee'),
            models.CheckConstraint(
                condition=models.Q(amount_paid__gte=0),
                name='student_fee_amount_paid_non_negative'
            ),
        ]

    def __str__(self):
        return f"{self.student.student_number} - {self.fee.name}"

    @property
    def balance(self):
        """Remaining amount owed on this assessment"""
        return self.fee.amount - self.amount_paid

    @property
    def is_overdue(self):
        from core.utils import get_school_today
        return self.payment_status != self.STATUS_PAID and self.fee.due_date < get_school_today()


# =============================================================================
# PAYMENT
# =============================================================================

class Payment(BaseModel):
    """Immutable record of one payment event"""

    METHOD_CASH = 'cash'
    METHOD_CHECK = 'check'
    METHOD_BANK_TRANSFER = 'bank_transfer'

    PAYMENT_METHOD_CHOICES = (
        (METHOD_CASH, 'Cash'),
        (METHOD_CHECK, 'Check'),
        (METHOD_BANK_TRANSFER, 'Bank Transfer'),
    )

    student_fee = models.ForeignKey(
        StudentFee,
        verbose_name="Student Fee",
        on_delete=models.CASCADE,
        related_name='payments'
    )
    amount = models.DecimalField(
        "Amount",
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    payment_date = models.DateField("Payment Date", db_index=True)
    payment_method = models.CharField("Payment Method", max_length=20, choices=PAYMENT_METHOD_CHOICES)
    receipt_number = models.CharField("Receipt Number", max_length=50, unique=True, db_index=True)
    notes = models.TextField("Notes", blank=True)

    class Meta:
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        ordering = ['-payment_date', '-created_at']
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name='payment_amount_positive'),
        ]

    def __str__(self):
        return f"{self.receipt_number} - {self.amount}"

    @property
    def student(self):
        return self.student_fee.student

    @property
    def fee(self):
        return self.student_fee.fee
