# fees/stats.py

"""
Statistics for the fee ledger: collection totals, outstanding balances and
status breakdowns used by the dashboard and the fee pages.
"""

from django.db.models import Count, Q, Sum, F, DecimalField, Value, ExpressionWrapper
from django.db.models.functions import Coalesce
from decimal import Decimal
import logging

logger = logging.getLogger(__name__)

ZERO = Value(Decimal('0.00'))
MONEY = DecimalField(max_digits=14, decimal_places=2)


# =============================================================================
# PAYMENT STATISTICS
# =============================================================================

def get_collection_statistics(start_date=None, end_date=None):
    """
    Payment collection totals for an optional date range.

    Returns:
        dict: {'total_collected', 'payment_count', 'by_method'}
    """
    from .models import Payment

    payments = Payment.objects.all()
    if start_date:
        payments = payments.filter(payment_date__gte=start_date)
    if end_date:
        payments = payments.filter(payment_date__lte=end_date)

    totals = payments.aggregate(
        total=Coalesce(Sum('amount'), ZERO, output_field=MONEY),
        count=Count('id'),
    )

    by_method = {
        row['payment_method']: row['total']
        for row in payments.values('payment_method').annotate(
            total=Coalesce(Sum('amount'), ZERO, output_field=MONEY)
        ).order_by()
    }

    return {
        'total_collected': totals['total'],
        'payment_count': totals['count'],
        'by_method': by_method,
    }


# =============================================================================
# ASSESSMENT STATISTICS
# =============================================================================

def get_outstanding_balance(student_id=None):
    """Sum of unpaid balances across fee assessments."""
    from .models import StudentFee

    student_fees = StudentFee.objects.all()
    if student_id is not None:
        student_fees = student_fees.filter(student_id=student_id)

    result = student_fees.aggregate(
        outstanding=Coalesce(
            Sum(ExpressionWrapper(F('fee__amount') - F('amount_paid'), output_field=MONEY)),
            ZERO,
            output_field=MONEY,
        )
    )
    return result['outstanding']


def get_status_breakdown(student_id=None, fee_id=None):
    """
    Count fee assessments by payment status.

    Returns:
        dict: {'unpaid': int, 'partial': int, 'paid': int, 'total': int}
    """
    from .models import StudentFee

    student_fees = StudentFee.objects.all()
    if student_id is not None:
        student_fees = student_fees.filter(student_id=student_id)
    if fee_id is not None:
        student_fees = student_fees.filter(fee_id=fee_id)

    return student_fees.aggregate(
        unpaid=Count('id', filter=Q(payment_status=StudentFee.STATUS_UNPAID)),
        partial=Count('id', filter=Q(payment_status=StudentFee.STATUS_PARTIAL)),
        paid=Count('id', filter=Q(payment_status=StudentFee.STATUS_PAID)),
        total=Count('id'),
    )


def get_student_fee_summary(student):
    """Totals shown on a student's profile page."""
    from .models import StudentFee

    totals = StudentFee.objects.filter(student=student).aggregate(
        total_assessed=Coalesce(Sum('fee__amount'), ZERO, output_field=MONEY),
        total_paid=Coalesce(Sum('amount_paid'), ZERO, output_field=MONEY),
    )
    totals['balance'] = totals['total_assessed'] - totals['total_paid']
    return totals
