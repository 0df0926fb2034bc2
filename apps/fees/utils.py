# fees/utils.py

"""
Fee Ledger Utility Functions

Contains:
- Payment status derivation (the single source of the three-way rule)
- Receipt number generation
- Input validation helpers shared by the fee services
"""

from django.conf import settings
from decimal import Decimal, InvalidOperation
from datetime import date, datetime
import logging

from utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')
# Matches DecimalField(max_digits=10, decimal_places=2)
MAX_AMOUNT = Decimal('99999999.99')


# =============================================================================
# PAYMENT STATUS
# =============================================================================

def derive_payment_status(amount_paid, fee_amount):
    """
    Derive a StudentFee payment status from its running total.

    Returns:
        str: 'unpaid' when nothing is paid, 'paid' once the fee amount is
        reached, 'partial' in between.
    """
    from fees.models import StudentFee

    amount_paid = Decimal(amount_paid)
    if amount_paid <= 0:
        return StudentFee.STATUS_UNPAID
    if amount_paid >= Decimal(fee_amount):
        return StudentFee.STATUS_PAID
    return StudentFee.STATUS_PARTIAL


def get_payment_status_color(status):
    """Bootstrap contextual class for a payment status badge"""
    return {
        'paid': 'success',
        'partial': 'warning',
        'unpaid': 'danger',
    }.get(status, 'secondary')


# =============================================================================
# RECEIPT NUMBER GENERATION
# =============================================================================

def get_receipt_prefix(on_date):
    """Receipt prefix for a given day, e.g. RCPT-20240915-"""
    prefix = getattr(settings, 'RECEIPT_PREFIX', 'RCPT').strip()
    return f"{prefix}-{on_date:%Y%m%d}-"


def generate_receipt_number(on_date):
    """
    Generate the next receipt number for the day.
    Format: RCPT-20240915-0001

    Must be called inside the payment transaction. The sequence is read
    under lock; concurrent writers for other assessments can still pick
    the same number, which the unique column rejects and the caller
    retries.

    Returns:
        str: Receipt number
    """
    from fees.models import Payment

    search_prefix = get_receipt_prefix(on_date)
    existing = Payment.objects.filter(
        receipt_number__startswith=search_prefix
    ).select_for_update().values_list('receipt_number', flat=True)

    numbers = []
    for receipt_number in existing:
        suffix = receipt_number[len(search_prefix):]
        if suffix.isdigit():
            numbers.append(int(suffix))

    new_number = max(numbers, default=0) + 1
    return f"{search_prefix}{new_number:04d}"


# =============================================================================
# VALIDATION
# =============================================================================

def clean_amount(value, field='amount'):
    """
    Convert user input to a positive two-place Decimal.

    Values with more than two significant decimal places are rejected
    rather than rounded.

    Raises:
        ValidationError: If missing, not numeric, not positive or finer
            than one cent
    """
    if value is None or str(value).strip() == '':
        raise ValidationError(
            "Please fill in all required fields",
            field_errors={field: "This field is required."}
        )
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        amount = None
    if amount is None or not amount.is_finite():
        raise ValidationError(
            "Amount must be a number",
            field_errors={field: "Enter a valid amount."}
        )
    if amount <= 0:
        raise ValidationError(
            "Amount must be greater than zero",
            field_errors={field: "Amount must be greater than zero."}
        )
    if amount > MAX_AMOUNT:
        raise ValidationError(
            "Amount is too large",
            field_errors={field: f"Amount cannot exceed {MAX_AMOUNT:,}."}
        )

    rounded = amount.quantize(TWO_PLACES)
    if rounded != amount:
        raise ValidationError(
            "Amount cannot have more than 2 decimal places",
            field_errors={field: "Enter at most 2 decimal places."}
        )
    return rounded


def clean_date(value, field):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(
            "Please fill in all required fields",
            field_errors={field: "This field is required."}
        )
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(
            "Enter a valid date",
            field_errors={field: "Enter a valid date (YYYY-MM-DD)."}
        )


def validate_fee_data(fee_data):
    """
    Validate and normalise fee fields.

    Required: name, amount, academic_year, due_date. Optional: description.

    Returns:
        dict: Cleaned fee fields
    """
    missing = {
        field: "This field is required."
        for field in ('name', 'amount', 'academic_year', 'due_date')
        if fee_data.get(field) is None or not str(fee_data[field]).strip()
    }
    if missing:
        raise ValidationError("Please fill in all required fields", field_errors=missing)

    return {
        'name': str(fee_data['name']).strip(),
        'amount': clean_amount(fee_data['amount']),
        'description': (fee_data.get('description') or '').strip(),
        'academic_year': str(fee_data['academic_year']).strip(),
        'due_date': clean_date(fee_data['due_date'], 'due_date'),
    }


def validate_payment_data(payment_data):
    """
    Validate and normalise payment fields.

    Required: amount, payment_date, payment_method. Optional: notes.

    Returns:
        dict: Cleaned payment fields
    """
    from fees.models import Payment

    missing = {
        field: "This field is required."
        for field in ('amount', 'payment_date', 'payment_method')
        if payment_data.get(field) is None or not str(payment_data[field]).strip()
    }
    if missing:
        raise ValidationError("Please fill in all required fields", field_errors=missing)

    method = payment_data['payment_method']
    valid_methods = dict(Payment.PAYMENT_METHOD_CHOICES)
    if method not in valid_methods:
        raise ValidationError(
            "Invalid payment method",
            field_errors={'payment_method': f"Choose one of: {', '.join(valid_methods)}."}
        )

    return {
        'amount': clean_amount(payment_data['amount']),
        'payment_date': clean_date(payment_data['payment_date'], 'payment_date'),
        'payment_method': method,
        'notes': (payment_data.get('notes') or '').strip(),
    }
