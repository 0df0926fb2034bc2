# tests/test_payment_status.py

from datetime import date
from decimal import Decimal

import pytest

from fees.models import StudentFee
from fees.utils import (
    clean_amount, derive_payment_status, get_receipt_prefix,
    validate_fee_data, validate_payment_data,
)
from utils.exceptions import ValidationError


@pytest.mark.parametrize('paid, amount, expected', [
    ('0.00', '1000.00', StudentFee.STATUS_UNPAID),
    ('0.01', '1000.00', StudentFee.STATUS_PARTIAL),
    ('999.99', '1000.00', StudentFee.STATUS_PARTIAL),
    ('1000.00', '1000.00', StudentFee.STATUS_PAID),
    ('1200.00', '1000.00', StudentFee.STATUS_PAID),
])
def test_derive_payment_status(paid, amount, expected):
    assert derive_payment_status(Decimal(paid), Decimal(amount)) == expected


def test_clean_amount_pads_to_two_places():
    assert clean_amount('150.5') == Decimal('150.50')
    assert clean_amount('75.000') == Decimal('75.00')


@pytest.mark.parametrize('value', ['100.005', '0.001', '12.3456'])
def test_clean_amount_rejects_sub_cent_values(value):
    with pytest.raises(ValidationError) as excinfo:
        clean_amount(value)
    assert excinfo.value.field_errors == {'amount': 'Enter at most 2 decimal places.'}


@pytest.mark.parametrize('value', ['', None, 'abc', '0', '-5', 'NaN', 'Infinity', '100000000'])
def test_clean_amount_rejects_bad_input(value):
    with pytest.raises(ValidationError) as excinfo:
        clean_amount(value)
    assert 'amount' in excinfo.value.field_errors


def test_validate_fee_data_reports_missing_fields():
    with pytest.raises(ValidationError) as excinfo:
        validate_fee_data({'name': 'Tuition'})
    assert set(excinfo.value.field_errors) == {'amount', 'academic_year', 'due_date'}


def test_validate_fee_data_parses_iso_date():
    data = validate_fee_data({
        'name': ' Library ',
        'amount': '25',
        'academic_year': '2024-2025',
        'due_date': '2024-10-01',
    })
    assert data['name'] == 'Library'
    assert data['due_date'] == date(2024, 10, 1)
    assert data['amount'] == Decimal('25.00')


def test_validate_payment_data_rejects_unknown_method():
    with pytest.raises(ValidationError) as excinfo:
        validate_payment_data({'amount': '10', 'payment_date': '2024-09-01', 'payment_method': 'crypto'})
    assert 'payment_method' in excinfo.value.field_errors


def test_receipt_prefix_uses_date(settings):
    settings.RECEIPT_PREFIX = 'RCPT'
    assert get_receipt_prefix(date(2024, 9, 15)) == 'RCPT-20240915-'
