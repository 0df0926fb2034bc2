# core/utils.py

"""
Shared helpers used across the academy apps: money formatting, school-local
dates, pagination and filter parsing.
"""

from django.conf import settings
from django.core.paginator import Paginator, EmptyPage, PageNotAnInteger
from django.utils import timezone
from decimal import Decimal, InvalidOperation
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# MONEY
# =============================================================================

def format_money(amount, include_symbol=True):
    """
    Format a money amount with the configured currency symbol.

    Example:
        >>> format_money(1500)  # "$1,500.00"
        >>> format_money(1500, False)  # "1,500.00"
    """
    symbol = getattr(settings, 'CURRENCY_SYMBOL', '$')
    try:
        formatted = f"{Decimal(str(amount or 0)):,.2f}"
    except (InvalidOperation, ValueError, TypeError):
        formatted = "0.00"
    return f"{symbol}{formatted}" if include_symbol else formatted


def calculate_percentage(part, whole, decimal_places=2):
    """
    Calculate percentage with safe division.

    Returns:
        Decimal: Percentage value, 0 if whole is 0
    """
    try:
        part = Decimal(str(part or 0))
        whole = Decimal(str(whole or 0))

        if whole == 0:
            return Decimal('0.00')

        percentage = (part / whole) * 100
        return percentage.quantize(Decimal(f'0.{"0" * decimal_places}'))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal('0.00')


# =============================================================================
# DATES
# =============================================================================

def get_school_today():
    """
    Today's date in the school's configured TIME_ZONE.

    Use this instead of date.today() for due dates, receipt numbers and any
    other date-based business rule.
    """
    return timezone.localdate()


# =============================================================================
# REQUEST HELPERS
# =============================================================================

def paginate_queryset(request, queryset, per_page=20):
    """
    Paginate a queryset with sensible defaults.

    Returns:
        tuple: (page_obj, paginator)
    """
    paginator = Paginator(queryset, per_page)
    page = request.GET.get('page', 1)

    try:
        page_obj = paginator.page(page)
    except PageNotAnInteger:
        page_obj = paginator.page(1)
    except EmptyPage:
        page_obj = paginator.page(paginator.num_pages)

    return page_obj, paginator


def parse_filters(request, filter_keys):
    """
    Extract non-empty filter values from request.GET.

    Example:
        >>> filters = parse_filters(request, ['status', 'academic_year'])
    """
    filters = {}
    for key in filter_keys:
        value = request.GET.get(key, '').strip()
        if value:
            filters[key] = value
    return filters
