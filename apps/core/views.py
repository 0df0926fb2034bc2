# core/views.py

from django.shortcuts import render
from django.contrib.auth.decorators import login_required
import logging

from core.utils import get_school_today
from fees.models import Fee, Payment
from fees.stats import get_collection_statistics, get_outstanding_balance, get_status_breakdown
from students.models import Student
from supplies.models import Supply, get_low_stock_threshold
from utils.models import AuditLog

logger = logging.getLogger(__name__)


@login_required
def dashboard(request):
    """Landing dashboard with school-wide totals and recent activity"""
    today = get_school_today()
    month_start = today.replace(day=1)

    month_collections = get_collection_statistics(start_date=month_start, end_date=today)

    stats = {
        'active_students': Student.active.count(),
        'total_students': Student.objects.count(),
        'total_fees': Fee.objects.count(),
        'collected_this_month': month_collections['total_collected'],
        'payments_this_month': month_collections['payment_count'],
        'outstanding_balance': get_outstanding_balance(),
        'fee_status': get_status_breakdown(),
    }

    low_stock_supplies = Supply.objects.filter(
        quantity_available__lte=get_low_stock_threshold()
    ).order_by('quantity_available', 'name')[:10]

    recent_payments = Payment.objects.select_related(
        'student_fee__student', 'student_fee__fee'
    ).order_by('-created_at')[:10]

    context = {
        'stats': stats,
        'low_stock_supplies': low_stock_supplies,
        'recent_payments': recent_payments,
        'recent_activity': AuditLog.get_recent_activity(limit=10),
    }
    return render(request, 'core/dashboard.html', context)
