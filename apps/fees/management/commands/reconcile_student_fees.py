# fees/management/commands/reconcile_student_fees.py

"""
Compare every student fee's stored running total and status against its
payments, and optionally repair the differences.

Usage:
    python manage.py reconcile_student_fees
    python manage.py reconcile_student_fees --fix
    python manage.py reconcile_student_fees --student AWE-2024-001 --fix
"""

from django.core.management.base import BaseCommand, CommandError
import logging

from fees.models import StudentFee
from fees.services import LedgerReconciliationService
from utils.context import ServiceContext
from utils.exceptions import ServiceError

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Check student fee totals and statuses against recorded payments'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fix', action='store_true',
            help='Rewrite mismatched amount_paid/payment_status values'
        )
        parser.add_argument(
            '--student', type=str, default=None,
            help='Only check fees of the student with this student number'
        )
        parser.add_argument(
            '--fee', type=int, default=None,
            help='Only check assessments of this fee ID'
        )

    def handle(self, *args, **options):
        queryset = StudentFee.objects.all()
        if options['student']:
            queryset = queryset.filter(student__student_number=options['student'])
        if options['fee']:
            queryset = queryset.filter(fee_id=options['fee'])

        discrepancies = LedgerReconciliationService.find_discrepancies(queryset)
        if not discrepancies:
            self.stdout.write(self.style.SUCCESS('All student fee records are consistent.'))
            return

        self.stdout.write(self.style.WARNING(f"Found {len(discrepancies)} inconsistent records:"))
        for item in discrepancies:
            student_fee = item['student_fee']
            line = (
                f"  StudentFee {student_fee.pk} ({student_fee.student.student_number}, "
                f"{student_fee.fee.name}): stored {item['stored_paid']} / {item['stored_status']}, "
                f"payments {item['payments_total']} / {item['expected_status']}"
            )
            if item['exceeds_fee']:
                line += " [payments exceed fee amount]"
            self.stdout.write(line)

        if not options['fix']:
            self.stdout.write('Run again with --fix to repair these records.')
            return

        try:
            repaired = LedgerReconciliationService.repair(ServiceContext.system(), queryset)
        except ServiceError as e:
            raise CommandError(e.message)

        self.stdout.write(self.style.SUCCESS(f"Repaired {len(repaired)} records."))
