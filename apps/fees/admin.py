# fees/admin.py

from django.contrib import admin

from utils.admin import ReadOnlyModelAdmin
from .models import Fee, StudentFee, Payment


class StudentFeeInline(admin.TabularInline):
    model = StudentFee
    extra = 0
    fields = ['student', 'amount_paid', 'payment_status']
    readonly_fields = ['student', 'amount_paid', 'payment_status']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Fee)
class FeeAdmin(ReadOnlyModelAdmin):
    list_display = ['name', 'amount', 'academic_year', 'due_date']
    list_filter = ['academic_year']
    search_fields = ['name', 'description']
    inlines = [StudentFeeInline]


@admin.register(StudentFee)
class StudentFeeAdmin(ReadOnlyModelAdmin):
    list_display = ['student', 'fee', 'amount_paid', 'payment_status']
    list_filter = ['payment_status', 'fee__academic_year']
    search_fields = ['student__student_number', 'student__last_name', 'fee__name']


@admin.register(Payment)
class PaymentAdmin(ReadOnlyModelAdmin):
    list_display = ['receipt_number', 'student_fee', 'amount', 'payment_date', 'payment_method']
    list_filter = ['payment_method', 'payment_date']
    search_fields = ['receipt_number', 'student_fee__student__student_number']
    date_hierarchy = 'payment_date'
