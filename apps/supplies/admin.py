# supplies/admin.py

from django.contrib import admin

from utils.admin import ReadOnlyModelAdmin
from .models import Supply, SupplyDistribution


@admin.register(Supply)
class SupplyAdmin(ReadOnlyModelAdmin):
    list_display = ['name', 'quantity_available', 'unit', 'stock_status_display']
    search_fields = ['name', 'description']

    @admin.display(description='Stock Status')
    def stock_status_display(self, obj):
        return obj.get_stock_status_display()


@admin.register(SupplyDistribution)
class SupplyDistributionAdmin(ReadOnlyModelAdmin):
    list_display = ['supply', 'student', 'quantity', 'distribution_date']
    list_filter = ['distribution_date']
    search_fields = ['supply__name', 'student__student_number', 'student__last_name']
