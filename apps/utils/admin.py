# utils/admin.py

from django.contrib import admin
from .models import AuditLog


class ReadOnlyModelAdmin(admin.ModelAdmin):
    """
    Browse-only admin for records written by the service layer.

    Creating, editing or deleting these rows from the admin would skip the
    service transaction and its audit entry.
    """

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyModelAdmin):
    list_display = ['created_at', 'action', 'user_id', 'details', 'ip_address']
    list_filter = ['action', 'created_at']
    search_fields = ['details', 'user_id', 'object_id']
