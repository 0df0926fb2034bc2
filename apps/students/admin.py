# students/admin.py

from django.contrib import admin

from utils.admin import ReadOnlyModelAdmin
from .models import Student


@admin.register(Student)
class StudentAdmin(ReadOnlyModelAdmin):
    list_display = ['student_number', 'first_name', 'last_name', 'class_year', 'gender', 'status']
    list_filter = ['status', 'gender', 'class_year']
    search_fields = ['student_number', 'first_name', 'last_name', 'email']
