# students/forms.py

"""
Student Management Forms
"""

from django import forms

from utils.forms import SearchInput
from .models import Student


class StudentForm(forms.ModelForm):
    """Form for registering/updating students"""

    class Meta:
        model = Student
        fields = [
            'student_number', 'first_name', 'last_name', 'date_of_birth',
            'gender', 'class_year', 'address', 'phone', 'email', 'status',
        ]
        widgets = {
            'student_number': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. AWE-2024-001'}),
            'first_name': forms.TextInput(attrs={'class': 'form-control'}),
            'last_name': forms.TextInput(attrs={'class': 'form-control'}),
            'date_of_birth': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'gender': forms.Select(attrs={'class': 'form-select'}),
            'class_year': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Grade 5'}),
            'address': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
            'phone': forms.TextInput(attrs={'class': 'form-control'}),
            'email': forms.EmailInput(attrs={'class': 'form-control'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
        }

    def validate_unique(self):
        # Student number uniqueness is enforced by StudentService
        pass


class StudentFilterForm(forms.Form):
    search = forms.CharField(
        required=False,
        widget=SearchInput(attrs={'placeholder': 'Search by name or student number'})
    )
    status = forms.ChoiceField(
        required=False,
        choices=[('', 'All Statuses')] + list(Student.STATUS_CHOICES),
        widget=forms.Select(attrs={'class': 'form-select'})
    )
