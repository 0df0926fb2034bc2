# fees/forms.py

"""
Fee Management Forms

- FeeForm: create/edit fee definitions
- FeeAssignForm: assess a fee against one student
- PaymentForm: record a payment against a student fee
- FeeFilterForm / PaymentFilterForm: list filters

Forms only parse input. Balance checks and ledger writes happen in
fees.services.
"""

from django import forms
from decimal import Decimal

from core.utils import get_school_today
from students.models import Student
from utils.forms import DatePickerInput, SearchInput
from .models import Fee, Payment


class FeeForm(forms.ModelForm):
    """Form for creating/updating fees"""

    apply_to_all = forms.BooleanField(
        required=False,
        label="Apply to all active students",
        widget=forms.CheckboxInput(attrs={'class': 'form-check-input'})
    )

    class Meta:
        model = Fee
        fields = ['name', 'amount', 'description', 'academic_year', 'due_date']
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Tuition Fee'}),
            'amount': forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01', 'min': '0.01'}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
            'academic_year': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. 2024-2025'}),
            'due_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}, format='%Y-%m-%d'),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Bulk assessment only makes sense when the fee is first created
        if self.instance.pk:
            del self.fields['apply_to_all']


class FeeAssignForm(forms.Form):
    student = forms.ModelChoiceField(
        queryset=Student.objects.none(),
        widget=forms.Select(attrs={'class': 'form-select'})
    )

    def __init__(self, *args, fee=None, **kwargs):
        super().__init__(*args, **kwargs)
        students = Student.active.all()
        if fee is not None:
            students = students.exclude(fees__fee=fee)
        self.fields['student'].queryset = students.order_by('last_name', 'first_name')


class PaymentForm(forms.ModelForm):
    """Form for recording student payments"""

    class Meta:
        model = Payment
        fields = ['amount', 'payment_date', 'payment_method', 'notes']
        widgets = {
            'amount': forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01', 'min': '0.01'}),
            'payment_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}, format='%Y-%m-%d'),
            'payment_method': forms.Select(attrs={'class': 'form-select'}),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
        }

    def __init__(self, *args, student_fee=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['payment_date'].initial = get_school_today()
        if student_fee is not None:
            self.fields['amount'].initial = student_fee.balance
            self.fields['amount'].widget.attrs['max'] = str(student_fee.balance)

    def clean_amount(self):
        amount = self.cleaned_data.get('amount')
        if amount is not None and amount <= Decimal('0'):
            raise forms.ValidationError("Amount must be greater than zero.")
        return amount


class FeeFilterForm(forms.Form):
    search = forms.CharField(
        required=False,
        widget=SearchInput(attrs={'placeholder': 'Search fees'})
    )
    academic_year = forms.ChoiceField(
        required=False,
        widget=forms.Select(attrs={'class': 'form-select'})
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        years = Fee.objects.order_by('-academic_year').values_list('academic_year', flat=True).distinct()
        self.fields['academic_year'].choices = [('', 'All Years')] + [(y, y) for y in years]


class PaymentFilterForm(forms.Form):
    search = forms.CharField(
        required=False,
        widget=SearchInput(attrs={'placeholder': 'Receipt, student name or number'})
    )
    payment_method = forms.ChoiceField(
        required=False,
        choices=[('', 'All Methods')] + list(Payment.PAYMENT_METHOD_CHOICES),
        widget=forms.Select(attrs={'class': 'form-select'})
    )
    date_from = forms.DateField(
        required=False,
        widget=DatePickerInput()
    )
    date_to = forms.DateField(
        required=False,
        widget=DatePickerInput()
    )
