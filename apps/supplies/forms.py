# supplies/forms.py

"""
Supply Inventory Forms
"""

from django import forms

from core.utils import get_school_today
from students.models import Student
from utils.forms import DatePickerInput, SearchInput
from .models import Supply, SupplyDistribution


class SupplyForm(forms.ModelForm):
    """Form for creating/updating supplies"""

    class Meta:
        model = Supply
        fields = ['name', 'description', 'quantity_available', 'unit']
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Exercise Books'}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
            'quantity_available': forms.NumberInput(attrs={'class': 'form-control', 'min': '0'}),
            'unit': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. pieces'}),
        }


class DistributionForm(forms.ModelForm):
    """Form for handing out a supply to a student"""

    class Meta:
        model = SupplyDistribution
        fields = ['student', 'quantity', 'distribution_date', 'notes']
        widgets = {
            'student': forms.Select(attrs={'class': 'form-select'}),
            'quantity': forms.NumberInput(attrs={'class': 'form-control', 'min': '1'}),
            'distribution_date': DatePickerInput(),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
        }

    def __init__(self, *args, supply=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['student'].queryset = Student.active.order_by('last_name', 'first_name')
        self.fields['distribution_date'].initial = get_school_today()
        if supply is not None:
            self.fields['quantity'].widget.attrs['max'] = str(supply.quantity_available)


class SupplyFilterForm(forms.Form):
    search = forms.CharField(
        required=False,
        widget=SearchInput(attrs={'placeholder': 'Search supplies'})
    )
    stock_status = forms.ChoiceField(
        required=False,
        choices=[('', 'All Stock Levels')] + list(Supply.STOCK_STATUS_CHOICES),
        widget=forms.Select(attrs={'class': 'form-select'})
    )
