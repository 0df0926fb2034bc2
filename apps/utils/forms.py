# utils/forms.py

"""
Form utilities shared by the academy apps: Bootstrap widgets, a search
input, and mapping of service-layer errors back onto forms.
"""

from django import forms
import logging

from utils.exceptions import ValidationError

logger = logging.getLogger(__name__)


# =============================================================================
# CUSTOM WIDGETS
# =============================================================================

class DatePickerInput(forms.DateInput):
    """Date picker widget with HTML5 date input"""
    input_type = 'date'

    def __init__(self, attrs=None, format=None):
        default_attrs = {'class': 'form-control'}
        if attrs:
            default_attrs.update(attrs)
        super().__init__(attrs=default_attrs, format=format or '%Y-%m-%d')


class SearchInput(forms.TextInput):
    """Search input widget"""

    def __init__(self, attrs=None):
        default_attrs = {
            'class': 'form-control',
            'placeholder': 'Search...',
            'type': 'search',
            'autocomplete': 'off'
        }
        if attrs:
            default_attrs.update(attrs)
        super().__init__(attrs=default_attrs)


# =============================================================================
# SERVICE ERROR HELPERS
# =============================================================================

def apply_service_error(form, error):
    """
    Attach a ServiceError to a bound form.

    Field errors of a ValidationError land on the matching fields; anything
    else becomes a non-field error carrying the error's message.
    """
    field_errors = error.field_errors if isinstance(error, ValidationError) else {}
    attached = False
    for field, message in field_errors.items():
        if field in form.fields:
            form.add_error(field, message)
            attached = True
    if not attached:
        form.add_error(None, error.message)


def get_form_errors_as_string(form):
    """Convert form errors to a formatted string"""
    error_messages = []

    for field, error_list in form.errors.items():
        field_label = form.fields[field].label if field in form.fields else field
        for error in error_list:
            error_messages.append(f"{field_label}: {error}" if field != '__all__' else str(error))

    return '\n'.join(error_messages)
