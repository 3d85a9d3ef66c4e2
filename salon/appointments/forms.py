"""
Appointments Forms
Input validation for client bookings and admin calendar events.
"""
from django import forms
from django.utils.translation import gettext_lazy as _

from salon.clients.phone import canonical_phone

from .models import Appointment


class ServiceIdsField(forms.Field):
    """Accepts a list of ids or a comma separated string, keeps selection order."""

    default_error_messages = {
        'invalid': _('Invalid service selection.'),
        'required': _('Please select at least one service.'),
    }

    def to_python(self, value):
        if value in self.empty_values:
            return []
        if isinstance(value, str):
            value = [v for v in value.split(',') if v.strip()]
        try:
            ids = [int(v) for v in value]
        except (TypeError, ValueError):
            raise forms.ValidationError(self.error_messages['invalid'], code='invalid')
        return list(dict.fromkeys(ids))

    def validate(self, value):
        if self.required and not value:
            raise forms.ValidationError(self.error_messages['required'], code='required')


class BookingForm(forms.Form):
    customer_name = forms.CharField(
        label=_("Full name"),
        max_length=120,
        error_messages={'required': _('Please enter your full name.')},
    )
    customer_phone = forms.CharField(
        label=_("Phone"),
        max_length=20,
        error_messages={'required': _('Please enter a phone number.')},
    )
    customer_email = forms.EmailField(label=_("Email"), required=False)
    services = ServiceIdsField(label=_("Services"))
    date = forms.DateField(label=_("Date"), input_formats=['%Y-%m-%d'])
    start_time = forms.TimeField(label=_("Start time"), input_formats=['%H:%M'])
    notes = forms.CharField(label=_("Notes"), required=False, widget=forms.Textarea)

    def clean_customer_name(self):
        name = self.cleaned_data['customer_name'].strip()
        if not name:
            raise forms.ValidationError(_('Please enter your full name.'), code='required')
        return name

    def clean_customer_phone(self):
        return canonical_phone(self.cleaned_data['customer_phone'])

    def booking_kwargs(self):
        data = self.cleaned_data
        return {
            'full_name': data['customer_name'],
            'phone': data['customer_phone'],
            'email': data.get('customer_email') or '',
            'service_ids': data['services'],
            'date': data['date'],
            'start_time': data['start_time'],
            'notes': data.get('notes') or '',
        }


class AvailabilityQueryForm(forms.Form):
    date = forms.DateField(input_formats=['%Y-%m-%d'])
    services = ServiceIdsField(required=False)


class ManualEventForm(forms.Form):
    date = forms.DateField(label=_("Date"), input_formats=['%Y-%m-%d'])
    start_time = forms.TimeField(label=_("Start time"), input_formats=['%H:%M'])
    end_time = forms.TimeField(label=_("End time"), input_formats=['%H:%M'])
    notes = forms.CharField(label=_("Notes"), required=False)
    allow_overlap = forms.BooleanField(required=False)

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get('start_time'), cleaned.get('end_time')
        if start and end and end <= start:
            self.add_error('end_time', _('End time must be after start time.'))
        return cleaned


class StatusForm(forms.Form):
    status = forms.ChoiceField(choices=Appointment.STATUS_CHOICES)
    allow_overlap = forms.BooleanField(required=False)


class CalendarQueryForm(forms.Form):
    """Optional ?date= / ?week_start= for the staff calendar; defaults to today."""
    date = forms.DateField(required=False, input_formats=['%Y-%m-%d'])
