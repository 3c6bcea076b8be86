# Provides the base Form class and form field classes for the converter pages.
from django import forms

# Raised from clean_timestamp when the submitted value is outside 1970-2100.
from django.core.exceptions import ValidationError

# The timestamp rules and display modes live with the formatter so the form and the
# URL route accept exactly the same input.
from .timestamp_utils import DISPLAY_MODE_CHOICES, DisplayMode, validate_timestamp_string
from .timezone_utils import as_choices

UTC_CHOICE = ("UTC", "UTC")


def timezone_choices(timezone_groups):
    """UTC on its own, then the catalog's grouped zones."""
    return [UTC_CHOICE, *as_choices(timezone_groups)]


# Landing page lookup form.
class TimestampLookupForm(forms.Form):
    """
    Collects a Unix timestamp, a timezone and a display mode on the landing page.

    Fields:
        timestamp (str): Seconds since the epoch. Cleaned to an int.
        timezone (str): IANA identifier chosen from the catalog.
        mode (str): One of the five display modes, defaults to "default".
    """

    timestamp = forms.CharField(
        label="Unix Timestamp",
        max_length=20,
        widget=forms.TextInput(attrs={"placeholder": "1747510600", "inputmode": "numeric"}),
    )
    timezone = forms.ChoiceField(label="Timezone", initial="UTC")
    mode = forms.ChoiceField(
        label="Display Mode",
        choices=DISPLAY_MODE_CHOICES,
        required=False,
        initial=DisplayMode.DEFAULT.value,
    )

    def __init__(self, *args, timezone_groups=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["timezone"].choices = timezone_choices(timezone_groups)

    def clean_timestamp(self):
        raw = self.cleaned_data["timestamp"]
        timestamp = validate_timestamp_string(raw.strip())
        if timestamp is None:
            raise ValidationError(
                "Please enter a Unix timestamp between 0 (1970) and 4102444800 (2100)."
            )
        return timestamp

    def clean_mode(self):
        # A blank or tampered mode falls back to the default rendering.
        return DisplayMode.coerce(self.cleaned_data.get("mode")).value


# Timezone switcher shown under a converted timestamp.
class TimezoneSelectForm(forms.Form):
    tz = forms.ChoiceField(label="View in different timezone:")
    mode = forms.CharField(widget=forms.HiddenInput, required=False)

    def __init__(self, *args, timezone_groups=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["tz"].choices = [("", "Select a timezone"), *timezone_choices(timezone_groups)]
