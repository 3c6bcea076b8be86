import logging
from urllib.parse import urlencode

from django.apps import apps
from django.http import HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.cache import cache_control
from django.views.decorators.http import require_GET

from .forms import TimestampLookupForm, TimezoneSelectForm
from .timestamp_utils import (
    DisplayMode,
    TimestampConversionError,
    convert_timestamp,
    get_current_timestamp,
    get_host_timezone,
    safe_format_timestamp,
    validate_timestamp_string,
)

logger = logging.getLogger(__name__)

# Rows for the "Display Modes" table on the landing page, rendered live.
EXAMPLE_TIMESTAMP = 1747510600
EXAMPLE_TIMEZONE = "Australia/Sydney"
MODE_EXAMPLES = [
    ("Default", DisplayMode.DEFAULT, "Full date and time"),
    ("date", DisplayMode.DATE, "Date only"),
    ("compact", DisplayMode.COMPACT, "Short date and time"),
    ("iso", DisplayMode.ISO, "ISO 8601 format (local time)"),
    ("relative", DisplayMode.RELATIVE, "Relative to now"),
]


def _timezone_groups():
    return apps.get_app_config("converter").timezone_catalog.timezone_groups()


def timestamp_url(timestamp, mode=DisplayMode.DEFAULT, tz=None):
    """Link to the timestamp page, leaving out query parameters that are defaults."""
    url = reverse("converter:timestamp", args=[timestamp])
    params = {}
    mode = DisplayMode.coerce(mode)
    if mode is not DisplayMode.DEFAULT:
        params["mode"] = mode.value
    if tz:
        params["tz"] = tz
    return f"{url}?{urlencode(params)}" if params else url


# Landing page: quick links for "now" plus a lookup form.
# Disallow caching so "now" is always current.
@cache_control(no_cache=True, must_revalidate=True, no_store=True)
@require_GET
def home(request):
    groups = _timezone_groups()
    data = request.GET if "timestamp" in request.GET else None
    form = TimestampLookupForm(data, timezone_groups=groups)

    if form.is_bound and form.is_valid():
        return redirect(
            timestamp_url(
                form.cleaned_data["timestamp"],
                form.cleaned_data["mode"],
                form.cleaned_data["timezone"],
            )
        )

    current_timestamp = get_current_timestamp()
    quick_links = [
        ("View Current Time", timestamp_url(current_timestamp)),
        ("Date Only", timestamp_url(current_timestamp, DisplayMode.DATE)),
        ("Compact", timestamp_url(current_timestamp, DisplayMode.COMPACT)),
        ("ISO", timestamp_url(current_timestamp, DisplayMode.ISO)),
        ("Relative", timestamp_url(current_timestamp, DisplayMode.RELATIVE)),
    ]
    mode_examples = [
        {
            "label": label,
            "url": timestamp_url(EXAMPLE_TIMESTAMP, mode),
            "description": description,
            "example": safe_format_timestamp(EXAMPLE_TIMESTAMP, EXAMPLE_TIMEZONE, mode),
        }
        for label, mode, description in MODE_EXAMPLES
    ]

    return render(
        request,
        "converter/home.html",
        {
            "form": form,
            "current_timestamp": current_timestamp,
            "quick_links": quick_links,
            "mode_examples": mode_examples,
        },
    )


# Converted timestamp page: /<timestamp>/?mode=<mode>&tz=<zone>
@cache_control(no_cache=True, must_revalidate=True, no_store=True)
@require_GET
def timestamp_page(request, timestamp):
    mode = DisplayMode.coerce(request.GET.get("mode"))

    value = validate_timestamp_string(timestamp)
    if value is None:
        return render(
            request,
            "converter/timestamp.html",
            {"error": "Invalid timestamp provided"},
            status=400,
        )

    timezone = request.GET.get("tz") or get_host_timezone()

    try:
        result = convert_timestamp(value, timezone, mode)
    except TimestampConversionError:
        logger.exception("Error formatting timestamp %s for %s", value, timezone)
        return render(
            request,
            "converter/timestamp.html",
            {"error": "Failed to format timestamp. Please try again."},
            status=500,
        )

    selector = TimezoneSelectForm(
        initial={"tz": timezone, "mode": mode.value},
        timezone_groups=_timezone_groups(),
    )
    return render(
        request,
        "converter/timestamp.html",
        {"result": result, "selector": selector},
    )


def robots_txt(request):
    # The tool's pages are per-timestamp and not worth indexing.
    return HttpResponse("User-agent: *\nDisallow: /\n", content_type="text/plain")


def view_404(request, exception):
    return render(request, "404.html", status=404)
