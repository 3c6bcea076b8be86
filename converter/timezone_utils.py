"""
timezone_utils.py — timezone list for the converter's selector.

Common zones are grouped by region and listed first; every other IANA
identifier goes under "All Other Timezones". Results are cached on a
TimezoneCatalog instance for a few minutes.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from zoneinfo import available_timezones

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimezoneOption:
    name: str
    value: str


@dataclass(frozen=True)
class TimezoneGroup:
    label: str
    timezones: tuple[TimezoneOption, ...]


# ── Constants ─────────────────────────────────────────────────────────────────

COMMON_TIMEZONE_GROUPS = (
    TimezoneGroup("Australia", (
        TimezoneOption("Sydney", "Australia/Sydney"),
        TimezoneOption("Melbourne", "Australia/Melbourne"),
        TimezoneOption("Brisbane", "Australia/Brisbane"),
        TimezoneOption("Perth", "Australia/Perth"),
        TimezoneOption("Adelaide", "Australia/Adelaide"),
        TimezoneOption("Darwin", "Australia/Darwin"),
    )),
    TimezoneGroup("New Zealand", (
        TimezoneOption("Auckland/Wellington", "Pacific/Auckland"),
    )),
    TimezoneGroup("United Kingdom", (
        TimezoneOption("London", "Europe/London"),
    )),
    TimezoneGroup("United States", (
        TimezoneOption("Eastern Time (New York)", "America/New_York"),
        TimezoneOption("Central Time (Chicago)", "America/Chicago"),
        TimezoneOption("Mountain Time (Denver)", "America/Denver"),
        TimezoneOption("Pacific Time (Los Angeles)", "America/Los_Angeles"),
    )),
)

# Used when the zone database is missing or returns nothing usable.
FALLBACK_TIMEZONES = (
    "UTC",
    "America/New_York",
    "America/Chicago",
    "America/Denver",
    "America/Los_Angeles",
    "Europe/London",
    "Europe/Paris",
    "Europe/Berlin",
    "Asia/Tokyo",
    "Asia/Shanghai",
    "Australia/Sydney",
    "Australia/Melbourne",
    "Pacific/Auckland",
)

OTHER_TIMEZONES_LABEL = "All Other Timezones"
CACHE_TTL_SECONDS = 5 * 60


# ── Helpers ───────────────────────────────────────────────────────────────────

def is_valid_timezone(value) -> bool:
    """Loose Region/City shape check; it does not consult the zone database."""
    if not isinstance(value, str) or not value:
        return False
    return "/" in value and len(value) > 3


def format_timezone_name(timezone) -> str:
    """
    Display name for a zone identifier: "America/New_York" -> "New York".
    """
    if not timezone or not isinstance(timezone, str):
        return "Unknown"

    parts = timezone.split("/")
    if len(parts) < 2:
        return timezone
    return parts[-1].replace("_", " ")


def _common_values() -> set[str]:
    return {tz.value for group in COMMON_TIMEZONE_GROUPS for tz in group.timezones}


class TimezoneCatalog:
    """
    Cached timezone listing.

    One instance is owned by the app config; tests build their own with a
    fake `source` and `clock`. The cache expires `ttl` seconds after it was
    last filled, and clear() drops it immediately.
    """

    def __init__(self, ttl=CACHE_TTL_SECONDS, clock=time.monotonic, source=available_timezones):
        self.ttl = ttl
        self._clock = clock
        self._source = source
        self.clear()

    def clear(self) -> None:
        self._all_timezones = None
        self._timezone_groups = None
        self._last_updated = None

    def _is_fresh(self) -> bool:
        if self._last_updated is None:
            return False
        return self._clock() - self._last_updated < self.ttl

    def _store_all(self, timezones: list[str]) -> list[str]:
        self._all_timezones = timezones
        self._last_updated = self._clock()
        return timezones

    def all_timezones(self) -> list[str]:
        """Sorted Region/City identifiers known to the zone database."""
        if self._all_timezones is not None and self._is_fresh():
            return self._all_timezones

        try:
            timezones = self._source()
        except Exception as exc:
            logger.warning("Error reading the timezone database, using fallback: %s", exc)
            return self._store_all(list(FALLBACK_TIMEZONES))

        valid = [tz for tz in timezones or () if isinstance(tz, str) and tz and "/" in tz]
        if not valid:
            logger.warning("No valid timezones found, using fallback timezones")
            return self._store_all(list(FALLBACK_TIMEZONES))

        return self._store_all(sorted(valid))

    def timezone_groups(self) -> list[TimezoneGroup]:
        """Common groups first, then everything else under OTHER_TIMEZONES_LABEL."""
        if self._timezone_groups is not None and self._is_fresh():
            return self._timezone_groups

        common = _common_values()
        others = tuple(
            TimezoneOption(format_timezone_name(tz), tz)
            for tz in self.all_timezones()
            if tz not in common
        )
        groups = [*COMMON_TIMEZONE_GROUPS, TimezoneGroup(OTHER_TIMEZONES_LABEL, others)]

        self._timezone_groups = groups
        self._last_updated = self._clock()
        return groups


# ── Lookups over a group list ─────────────────────────────────────────────────

def find_timezone_by_value(timezone_groups, value):
    if not is_valid_timezone(value):
        return None

    for group in timezone_groups:
        for option in group.timezones:
            if option.value == value:
                return option
    return None


def get_timezones_by_region(timezone_groups, region: str) -> list[TimezoneOption]:
    """Options of the first group whose label contains `region` (any case)."""
    needle = region.lower()
    for group in timezone_groups:
        if needle in group.label.lower():
            return list(group.timezones)
    return []


def search_timezones(timezone_groups, query) -> list[TimezoneOption]:
    if not query or not isinstance(query, str):
        return []

    term = query.lower()
    return [
        option
        for group in timezone_groups
        for option in group.timezones
        if term in option.name.lower() or term in option.value.lower()
    ]


def get_timezone_stats(timezone_groups) -> dict:
    return {
        "total_groups": len(timezone_groups),
        "total_timezones": sum(len(group.timezones) for group in timezone_groups),
        "regions": [group.label for group in timezone_groups],
    }


def as_choices(timezone_groups) -> list:
    """Grouped (value, label) pairs in the shape Django's ChoiceField takes."""
    return [
        (group.label, [(option.value, option.name) for option in group.timezones])
        for group in timezone_groups
    ]
