"""
timestamp_utils.py — Unix Timestamp Converter
Validation and multi-mode formatting of epoch timestamps.
Pure stdlib apart from tzlocal (host timezone detection).
"""

import datetime
import enum
import logging
import math
import re
import time
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tzlocal import get_localzone_name

logger = logging.getLogger(__name__)


# ── Constants ─────────────────────────────────────────────────────────────────

MIN_TIMESTAMP = 0               # Unix epoch
MAX_TIMESTAMP = 4_102_444_800   # 2100-01-01 00:00:00 UTC

SECONDS_IN_MINUTE = 60
SECONDS_IN_HOUR = 3_600
SECONDS_IN_DAY = 86_400
SECONDS_IN_WEEK = 604_800
SECONDS_IN_YEAR = 31_536_000    # approximate, 365 days

FALLBACK_TIMEZONE = "UTC"

# Leading integer run, same rules as a lenient base-10 parse:
# optional whitespace, optional sign, then ASCII digits.
_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")
_MAX_DIGITS = len(str(MAX_TIMESTAMP))


class DisplayMode(str, enum.Enum):
    DEFAULT = "default"
    DATE = "date"
    COMPACT = "compact"
    ISO = "iso"
    RELATIVE = "relative"

    @classmethod
    def coerce(cls, value) -> "DisplayMode":
        """Map any incoming value onto a member, unknown values become DEFAULT."""
        if isinstance(value, cls):
            return value
        if is_valid_display_mode(value):
            return cls(value)
        return cls.DEFAULT


DISPLAY_MODE_CHOICES = [
    (DisplayMode.DEFAULT.value, "Default (full date and time)"),
    (DisplayMode.DATE.value, "Date only"),
    (DisplayMode.COMPACT.value, "Compact (DD/MM/YYYY HH:MM)"),
    (DisplayMode.ISO.value, "ISO 8601"),
    (DisplayMode.RELATIVE.value, "Relative to now"),
]


# ── Errors ────────────────────────────────────────────────────────────────────

class TimestampConversionError(ValueError):
    """Base class for failures raised by format_timestamp()."""


class InvalidTimestampError(TimestampConversionError):
    pass


class InvalidTimezoneError(TimestampConversionError):
    pass


class UnknownTimezoneError(TimestampConversionError):
    """The zone database does not recognise the identifier."""


@dataclass(frozen=True)
class ConversionResult:
    timestamp: int
    timezone: str
    mode: DisplayMode
    formatted_date: str


# ── Validation ────────────────────────────────────────────────────────────────

def validate_timestamp_string(raw):
    """
    Parse untrusted text into a bounded epoch timestamp.

    Only the leading integer run is read, so "1.5" gives 1 and "42abc" gives 42.
    Returns the integer when it lies within MIN_TIMESTAMP..MAX_TIMESTAMP,
    otherwise None. Never raises.
    """
    if not raw or not isinstance(raw, str):
        return None

    match = _LEADING_INT_RE.match(raw)
    if not match:
        return None

    number = match.group(1)
    digits = number.lstrip("+-").lstrip("0") or "0"
    # Longer than the upper bound is out of range; also keeps int() under its digit limit.
    if len(digits) > _MAX_DIGITS:
        return None

    timestamp = -int(digits) if number.startswith("-") else int(digits)
    if timestamp < MIN_TIMESTAMP or timestamp > MAX_TIMESTAMP:
        return None
    return timestamp


def is_finite_non_negative(value) -> bool:
    """
    True for a real number that is finite and >= 0.

    Unlike validate_timestamp_string() there is no upper bound here; this is
    the looser check used on values that are already numeric.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


def is_valid_display_mode(mode) -> bool:
    return isinstance(mode, str) and mode in {m.value for m in DisplayMode}


# Names used by the page layer and in the tool's docs.
validate_timestamp = validate_timestamp_string
is_valid_timestamp = is_finite_non_negative


# ── Clock ─────────────────────────────────────────────────────────────────────

def _now_ms() -> float:
    return time.time() * 1000


def get_current_timestamp() -> int:
    """Current epoch time in whole seconds."""
    return math.floor(_now_ms() / 1000)


def get_host_timezone() -> str:
    """IANA name of the machine's local timezone, or "UTC" if it can't be found."""
    try:
        name = get_localzone_name()
    except Exception as exc:
        logger.warning("Failed to detect host timezone, falling back to UTC: %s", exc)
        return FALLBACK_TIMEZONE

    if not name or not isinstance(name, str):
        logger.warning("Invalid host timezone detected, falling back to UTC")
        return FALLBACK_TIMEZONE
    return name


# ── Formatting ────────────────────────────────────────────────────────────────

def _resolve_zone(name: str) -> datetime.tzinfo:
    if name == FALLBACK_TIMEZONE:
        return datetime.timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise UnknownTimezoneError(f"Unknown timezone: {name!r}") from exc


def _to_utc(timestamp) -> datetime.datetime:
    try:
        return datetime.datetime.fromtimestamp(timestamp, tz=datetime.timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise InvalidTimestampError("Invalid timestamp: results in invalid date") from exc


def _render_default(dt: datetime.datetime) -> str:
    # e.g. "Sun, 18 May 2025, 5:36 am"
    hour = dt.hour % 12 or 12
    marker = "am" if dt.hour < 12 else "pm"
    return (
        f"{dt.strftime('%a')}, {dt.day} {dt.strftime('%B')} {dt.year}, "
        f"{hour}:{dt.minute:02d} {marker}"
    )


def _render_date(dt: datetime.datetime) -> str:
    return f"{dt.day} {dt.strftime('%B')} {dt.year}"


def _render_compact(dt: datetime.datetime) -> str:
    return dt.strftime("%d/%m/%Y %H:%M")


def _render_iso(dt: datetime.datetime) -> str:
    # Local wall-clock time, no offset suffix and no fractional seconds.
    return dt.strftime("%Y-%m-%dT%H:%M:%S")


def format_timestamp(timestamp, timezone="UTC", mode=DisplayMode.DEFAULT) -> str:
    """
    Render an epoch timestamp (seconds) in the given timezone and display mode.

    Raises InvalidTimestampError for a negative or non-finite timestamp and
    InvalidTimezoneError for an empty or non-string timezone. An identifier the
    zone database doesn't know is retried once as UTC, with a warning logged.
    Unrecognised modes render as DisplayMode.DEFAULT.
    """
    if not is_finite_non_negative(timestamp):
        raise InvalidTimestampError("Invalid timestamp: must be a positive finite number")

    if not timezone or not isinstance(timezone, str):
        raise InvalidTimezoneError("Invalid timezone: must be a non-empty string")

    mode = DisplayMode.coerce(mode)

    dt_utc = _to_utc(timestamp)

    # Relative phrasing is zone-independent.
    if mode is DisplayMode.RELATIVE:
        return relative_time(timestamp * 1000)

    try:
        dt_local = dt_utc.astimezone(_resolve_zone(timezone))
        if mode is DisplayMode.DATE:
            return _render_date(dt_local)
        if mode is DisplayMode.COMPACT:
            return _render_compact(dt_local)
        if mode is DisplayMode.ISO:
            return _render_iso(dt_local)
        return _render_default(dt_local)
    except UnknownTimezoneError:
        logger.warning('Invalid timezone "%s", falling back to UTC', timezone)
        return format_timestamp(timestamp, FALLBACK_TIMEZONE, mode)
    except OverflowError as exc:
        # Local time past year 9999.
        raise InvalidTimestampError("Invalid timestamp: results in invalid date") from exc


# ── Relative time ─────────────────────────────────────────────────────────────

def _round_half_up(value: float) -> int:
    # Halves round towards +infinity: 1.5 -> 2, -1.5 -> -1.
    return math.floor(value + 0.5)


def _phrase(amount: int, unit: str) -> str:
    if amount > 0:
        return f"in {amount} {unit}{'' if amount == 1 else 's'}"
    return f"{-amount} {unit}{'' if amount == -1 else 's'} ago"


def relative_time(target_ms: float, now_ms=None) -> str:
    """
    Describe how far target_ms (epoch milliseconds) is from now, e.g.
    "in 2 days" or "3 hours ago".

    Each unit is rounded from the previous, already rounded unit, so rounding
    error accumulates along seconds -> minutes -> hours -> days. Output
    depends on this, keep it.
    """
    if now_ms is None:
        now_ms = _now_ms()

    diff_ms = target_ms - now_ms
    diff_sec = _round_half_up(diff_ms / 1000)
    diff_min = _round_half_up(diff_sec / 60)
    diff_hour = _round_half_up(diff_min / 60)
    diff_day = _round_half_up(diff_hour / 24)

    if abs(diff_day) >= 365:
        return _phrase(_round_half_up(diff_day / 365), "year")
    if abs(diff_day) >= 7:
        return _phrase(_round_half_up(diff_day / 7), "week")

    if abs(diff_sec) < 60:
        return _phrase(diff_sec, "second")
    elif abs(diff_min) < 60:
        return _phrase(diff_min, "minute")
    elif abs(diff_hour) < 24:
        return _phrase(diff_hour, "hour")
    return _phrase(diff_day, "day")


# ── Convenience wrappers ──────────────────────────────────────────────────────

def convert_timestamp(timestamp, timezone="UTC", mode=DisplayMode.DEFAULT) -> ConversionResult:
    """Format once and bundle the inputs with the output. Errors propagate."""
    formatted_date = format_timestamp(timestamp, timezone, mode)
    return ConversionResult(
        timestamp=timestamp,
        timezone=timezone,
        mode=DisplayMode.coerce(mode),
        formatted_date=formatted_date,
    )


def safe_format_timestamp(
    timestamp, timezone="UTC", mode=DisplayMode.DEFAULT, fallback="Invalid timestamp"
) -> str:
    """Like format_timestamp() but returns `fallback` instead of raising."""
    try:
        return format_timestamp(timestamp, timezone, mode)
    except Exception as exc:
        logger.error("Error formatting timestamp %r: %s", timestamp, exc)
        return fallback
