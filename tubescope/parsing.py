"""Parsers for the human-readable text the upstream API returns.

Counts ("1,234 views", "1.2M subscribers"), join dates ("Feb 19, 2012"),
durations ("1:02:03") and relative publish times ("3 weeks ago"). Every
parser is total: unparseable input yields 0 or None, never an exception.
"""

import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation

_MULTIPLIERS = {
    "K": 1_000,
    "M": 1_000_000,
    "B": 1_000_000_000,
}

_MONTHS = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
}

_RELATIVE_TIME = re.compile(r"^(\d+)\s+(second|minute|hour|day|week|month|year)s?\s+ago$")

# Month and year are calendar approximations.
_UNIT_SECONDS = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
    "week": 7 * 86400,
    "month": 30 * 86400,
    "year": 365 * 86400,
}


def _first_token(text: str) -> str | None:
    parts = text.split()
    return parts[0] if parts else None


def parse_numeric_string(text: str) -> int:
    """Parse the leading number of e.g. '61,943,233,845 views'. Returns 0 if unparseable."""
    token = _first_token(text)
    if token is None:
        return 0
    try:
        return int(token.replace(",", ""))
    except ValueError:
        return 0


def parse_multiplied_string(text: str) -> int:
    """Parse abbreviated counts: '1.5K' -> 1500, '2M' -> 2000000, '42' -> 42."""
    token = _first_token(text)
    if token is None:
        return 0
    token = token.replace(",", "")
    multiplier = _MULTIPLIERS.get(token[-1])
    if multiplier is None:
        try:
            return int(token)
        except ValueError:
            return 0
    try:
        value = Decimal(token[:-1])
    except InvalidOperation:
        return 0
    if not value.is_finite():
        return 0
    return int(value * multiplier)


def parse_view_count(text: str | None) -> tuple[int, bool]:
    """Return (views, hidden) for a view-count label.

    A missing or empty label means the channel hides its view counts.
    """
    if not text or not text.strip():
        return 0, True
    text = text.strip()
    if text == "No views":
        return 0, False
    return parse_numeric_string(text), False


def parse_creation_date(text: str) -> datetime | None:
    """Parse 'Feb 19, 2012' into a UTC midnight datetime."""
    parts = text.split()
    if len(parts) != 3:
        return None
    month = _MONTHS.get(parts[0])
    try:
        day = int(parts[1].rstrip(","))
        year = int(parts[2])
    except ValueError:
        return None
    if month is None:
        return None
    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_length_text(text: str) -> int | None:
    """Parse 'MM:SS' or 'H:MM:SS' into seconds."""
    parts = text.strip().split(":")
    if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
        return None
    numbers = [int(part) for part in parts]
    if len(numbers) == 2:
        minutes, seconds = numbers
        return minutes * 60 + seconds
    hours, minutes, seconds = numbers
    return hours * 3600 + minutes * 60 + seconds


def parse_relative_time(text: str, now: datetime | None = None) -> datetime | None:
    """Convert '3 weeks ago' into an approximate absolute time."""
    match = _RELATIVE_TIME.match(text.strip().lower())
    if not match:
        return None
    amount = int(match.group(1))
    now = now or datetime.now(timezone.utc)
    return now - timedelta(seconds=amount * _UNIT_SECONDS[match.group(2)])


def strip_asset_url(url: str | None, cdn_marker: str) -> str | None:
    """Reduce a CDN asset URL to its path, dropping size/query parameters.

    URLs not served from the CDN (default avatars and banners) return None.
    """
    if not url:
        return None
    index = url.find(cdn_marker)
    if index == -1:
        return None
    path = url[index + len(cdn_marker):]
    return path.split("=", 1)[0] or None
