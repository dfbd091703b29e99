"""Date and datetime parsing tolerant of how models write them.

Dates must be ``YYYY-MM-DD``. Datetimes are ``YYYY-MM-DD HH:mm`` or
``YYYY-MM-DD HH:mm:ss`` followed by a space and a time zone, which may be an
IANA name (``America/New_York``), an abbreviation known to the tz database
(``UTC``, ``EST``) or a UTC offset (``+05:30``, ``-0800``, ``UTC+2``).
Datetimes are returned as aware UTC values.

Error messages are phrased as instructions because they are fed back to the
model on a retry.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import InvalidValueError
from ..schemas.field import Field

_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_DATETIME = re.compile(r"^(\d{4}-\d{2}-\d{2} \d{2}:\d{2}(?::\d{2})?) (.+)$")
_UTC_OFFSET = re.compile(r"(?:UTC|GMT)?\s*([+-])(\d{1,2})(?::?(\d{2}))?")

DATE_FORMAT_HINT = 'Invalid date format. Please provide the date in "YYYY-MM-DD" format.'
DATETIME_FORMAT_HINT = (
    'Invalid date and time format. Please provide the date and time in '
    '"YYYY-MM-DD HH:mm" or "YYYY-MM-DD HH:mm:ss" format, followed by the timezone.'
)


def parse_llm_friendly_date(
    field: Field, text: str, required: bool = False
) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` date for *field*.

    Returns ``None`` on bad input when the field is optional and *required*
    is false (array elements are always required).

    Raises:
        InvalidValueError: Bad input for a required value.
    """
    try:
        return _parse_date(text)
    except ValueError as exc:
        if field.is_optional and not required:
            return None
        raise InvalidValueError(field, text, str(exc)) from exc


def parse_llm_friendly_datetime(
    field: Field, text: str, required: bool = False
) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD HH:mm[:ss] <zone>`` into an aware UTC datetime.

    Optionality is handled as in :func:`parse_llm_friendly_date`.
    """
    try:
        return _parse_datetime(text)
    except ValueError as exc:
        if field.is_optional and not required:
            return None
        raise InvalidValueError(field, text, str(exc)) from exc


def _parse_date(text: str) -> date:
    if not _DATE.fullmatch(text):
        raise ValueError(DATE_FORMAT_HINT)
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValueError(DATE_FORMAT_HINT) from None


def _parse_datetime(text: str) -> datetime:
    match = _DATETIME.match(text)
    if match is None:
        raise ValueError(DATETIME_FORMAT_HINT)

    local_text, zone_text = match.groups()
    tz = _resolve_timezone(zone_text.strip())

    fmt = "%Y-%m-%d %H:%M:%S" if local_text.count(":") == 2 else "%Y-%m-%d %H:%M"
    try:
        local = datetime.strptime(local_text, fmt)
    except ValueError:
        raise ValueError(DATETIME_FORMAT_HINT) from None

    return local.replace(tzinfo=tz).astimezone(timezone.utc)


def _resolve_timezone(zone_text: str) -> tzinfo:
    if zone_text.upper() in ("Z", "UTC", "GMT"):
        return timezone.utc

    offset = _UTC_OFFSET.fullmatch(zone_text)
    if offset is not None:
        sign, hours, minutes = offset.groups()
        delta = timedelta(hours=int(hours), minutes=int(minutes or 0))
        if delta >= timedelta(hours=24):
            raise ValueError(_unknown_zone(zone_text))
        return timezone(-delta if sign == "-" else delta)

    try:
        return ZoneInfo(zone_text)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise ValueError(_unknown_zone(zone_text)) from None


def _unknown_zone(zone_text: str) -> str:
    return (
        f"Unrecognized time zone {zone_text}. Please provide a valid time zone "
        'name, abbreviation, or offset. For example, "America/New_York", or "EST".'
    )
