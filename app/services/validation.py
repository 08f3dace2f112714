"""Form input validation and parsing.

Each helper either returns the parsed value or raises ``ValidationError`` with
a message fit to show the user.
"""
import re
from datetime import datetime, timedelta
from typing import Optional

import pytz

from app.errors import ValidationError
from app.models.rsvp import MAX_GUEST_COUNT, RSVPStatus

MAX_TITLE_LENGTH = 255
MAX_NAME_LENGTH = 100
MAX_VENUE_NAME_LENGTH = 200
MIN_EVENT_DURATION = 1
MAX_EVENT_DURATION = 4
FORM_TIME_FORMAT = "%Y-%m-%dT%H:%M"

_RSVP_CODE_RE = re.compile(r"^[0-9A-Za-z]{1,8}$")
_INTEGER_RE = re.compile(r"-?[0-9]+")


def _parse_int(value) -> Optional[int]:
    """ASCII base-10 integer, or None. ``int()`` would also take other digit scripts and underscores."""
    text = "" if value is None else str(value).strip()
    if not _INTEGER_RE.fullmatch(text):
        return None
    return int(text)


def validate_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Event title is required.")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Event title is too long (maximum {MAX_TITLE_LENGTH} characters).")
    return title


def validate_rsvp_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required.")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Name is too long (maximum {MAX_NAME_LENGTH} characters).")
    return name


def validate_venue_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Venue name is required.")
    if len(name) > MAX_VENUE_NAME_LENGTH:
        raise ValidationError(f"Venue name is too long (maximum {MAX_VENUE_NAME_LENGTH} characters).")
    return name


def parse_duration(value: str) -> int:
    """Whole hours between MIN_EVENT_DURATION and MAX_EVENT_DURATION."""
    if not value:
        raise ValidationError("Duration is required.")
    hours = _parse_int(value) or 0
    if hours < MIN_EVENT_DURATION or hours > MAX_EVENT_DURATION:
        raise ValidationError(
            f"Duration must be between {MIN_EVENT_DURATION} and {MAX_EVENT_DURATION} hours."
        )
    return hours


def parse_start_time(value: str, tz_name: str = "UTC") -> datetime:
    """Parse an HTML ``datetime-local`` value given in ``tz_name``; return naive UTC."""
    if not value:
        raise ValidationError("Start time is required.")
    try:
        naive = datetime.strptime(value, FORM_TIME_FORMAT)
    except ValueError:
        raise ValidationError("Invalid start time format. Use YYYY-MM-DDTHH:MM.")
    local = pytz.timezone(tz_name).localize(naive)
    return local.astimezone(pytz.utc).replace(tzinfo=None)


def event_window(start_value: str, duration_value: str, tz_name: str = "UTC") -> tuple[datetime, datetime]:
    """Start and end (start + duration hours) as naive UTC."""
    hours = parse_duration(duration_value)
    start = parse_start_time(start_value, tz_name)
    return start, start + timedelta(hours=hours)


def parse_guest_count(value) -> int:
    guests = _parse_int(value)
    if guests is None:
        raise ValidationError("Invalid extra guests.")
    if guests < 0 or guests > MAX_GUEST_COUNT:
        raise ValidationError(f"Guest count must be between 0 and {MAX_GUEST_COUNT}.")
    return guests


def parse_rsvp_response(value: str) -> tuple[RSVPStatus, int]:
    """Turn a submitted response into ``(status, extra_guests)``.

    Accepted: ``Yes``, ``Yes,N`` (0 <= N <= MAX_GUEST_COUNT), ``No``, ``No,0``
    and ``Pending``; matching is case-insensitive.
    """
    raw = (value or "").strip()
    head, sep, tail = raw.partition(",")
    head = head.strip().lower()
    if head == "yes":
        return RSVPStatus.yes, parse_guest_count(tail.strip()) if sep else 0
    if head == "no" and (not sep or tail.strip() == "0"):
        return RSVPStatus.no, 0
    if head == "pending" and not sep:
        return RSVPStatus.pending, 0
    raise ValidationError("Response must be 'Yes', 'Yes,N' with N between 0 and "
                          f"{MAX_GUEST_COUNT}, 'No' or 'Pending'.")


def parse_capacity(value: str) -> int:
    """Venue capacity; anything that is not a non-negative integer becomes 0."""
    capacity = _parse_int(value)
    return max(capacity or 0, 0)


def validate_rsvp_code(code: str) -> str:
    if not code:
        raise ValidationError("RSVP identifier is missing.")
    if not _RSVP_CODE_RE.match(code):
        raise ValidationError("Invalid RSVP identifier format.")
    return code
