"""
Input checks for booking payloads and event filters.

Each check is a pure function; ``validate_booking_input`` returns the first
rejection message or ``None`` when the payload is acceptable.
"""

import re
from typing import Any, Mapping, Optional

EMAIL_PATTERN = re.compile(r'\S+@\S+\.\S+')
DATE_PATTERN = re.compile(r'\d{4}-\d{2}-\d{2}')

INVALID_NAME = 'Invalid participant name'
INVALID_EMAIL = 'Invalid email address'
INVALID_EVENT = 'Invalid event name'


def is_non_blank(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ''


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None


def is_valid_date(value: Any) -> bool:
    return isinstance(value, str) and DATE_PATTERN.fullmatch(value) is not None


def validate_booking_input(payload: Any) -> Optional[str]:
    if not isinstance(payload, Mapping):
        payload = {}
    if not is_non_blank(payload.get('name')):
        return INVALID_NAME
    if not is_valid_email(payload.get('email')):
        return INVALID_EMAIL
    if not is_non_blank(payload.get('event')):
        return INVALID_EVENT
    return None
