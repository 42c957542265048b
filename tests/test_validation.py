import pytest

from validation import (
    INVALID_EMAIL,
    INVALID_EVENT,
    INVALID_NAME,
    is_valid_date,
    validate_booking_input,
)


def test_valid_payload_passes():
    assert validate_booking_input({'name': 'Asha', 'email': 'asha@x.com', 'event': 'Synergia'}) is None


@pytest.mark.parametrize(
    'payload, expected',
    [
        ({'email': 'a@x.com', 'event': 'Synergia'}, INVALID_NAME),
        ({'name': '   ', 'email': 'a@x.com', 'event': 'Synergia'}, INVALID_NAME),
        ({'name': 42, 'email': 'a@x.com', 'event': 'Synergia'}, INVALID_NAME),
        ({'name': 'Asha', 'event': 'Synergia'}, INVALID_EMAIL),
        ({'name': 'Asha', 'email': 'asha.x.com', 'event': 'Synergia'}, INVALID_EMAIL),
        ({'name': 'Asha', 'email': 'asha @x.com', 'event': 'Synergia'}, INVALID_EMAIL),
        ({'name': 'Asha', 'email': 'asha@x.com\n', 'event': 'Synergia'}, INVALID_EMAIL),
        ({'name': 'Asha', 'email': 'asha@x.com'}, INVALID_EVENT),
        ({'name': 'Asha', 'email': 'asha@x.com', 'event': ''}, INVALID_EVENT),
        ({'name': 'Asha', 'email': 'asha@x.com', 'event': ['Synergia']}, INVALID_EVENT),
    ],
)
def test_rejection_reason(payload, expected):
    assert validate_booking_input(payload) == expected


def test_first_failure_wins():
    assert validate_booking_input({'name': '', 'email': 'bad', 'event': ''}) == INVALID_NAME
    assert validate_booking_input({'name': 'Asha', 'email': 'bad', 'event': ''}) == INVALID_EMAIL


def test_non_mapping_payload_is_rejected_as_missing_name():
    assert validate_booking_input(['Asha']) == INVALID_NAME
    assert validate_booking_input(None) == INVALID_NAME


@pytest.mark.parametrize(
    'value, ok',
    [
        ('2025-10-30', True),
        ('2025-1-30', False),
        ('30-10-2025', False),
        ('2025-10-30T00:00', False),
        ('', False),
        (None, False),
    ],
)
def test_is_valid_date(value, ok):
    assert is_valid_date(value) is ok
