import pytest
from pydantic import ValidationError

from cinema_booking.core.exceptions import ValidationFailedError
from cinema_booking.core.validators import is_valid_email, is_valid_phone, validate_contact_info
from cinema_booking.schemas.booking import BookingUpdate


@pytest.mark.parametrize("email,expected", [
    ("jane@example.com", True),
    ("j.doe+films@mail.example.org", True),
    ("jane@example", False),
    ("jane example@example.com", False),
    ("@example.com", False),
])
def test_email_pattern(email, expected):
    assert is_valid_email(email) is expected


@pytest.mark.parametrize("phone,expected", [
    ("5551234567", True),
    ("(555) 123-4567", True),
    ("+15551234567", False),
    ("555-1234", False),
    ("1234567890123456", False),
])
def test_phone_pattern(phone, expected):
    assert is_valid_phone(phone) is expected


def test_validate_contact_info_requires_every_field():
    with pytest.raises(ValidationFailedError) as exc_info:
        validate_contact_info("  ", "jane@example.com", "5551234567")
    assert exc_info.value.status_code == 400
    assert exc_info.value.code == "validation_failed"


def test_validate_contact_info_rejects_bad_email():
    with pytest.raises(ValidationFailedError, match="email"):
        validate_contact_info("Jane", "not-an-email", "5551234567")


def test_schema_accepts_form_field_names():
    update = BookingUpdate.model_validate({"userName": " Jane ", "email": "jane@example.com", "phone": "555 123 4567"})
    assert update.user_name == "Jane"


def test_schema_rejects_blank_phone():
    with pytest.raises(ValidationError):
        BookingUpdate.model_validate({"userName": "Jane", "email": "jane@example.com", "phone": ""})
