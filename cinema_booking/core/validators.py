import re

from cinema_booking.core.exceptions import ValidationFailedError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9]{10,15}$")
# spaces, hyphens and parentheses are allowed as visual separators
PHONE_SEPARATORS = re.compile(r"[\s\-\(\)]")

REQUIRED_MESSAGE = "Name, email and phone are required"
EMAIL_MESSAGE = "Please enter a valid email address"
PHONE_MESSAGE = "Please enter a valid phone number (10-15 digits)"


def is_blank(value) -> bool:
    return value is None or not str(value).strip()


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_PATTERN.match(PHONE_SEPARATORS.sub("", phone)))


def validate_contact_info(user_name, email, phone) -> None:
    """Raise ValidationFailedError unless name, email and phone are usable."""
    if is_blank(user_name) or is_blank(email) or is_blank(phone):
        raise ValidationFailedError(REQUIRED_MESSAGE)
    if not is_valid_email(email.strip()):
        raise ValidationFailedError(EMAIL_MESSAGE)
    if not is_valid_phone(phone.strip()):
        raise ValidationFailedError(PHONE_MESSAGE)
