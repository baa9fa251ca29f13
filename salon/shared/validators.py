"""Shared validation utilities"""

import re
from typing import Optional

CLOCK_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def validate_clock_time(value: Optional[str]) -> Optional[str]:
    """
    Validate a 24-hour HH:MM clock string.

    Raises:
        ValueError: If the string is not a zero-padded 24-hour time
    """
    if value is None:
        return value
    if not CLOCK_TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    return value


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a phone number and return its digits.

    Raises:
        ValueError: If the number does not have 10 or 11 digits
    """
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)
    if not 10 <= len(digits) <= 11:
        raise ValueError("Phone number must have 10 or 11 digits")
    return digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_percentage(value: float) -> float:
    if value < 0 or value > 100:
        raise ValueError("Percentage must be between 0 and 100")
    return value


def validate_weekdays(days: list[int]) -> list[int]:
    """Weekdays are 0 (Sunday) through 6 (Saturday)"""
    for day in days:
        if day < 0 or day > 6:
            raise ValueError("Weekdays must be between 0 (Sunday) and 6 (Saturday)")
    return sorted(set(days))
