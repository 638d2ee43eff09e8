"""Module: rut.

Chilean national identifier (RUT) helpers. Accepted shape is eight digits,
a hyphen and one check character, e.g. ``19831267-3`` or ``10000030-K``.
"""

import re

RUT_PATTERN = re.compile(r"^[0-9]{8}-[0-9K]$", re.IGNORECASE)
RUT_FORMAT_MESSAGE = "Invalid RUT format. Expected format: 12345678-9"


def validate_rut_format(rut: str) -> bool:
    return bool(RUT_PATTERN.match(rut.strip()))


def format_rut(rut: str) -> str:
    return rut.strip().upper()


def compute_check_digit(number: str) -> str:
    """Modulo-11 check character for the numeric part of a RUT."""
    total = 0
    weight = 2
    for digit in reversed(number):
        total += int(digit) * weight
        weight = 2 if weight == 7 else weight + 1

    result = 11 - (total % 11)
    if result == 11:
        return "0"
    if result == 10:
        return "K"
    return str(result)


def validate_rut_with_check_digit(rut: str) -> bool:
    if not validate_rut_format(rut):
        return False

    number, check_digit = format_rut(rut).split("-")
    return check_digit == compute_check_digit(number)


def normalize_rut(rut: str) -> str:
    """
    Validate and format a RUT in one step.

    Raises ValueError so it can back pydantic field validators.
    """
    if not validate_rut_format(rut):
        raise ValueError(RUT_FORMAT_MESSAGE)
    if not validate_rut_with_check_digit(rut):
        raise ValueError("Invalid RUT check digit")
    return format_rut(rut)
