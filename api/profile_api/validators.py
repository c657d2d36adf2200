"""Field-level validators for profile payloads.

All checks are pure and run before any store access.
"""

import re
from datetime import date, datetime
from typing import Any

MIN_AGE = 1
MAX_AGE = 150

PHONE_PATTERN = re.compile(r"\+?[1-9][0-9]{0,15}")
PHONE_SEPARATORS = re.compile(r"[\s\-()]")
COUNTRY_CODE_PATTERN = re.compile(r"\+[0-9]{1,4}")


def is_valid_age(value: Any) -> bool:
    """Integral number between 1 and 150 inclusive. Booleans are not ages."""
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        if not value.is_integer():
            return False
    elif not isinstance(value, int):
        return False
    return MIN_AGE <= value <= MAX_AGE


def is_valid_date_string(value: Any) -> bool:
    """
    Check that a string is a real ISO calendar date (or datetime).

    The string must also contain a ``-`` separator, so ``20200115`` is
    rejected even though ISO basic format would parse it.
    """
    if not isinstance(value, str) or "-" not in value:
        return False
    try:
        date.fromisoformat(value)
        return True
    except ValueError:
        pass
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_valid_phone_number(value: Any) -> bool:
    """Optional leading +, non-zero first digit, at most 16 digits after stripping separators."""
    if not isinstance(value, str):
        return False
    return PHONE_PATTERN.fullmatch(PHONE_SEPARATORS.sub("", value)) is not None


def is_valid_country_code(value: Any) -> bool:
    """A literal + followed by one to four digits."""
    if not isinstance(value, str):
        return False
    return COUNTRY_CODE_PATTERN.fullmatch(value) is not None
