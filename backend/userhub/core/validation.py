"""Input Validation — pure checks shared by the user routes and the contact store.

Invariants:
    - Email pattern: exactly one "@", no whitespace, at least one "." in the domain part
    - Age bounds inclusive: 18 <= age <= 100
    - Blank strings (after strip) count as missing

Design Decisions:
    - Pure functions returning bool / list: callers decide which error to raise
"""

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_AGE = 18
MAX_AGE = 100


def is_valid_email(value: object) -> bool:
    """True when value is a string shaped like local@domain.tld."""
    return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


def is_valid_age(value: int) -> bool:
    return MIN_AGE <= value <= MAX_AGE


def is_blank(value: object) -> bool:
    """None, empty string and whitespace-only strings are blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def missing_fields(data: dict, required: tuple[str, ...]) -> list[str]:
    """Names of required fields that are absent or blank, in declaration order."""
    return [name for name in required if is_blank(data.get(name))]
