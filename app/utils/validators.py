"""Field-level validators shared by the schema models."""
import re

# Compile once at module import
EMAIL_PATTERN = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.[A-Za-z]{2,}$")
PHONE_PATTERN = re.compile(r"^\+?[0-9]{8,15}$")


def is_valid_email(value) -> bool:
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value.strip()))


def is_valid_phone(value) -> bool:
    return isinstance(value, str) and bool(PHONE_PATTERN.match(value.strip()))


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def to_float_safe(value):
    """Safely convert to float; return None if invalid."""
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def to_bool(value):
    """Interpret booleans and 'true'/'false' strings; return None otherwise."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v == "true":
            return True
        if v == "false":
            return False
    return None


def str_list(value):
    """Normalize a list-of-strings field; a single string becomes a one-item list."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return None
    out = []
    for item in value:
        if not isinstance(item, str):
            return None
        item = item.strip()
        if item:
            out.append(item)
    return out
