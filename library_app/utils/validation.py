from datetime import date, datetime

from library_app.errors import ValidationError


def add_error(errors: dict, field: str, message: str):
    errors.setdefault(field, []).append(message)


def check_presence(errors: dict, field: str, value):
    if value is None or (isinstance(value, str) and not value.strip()):
        add_error(errors, field, "can't be blank")
        return False
    return True


def check_length(errors: dict, field: str, value, maximum: int):
    if value is not None and len(value) > maximum:
        add_error(errors, field, f"is too long (maximum is {maximum} characters)")


def ensure_valid(record):
    """Raise ValidationError when ``record.validate()`` reports anything."""
    errors = record.validate()
    if errors:
        raise ValidationError(errors)
    return record


def parse_date(value, field: str = "date"):
    """Accept a date, an ISO ``YYYY-MM-DD`` string, or blank (None)."""
    if value is None or isinstance(value, date):
        return value
    value = str(value).strip()
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError({field: ["is not a valid date"]})


def parse_int(value, field: str, default=None):
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError({field: ["is not a number"]})
