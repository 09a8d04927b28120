"""Field validators and the validation rule composer.

Predicates are pure ``value -> bool`` checks. A ``ValidationRule`` pairs a
predicate with the message reported when it fails, and a schema maps field
names to ordered lists of rules::

    schema = {
        "name": [required(), min_length(2)],
        "email": [required(), email()],
    }
    errors = validate_form(form_data, schema)
"""

import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from student_records.models.base import utcnow
from student_records.schemas.common import FieldError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_CHARACTERS_PATTERN = re.compile(r"^[\d\s\-()]+$")
NON_DIGITS = re.compile(r"\D")

GPA_MIN = 0.0
GPA_MAX = 4.0
GRADUATION_YEAR_WINDOW = 10
LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


def get_current_year() -> int:
    """Current UTC calendar year, read from the clock on every call."""
    return utcnow().year


def to_number(value: Any) -> float | None:
    """Coerce an int, float or numeric string to float. Anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    if isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return None if math.isnan(number) else number
    return None


# ==========================================
# Predicates
# ==========================================

def is_required(value: Any) -> bool:
    if isinstance(value, str):
        return len(value.strip()) > 0
    if isinstance(value, float):
        return not math.isnan(value)
    return value is not None and value != ""


def is_valid_email(email: Any) -> bool:
    if not isinstance(email, str):
        return False
    return EMAIL_PATTERN.match(email) is not None


def is_valid_phone_number(phone: Any) -> bool:
    """Accepts formats like 123-456-7890, (123) 456-7890, 1234567890."""
    if not isinstance(phone, str):
        return False
    digits = NON_DIGITS.sub("", phone)
    return PHONE_CHARACTERS_PATTERN.match(phone) is not None and len(digits) == 10


def is_valid_gpa(gpa: Any) -> bool:
    number = to_number(gpa)
    return number is not None and GPA_MIN <= number <= GPA_MAX


def is_valid_graduation_year(year: Any, reference_year: int | None = None) -> bool:
    number = to_number(year)
    if number is None or not number.is_integer():
        return False
    current_year = reference_year if reference_year is not None else get_current_year()
    return current_year - GRADUATION_YEAR_WINDOW <= number <= current_year + GRADUATION_YEAR_WINDOW


def has_min_length(minimum: int) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        return isinstance(value, str) and len(value) >= minimum

    return predicate


def has_max_length(maximum: int) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        return isinstance(value, str) and len(value) <= maximum

    return predicate


def is_number_in_range(minimum: float, maximum: float) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        number = to_number(value)
        return number is not None and minimum <= number <= maximum

    return predicate


def matches_pattern(regex: re.Pattern | str) -> Callable[[Any], bool]:
    compiled = re.compile(regex) if isinstance(regex, str) else regex

    def predicate(value: Any) -> bool:
        return isinstance(value, str) and compiled.search(value) is not None

    return predicate


# ==========================================
# Rules
# ==========================================

RecordPredicate = Callable[[Any, Mapping[str, Any] | None], bool]


@dataclass(frozen=True)
class ValidationRule:
    """A predicate plus the message reported when it fails.

    ``validate`` receives the field value and the whole record, so rules
    can compare a field against its siblings.
    """

    validate: RecordPredicate
    message: str


Schema = Mapping[str, Sequence[ValidationRule]]


def _value_only(predicate: Callable[[Any], bool]) -> RecordPredicate:
    return lambda value, record=None: predicate(value)


def required(message: str = "This field is required") -> ValidationRule:
    return ValidationRule(_value_only(is_required), message)


def email(message: str = "Please enter a valid email address") -> ValidationRule:
    return ValidationRule(_value_only(is_valid_email), message)


def phone_number(message: str = "Please enter a valid 10-digit phone number") -> ValidationRule:
    return ValidationRule(_value_only(is_valid_phone_number), message)


def gpa(message: str = "GPA must be between 0.0 and 4.0") -> ValidationRule:
    return ValidationRule(_value_only(is_valid_gpa), message)


def graduation_year(message: str = "Please enter a valid graduation year") -> ValidationRule:
    return ValidationRule(_value_only(is_valid_graduation_year), message)


def min_length(minimum: int, message: str | None = None) -> ValidationRule:
    return ValidationRule(
        _value_only(has_min_length(minimum)),
        message or f"Must be at least {minimum} characters long",
    )


def max_length(maximum: int, message: str | None = None) -> ValidationRule:
    return ValidationRule(
        _value_only(has_max_length(maximum)),
        message or f"Must be no more than {maximum} characters long",
    )


def number_range(minimum: float, maximum: float, message: str | None = None) -> ValidationRule:
    return ValidationRule(
        _value_only(is_number_in_range(minimum, maximum)),
        message or f"Must be between {minimum} and {maximum}",
    )


def pattern(regex: re.Pattern | str, message: str) -> ValidationRule:
    return ValidationRule(_value_only(matches_pattern(regex)), message)


def custom(validate: RecordPredicate, message: str) -> ValidationRule:
    return ValidationRule(validate, message)


def validate_field(
    value: Any,
    rules: Sequence[ValidationRule],
    record: Mapping[str, Any] | None = None,
) -> list[str]:
    """Run every rule and collect the messages of those that fail, in order."""
    return [rule.message for rule in rules if not rule.validate(value, record)]


def validate_form(record: Mapping[str, Any], schema: Schema) -> list[FieldError]:
    """Validate each field named in the schema and flatten the failures."""
    errors: list[FieldError] = []
    for field_name, rules in schema.items():
        if not rules:
            continue
        for message in validate_field(record.get(field_name), rules, record):
            errors.append(FieldError(field=field_name, message=message))
    return errors


# ==========================================
# Student schema
# ==========================================

def _is_provided(value: Any) -> bool:
    return value is not None and value != ""


def _optional(predicate: Callable[[Any], bool]) -> RecordPredicate:
    return lambda value, record=None: not _is_provided(value) or predicate(value)


STUDENT_SCHEMA: dict[str, list[ValidationRule]] = {
    "name": [
        custom(
            lambda value, record=None: isinstance(value, str) and len(value.strip()) >= 2,
            "Name must be at least 2 characters long",
        ),
    ],
    "email": [
        custom(
            lambda value, record=None: is_required(value) and is_valid_email(value),
            "Please provide a valid email address",
        ),
    ],
    "phoneNumber": [
        custom(
            lambda value, record=None: is_required(value) and is_valid_phone_number(value),
            "Please provide a valid 10-digit phone number",
        ),
    ],
    "gpa": [
        # 0.0 is a real GPA, not a missing one
        custom(
            lambda value, record=None: value is not None and is_valid_gpa(value),
            "GPA must be between 0.0 and 4.0",
        ),
    ],
    "graduationYear": [
        custom(
            lambda value, record=None: bool(value) and is_valid_graduation_year(value),
            "Please provide a valid graduation year",
        ),
    ],
    "latitude": [
        custom(
            _optional(is_number_in_range(*LATITUDE_RANGE)),
            "Latitude must be between -90 and 90",
        ),
    ],
    "longitude": [
        custom(
            _optional(is_number_in_range(*LONGITUDE_RANGE)),
            "Longitude must be between -180 and 180",
        ),
    ],
}

SNAKE_TO_CAMEL = {
    "graduation_year": "graduationYear",
    "phone_number": "phoneNumber",
}


def validate_student(data: Mapping[str, Any], partial: bool = False) -> list[FieldError]:
    """Validate a raw student payload.

    Keys may be camelCase (wire format) or snake_case. With ``partial=True``
    only the fields present in ``data`` are checked, which is how updates
    are validated.
    """
    record = {SNAKE_TO_CAMEL.get(key, key): value for key, value in data.items()}
    schema: Schema = STUDENT_SCHEMA
    if partial:
        schema = {field: rules for field, rules in STUDENT_SCHEMA.items() if field in record}
    return validate_form(record, schema)
