"""Field formatters.

A formatter converts between the raw text of an input field and the typed
value held in a form: ``format(text) -> value`` and ``display(value) -> text``.
"""

import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

NON_DIGITS = re.compile(r"\D")
LEADING_FLOAT = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
LEADING_INT = re.compile(r"^\s*[+-]?\d+")

# Cleared numeric fields hold NaN so they are distinguishable from zero
EMPTY_NUMBER = math.nan


class UnknownFormatterError(KeyError):
    """No formatter is registered under the requested type."""


@dataclass(frozen=True)
class FieldFormatter:
    format: Callable[..., Any]
    display: Callable[[Any], str]


def _is_empty_number(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _parse_float(text: str) -> float | None:
    match = LEADING_FLOAT.match(text)
    return float(match.group(0)) if match else None


def _display_number(value: Any) -> str:
    if _is_empty_number(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_text(value: str, current_value: Any = None) -> str:
    return value


def _display_text(value: Any) -> str:
    return value or ""


def _format_number(value: str, current_value: Any = None) -> float:
    if value == "":
        return EMPTY_NUMBER
    parsed = _parse_float(value)
    return 0 if parsed is None else parsed


def _format_decimal(value: str, current_value: Any = None) -> float:
    if value == "":
        return EMPTY_NUMBER
    parsed = _parse_float(value)
    if parsed is None:
        return 0
    if not math.isfinite(parsed):
        return parsed
    return float(Decimal(repr(parsed)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _format_integer(value: str, current_value: Any = None) -> float | int:
    if value == "":
        return EMPTY_NUMBER
    match = LEADING_INT.match(value)
    return int(match.group(0)) if match else 0


def _display_integer(value: Any) -> str:
    if _is_empty_number(value):
        return ""
    return str(int(value))


def _format_phone(value: str, current_value: Any = None) -> str:
    return NON_DIGITS.sub("", value)


def _display_phone(value: Any) -> str:
    """Re-insert punctuation as digits accumulate, for as-you-type display."""
    if not value:
        return ""
    digits = NON_DIGITS.sub("", str(value))
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"({digits[:3]}) {digits[3:]}"
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:10]}"


def _format_email(value: str, current_value: Any = None) -> str:
    return value.lower().strip()


text_formatter = FieldFormatter(_format_text, _display_text)
number_formatter = FieldFormatter(_format_number, _display_number)
decimal_formatter = FieldFormatter(_format_decimal, _display_number)
integer_formatter = FieldFormatter(_format_integer, _display_integer)
phone_formatter = FieldFormatter(_format_phone, _display_phone)
email_formatter = FieldFormatter(_format_email, _display_text)

FORMATTERS: dict[str, FieldFormatter] = {
    "text": text_formatter,
    "number": number_formatter,
    "decimal": decimal_formatter,
    "integer": integer_formatter,
    "phone": phone_formatter,
    "email": email_formatter,
}


class FormatterService:
    """Dispatch formatting by formatter type name."""

    @staticmethod
    def get_formatter(formatter_type: str) -> FieldFormatter:
        try:
            return FORMATTERS[formatter_type]
        except KeyError:
            raise UnknownFormatterError(formatter_type) from None

    @classmethod
    def format(cls, value: str, formatter_type: str, current_value: Any = None) -> Any:
        return cls.get_formatter(formatter_type).format(value, current_value)

    @classmethod
    def display(cls, value: Any, formatter_type: str) -> str:
        return cls.get_formatter(formatter_type).display(value)


def get_formatter_from_input_type(input_type: str) -> str:
    """Default formatter type for an HTML input ``type`` attribute."""
    if input_type == "email":
        return "email"
    if input_type == "tel":
        return "phone"
    if input_type == "number":
        return "number"
    return "text"


def resolve_formatter(
    field: str,
    input_type: str,
    schema: Mapping[str, str] | None = None,
) -> FieldFormatter:
    """Formatter configured for ``field``, else the input type's default."""
    formatter_type = (schema or {}).get(field) or get_formatter_from_input_type(input_type)
    return FormatterService.get_formatter(formatter_type)


def format_phone_number(phone: str) -> str:
    """Canonical (XXX) XXX-XXXX form when the input holds exactly 10 digits.

    Anything else is returned unchanged.
    """
    digits = NON_DIGITS.sub("", phone)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return phone
