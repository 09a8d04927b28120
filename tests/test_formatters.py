# tests/test_formatters.py

import math

import pytest

from student_records.utils.formatters import (
    FormatterService,
    UnknownFormatterError,
    format_phone_number,
    get_formatter_from_input_type,
    phone_formatter,
    resolve_formatter,
)


def test_number_formatters_use_nan_for_cleared_input():
    for formatter_type in ("number", "decimal", "integer"):
        value = FormatterService.format("", formatter_type)
        assert math.isnan(value)
        assert FormatterService.display(value, formatter_type) == ""


def test_number_formatter_parses_and_falls_back_to_zero():
    assert FormatterService.format("123.45", "number") == 123.45
    assert FormatterService.format("12abc", "number") == 12
    assert FormatterService.format("abc", "number") == 0
    assert FormatterService.display(123.45, "number") == "123.45"
    assert FormatterService.display(4.0, "number") == "4"


def test_decimal_formatter_rounds_to_two_places():
    assert FormatterService.format("3.14159", "decimal") == 3.14
    assert FormatterService.format("3.999", "decimal") == 4.0
    assert FormatterService.format("2.345", "decimal") == 2.35
    assert FormatterService.format("n/a", "decimal") == 0


def test_integer_formatter_truncates_toward_zero():
    assert FormatterService.format("2024", "integer") == 2024
    assert FormatterService.format("123.45", "integer") == 123
    assert FormatterService.format("-3.9", "integer") == -3
    assert FormatterService.format("year", "integer") == 0
    assert FormatterService.display(2024, "integer") == "2024"


def test_phone_formatter_keeps_digits_only():
    assert FormatterService.format("(555) 123-4567", "phone") == "5551234567"
    # length is validated elsewhere
    assert FormatterService.format("55-5", "phone") == "555"


@pytest.mark.parametrize(
    "digits, expected",
    [
        ("", ""),
        ("5", "5"),
        ("555", "555"),
        ("5551", "(555) 1"),
        ("555123", "(555) 123"),
        ("5551234", "(555) 123-4"),
        ("5551234567", "(555) 123-4567"),
        ("555123456789", "(555) 123-4567"),
    ],
)
def test_phone_display_is_progressive(digits, expected):
    assert phone_formatter.display(digits) == expected


@pytest.mark.parametrize("digits", ["5551234567", "0000000000", "9876543210"])
def test_phone_display_then_format_returns_original_digits(digits):
    assert phone_formatter.format(phone_formatter.display(digits)) == digits


def test_email_formatter_normalizes():
    assert FormatterService.format("  John.Doe@EXAMPLE.COM  ", "email") == "john.doe@example.com"
    assert FormatterService.display("john@example.com", "email") == "john@example.com"


def test_text_formatter_passes_through():
    assert FormatterService.format(" as typed ", "text") == " as typed "
    assert FormatterService.display(None, "text") == ""


def test_unknown_formatter_type():
    with pytest.raises(UnknownFormatterError):
        FormatterService.get_formatter("currency")


@pytest.mark.parametrize(
    "input_type, expected",
    [("email", "email"), ("tel", "phone"), ("number", "number"), ("text", "text"), ("date", "text")],
)
def test_formatter_from_input_type(input_type, expected):
    assert get_formatter_from_input_type(input_type) == expected


def test_resolve_formatter_prefers_configured_field_formatter():
    schema = {"gpa": "decimal"}

    assert resolve_formatter("gpa", "number", schema) is FormatterService.get_formatter("decimal")
    assert resolve_formatter("graduationYear", "number", schema) is FormatterService.get_formatter("number")
    assert resolve_formatter("phoneNumber", "tel") is FormatterService.get_formatter("phone")


@pytest.mark.parametrize(
    "raw",
    ["5551234567", "555-123-4567", "(555) 123-4567", "tel: 555.123.4567"],
)
def test_format_phone_number_with_ten_digits(raw):
    assert format_phone_number(raw) == "(555) 123-4567"


@pytest.mark.parametrize("raw", ["123", "555-123-45678", ""])
def test_format_phone_number_leaves_other_input_unchanged(raw):
    assert format_phone_number(raw) == raw
