"""Form validation and phone normalisation."""

from datetime import date

import pytest

from salesboard.core.errors import ValidationError
from salesboard.services.validation import (
    MAX_CONNECTIONS,
    PHONE_PREFIX,
    format_phone_input,
    normalize_phone,
    parse_connections,
    parse_sale_date,
    validate_login,
    validate_password_change,
    validate_registration,
    validate_sale,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("+254712345678", "+254712345678"),
        ("0712345678", "+254712345678"),
        ("0112345678", "+254112345678"),
        ("712345678", "+254712345678"),
        ("254712345678", "+254712345678"),
        ("+254 712 345 678", "+254712345678"),
        ("+2547123456789", "+254712345678"),
        ("+254 7123456789", "+254712345678"),
    ],
)
def test_normalize_phone_accepts_common_forms(raw, expected):
    assert normalize_phone(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "+254812345678",
        "+25471234",
        "+1712345678",
        "0812345678",
        "abc",
        "71234",
        "7123456789",
        "07123456789",
        "1712345678",
        "0712345678999",
        "2547123456789",
        "25471234567",
    ],
)
def test_normalize_phone_rejects_other_patterns(raw):
    with pytest.raises(ValidationError) as excinfo:
        normalize_phone(raw)
    assert "phone_number" in excinfo.value.errors


@pytest.mark.parametrize("raw", ["", "   ", None, PHONE_PREFIX])
def test_normalize_phone_requires_a_value(raw):
    with pytest.raises(ValidationError) as excinfo:
        normalize_phone(raw)
    assert excinfo.value.errors == {"phone_number": "Phone number is required"}


def test_format_phone_input_keeps_prefix_and_nine_digits():
    assert format_phone_input("+2547a1b2") == "+254712"
    assert format_phone_input("+25471234567890") == "+254712345678"
    assert format_phone_input("0712") == PHONE_PREFIX


def _registration(**overrides):
    form = {
        "id_number": "12345678",
        "phone_number": "+254712345678",
        "name": "  Jane Wanjiru ",
        "password": "secret123",
        "confirm_password": "secret123",
    }
    form.update(overrides)
    return form


def test_validate_registration_returns_clean_values():
    data = validate_registration(_registration(phone_number="0712345678"))
    assert data == {
        "id_number": "12345678",
        "phone_number": "+254712345678",
        "name": "Jane Wanjiru",
        "password": "secret123",
    }


def test_validate_registration_collects_every_field_error():
    with pytest.raises(ValidationError) as excinfo:
        validate_registration(
            {
                "id_number": "12ab",
                "phone_number": "+254",
                "name": "J",
                "password": "123",
                "confirm_password": "456",
            }
        )
    errors = excinfo.value.errors
    assert errors == {
        "id_number": "ID number must be at least 8 digits",
        "phone_number": "Phone number is required",
        "name": "Name must be at least 2 characters",
        "password": "Password must be at least 6 characters",
        "confirm_password": "Passwords do not match",
    }


def test_validate_registration_id_number_must_be_digits():
    with pytest.raises(ValidationError) as excinfo:
        validate_registration(_registration(id_number="1234567X"))
    assert excinfo.value.errors == {"id_number": "ID number must contain only digits"}


def test_validate_registration_rejects_long_names():
    with pytest.raises(ValidationError) as excinfo:
        validate_registration(_registration(name="x" * 51))
    assert "name" in excinfo.value.errors


def test_validate_login_requires_password():
    with pytest.raises(ValidationError) as excinfo:
        validate_login({"phone_number": "0712345678", "password": "   "})
    assert excinfo.value.errors == {"password": "Password is required"}


def test_password_change_must_differ_from_current():
    with pytest.raises(ValidationError) as excinfo:
        validate_password_change(
            {
                "current_password": "secret123",
                "new_password": "secret123",
                "confirm_password": "secret123",
            }
        )
    assert excinfo.value.errors == {
        "new_password": "New password must be different from current password"
    }


@pytest.mark.parametrize(
    "raw, expected", [(0, 0), (7, 7), ("12", 12), (" 3 ", 3), (MAX_CONNECTIONS, MAX_CONNECTIONS)]
)
def test_parse_connections_accepts_whole_numbers(raw, expected):
    assert parse_connections(raw) == expected


@pytest.mark.parametrize(
    "raw", [-1, "-1", "1.5", "ten", True, 2.0, MAX_CONNECTIONS + 1, "99999999999999999999"]
)
def test_parse_connections_rejects_other_values(raw):
    with pytest.raises(ValidationError):
        parse_connections(raw)


def test_parse_sale_date_handles_timestamps_in_utc():
    assert parse_sale_date("2024-03-31") == date(2024, 3, 31)
    assert parse_sale_date("2024-03-31T23:30:00-02:00") == date(2024, 4, 1)
    assert parse_sale_date("2024-03-01T00:00:00Z") == date(2024, 3, 1)


def test_validate_sale_reports_missing_fields():
    with pytest.raises(ValidationError) as excinfo:
        validate_sale({"user_id": "", "connections": "", "date": "not a date"})
    assert excinfo.value.errors == {
        "user_id": "Please select a sales agent",
        "connections": "Connections are required",
        "date": "Please select a date",
    }


def test_validate_sale_defaults_date_to_today():
    data = validate_sale(
        {"user_id": "6f1c1f8e-6a43-4d3e-9f51-9f3f2f6d7a10", "connections": "4"}
    )
    assert data["connections"] == 4
    assert isinstance(data["date"], date)
