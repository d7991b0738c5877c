from decimal import Decimal

import pytest

from zawadii_api.core.errors import ValidationFailed
from zawadii_api.services.validation import (
    is_valid_email,
    is_valid_phone,
    is_valid_whatsapp,
    normalize_phone,
    parse_amount,
    password_strength,
    validate_activity_form,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0712345678", "+255712345678"),
        ("712345678", "+255712345678"),
        ("255712345678", "+255712345678"),
        ("+255 712 345 678", "+255712345678"),
        ("", ""),
    ],
)
def test_normalize_phone_accepts_local_and_international_spellings(raw, expected) -> None:
    assert normalize_phone(raw) == expected


def test_phone_must_be_tanzanian_mobile() -> None:
    assert is_valid_phone("+255712345678")
    assert is_valid_phone("+255622334455")
    assert not is_valid_phone("+255512345678")
    assert not is_valid_phone("+25571234567")
    assert not is_valid_phone("")


def test_email_and_whatsapp_rules() -> None:
    assert is_valid_email("owner@shop.co.tz")
    assert not is_valid_email("owner@shop")
    assert is_valid_whatsapp("")
    assert is_valid_whatsapp("@mama_lishe")
    assert is_valid_whatsapp("+255 712 345 678")
    assert not is_valid_whatsapp("@ab")
    assert not is_valid_whatsapp("0712345678")


def test_password_strength_scores_rules() -> None:
    strong = password_strength("Zawadii#2024")
    assert strong.is_valid
    assert strong.strength == "strong"

    weak = password_strength("abc")
    assert not weak.is_valid
    assert weak.strength == "weak"
    assert "Password must be at least 8 characters long" in weak.errors


def test_parse_amount_rejects_garbage() -> None:
    assert parse_amount("15000") == Decimal("15000")
    assert parse_amount(" 12.50 ") == Decimal("12.50")
    assert parse_amount("abc") is None
    assert parse_amount("") is None
    assert parse_amount("NaN") is None


def test_activity_form_normalizes_valid_input() -> None:
    form = validate_activity_form("0712345678", "  Asha ", "5000", note="  ")

    assert form.phone_number == "+255712345678"
    assert form.name == "Asha"
    assert form.amount == Decimal("5000")
    assert form.note is None


def test_activity_form_reports_every_invalid_field() -> None:
    with pytest.raises(ValidationFailed) as excinfo:
        validate_activity_form("12345", "A", "-3")

    errors = excinfo.value.errors
    assert set(errors) == {"phone_number", "name", "amount"}
    assert errors["amount"] == "Please enter a valid amount greater than 0"
    assert excinfo.value.status_code == 422


def test_activity_form_caps_amount() -> None:
    with pytest.raises(ValidationFailed) as excinfo:
        validate_activity_form("0712345678", "Asha", "10000001")

    assert excinfo.value.errors["amount"] == "Amount cannot exceed 10,000,000 TSh"
