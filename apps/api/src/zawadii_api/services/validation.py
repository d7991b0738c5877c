"""Input normalisation and validation rules for dashboard forms."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Literal

from zawadii_api.core.errors import ValidationFailed
from zawadii_api.core.settings import settings

COUNTRY_CODE = "255"

PHONE_PATTERN = re.compile(r"^\+255[67]\d{8}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
WHATSAPP_USERNAME_PATTERN = re.compile(r"^@[a-zA-Z0-9._]{3,30}$")
E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
_NON_DIGITS = re.compile(r"\D")

PHONE_FORMAT_HINT = "Please enter a valid Tanzanian phone number (+255XXXXXXXXX)"


def normalize_phone(raw: str | None) -> str:
    """Coerce local and international spellings of a Tanzanian number to ``+255XXXXXXXXX``."""

    digits = _NON_DIGITS.sub("", raw or "")
    if not digits:
        return ""
    if digits.startswith(COUNTRY_CODE):
        return f"+{digits}"
    if digits.startswith("0"):
        return f"+{COUNTRY_CODE}{digits[1:]}"
    if len(digits) >= 9:
        return f"+{COUNTRY_CODE}{digits}"
    return f"+{digits}"


def is_valid_phone(phone: str | None) -> bool:
    return bool(phone) and PHONE_PATTERN.match(phone) is not None


def is_valid_email(email: str | None) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def is_valid_whatsapp(value: str | None) -> bool:
    """Optional field: an ``@username`` or an international number."""

    if not value or not value.strip():
        return True
    candidate = value.strip()
    if WHATSAPP_USERNAME_PATTERN.match(candidate):
        return True
    return E164_PATTERN.match(candidate.replace(" ", "")) is not None


@dataclass
class PasswordStrength:
    errors: list[str] = field(default_factory=list)
    strength: Literal["weak", "medium", "strong"] = "weak"

    @property
    def is_valid(self) -> bool:
        return not self.errors


_PASSWORD_RULES: tuple[tuple[re.Pattern[str] | int, str], ...] = (
    (8, "Password must be at least 8 characters long"),
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"\d"), "Password must contain at least one number"),
    (re.compile(r"[!@#$%^&*(),.?\":{}|<>]"), "Password must contain at least one special character"),
)


def password_strength(password: str) -> PasswordStrength:
    errors: list[str] = []
    for rule, message in _PASSWORD_RULES:
        if isinstance(rule, int):
            passed = len(password) >= rule
        else:
            passed = rule.search(password) is not None
        if not passed:
            errors.append(message)

    score = len(_PASSWORD_RULES) - len(errors)
    if score >= 4:
        strength: Literal["weak", "medium", "strong"] = "strong"
    elif score >= 2:
        strength = "medium"
    else:
        strength = "weak"
    return PasswordStrength(errors=errors, strength=strength)


def parse_amount(value: object) -> Decimal | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


@dataclass
class ActivityInput:
    phone_number: str
    name: str
    amount: Decimal
    note: str | None


def validate_activity_form(phone: str | None, name: str | None, amount: object, note: str | None = None) -> ActivityInput:
    """Check every purchase field at once and report all failures together."""

    errors: dict[str, str] = {}

    normalized_phone = normalize_phone(phone)
    if not normalized_phone:
        errors["phone_number"] = "Phone number is required"
    elif not is_valid_phone(normalized_phone):
        errors["phone_number"] = PHONE_FORMAT_HINT

    clean_name = (name or "").strip()
    if not clean_name:
        errors["name"] = "Customer name is required"
    elif len(clean_name) < 2:
        errors["name"] = "Name must be at least 2 characters"

    parsed_amount = parse_amount(amount)
    limit = Decimal(str(settings.activity_amount_limit))
    if parsed_amount is None:
        errors["amount"] = "Amount is required"
    elif parsed_amount <= 0:
        errors["amount"] = "Please enter a valid amount greater than 0"
    elif parsed_amount > limit:
        errors["amount"] = f"Amount cannot exceed {limit:,.0f} TSh"

    if errors:
        raise ValidationFailed(errors)

    clean_note = (note or "").strip() or None
    return ActivityInput(phone_number=normalized_phone, name=clean_name, amount=parsed_amount, note=clean_note)
