"""Domain errors raised by services and rendered by the API layer."""

from __future__ import annotations

from typing import Any, Mapping


class LoyaltyError(Exception):
    """Base class for business-rule failures."""

    status_code = 400

    def __init__(self, detail: str, *, errors: Mapping[str, str] | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.errors = dict(errors or {})

    def as_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"detail": self.detail}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class ValidationFailed(LoyaltyError):
    status_code = 422

    def __init__(self, errors: Mapping[str, str], detail: str | None = None) -> None:
        message = detail or next(iter(errors.values()), "Invalid input")
        super().__init__(message, errors=errors)


class NotFoundError(LoyaltyError):
    status_code = 404


class DuplicateActivityError(LoyaltyError):
    status_code = 409


class RewardInUseError(LoyaltyError):
    """A reward with bought or redeemed codes cannot be deleted."""

    status_code = 409

    def __init__(self, used_codes_count: int) -> None:
        super().__init__(
            f"Cannot delete reward: {used_codes_count} code(s) have been bought or redeemed by customers."
        )
        self.used_codes_count = used_codes_count
        self.alternatives = ["deactivate_reward", "delete_unused_codes"]

    def as_payload(self) -> dict[str, Any]:
        payload = super().as_payload()
        payload["usedCodesCount"] = self.used_codes_count
        payload["alternatives"] = list(self.alternatives)
        return payload


class CodeDeletionError(LoyaltyError):
    status_code = 409


class CodeStateError(LoyaltyError):
    status_code = 409


class AdminConfirmationRequired(LoyaltyError):
    status_code = 403


class SmsConfigurationError(LoyaltyError):
    status_code = 503


class SmsDeliveryError(LoyaltyError):
    status_code = 502

    def __init__(self, detail: str, *, provider_code: int | str | None = None) -> None:
        super().__init__(detail)
        self.provider_code = provider_code


__all__ = [
    "AdminConfirmationRequired",
    "CodeDeletionError",
    "CodeStateError",
    "DuplicateActivityError",
    "LoyaltyError",
    "NotFoundError",
    "RewardInUseError",
    "SmsConfigurationError",
    "SmsDeliveryError",
    "ValidationFailed",
]
