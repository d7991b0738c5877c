"""Customer-facing SMS copy."""

from __future__ import annotations

from zawadii_api.core.settings import settings


def with_business_signature(message: str, business_name: str | None) -> str:
    """Append `` - {business}`` unless the name already appears in the text."""

    text = message.strip()
    if business_name and business_name not in text:
        return f"{text} - {business_name}"
    return text


def activity_message(customer_name: str, points: int, business_name: str | None) -> str:
    if points > 0:
        body = (
            f"Hi {customer_name}! Thanks for visiting! You have just earned {points} Zawadii points! "
            f"Redeem them now for exclusive rewards through the Zawadii app - {settings.app_download_url}."
        )
    else:
        body = (
            f"Hi {customer_name}! Thanks for visiting! "
            "We appreciate your business and look forward to serving you again."
        )
    return with_business_signature(body, business_name)


def attach_reward(message: str, reward_title: str, code: str) -> str:
    return f"{message}\n\nAttached reward: {reward_title}, reward code: {code}"
