"""SMS gateway implementations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

import httpx
from loguru import logger

from zawadii_api.core.errors import SmsConfigurationError, SmsDeliveryError, ValidationFailed
from zawadii_api.core.settings import settings


@dataclass(slots=True)
class SmsDispatchResult:
    request_id: str | None
    sent_count: int
    failed_count: int
    provider_message: str | None = None


class SmsGateway(Protocol):
    """Protocol for bulk SMS providers."""

    async def send(self, phone_numbers: Sequence[str], message: str) -> SmsDispatchResult:
        ...


def _validate_request(phone_numbers: Sequence[str], message: str) -> list[str]:
    recipients = [phone.strip() for phone in phone_numbers if phone and phone.strip()]
    if not recipients:
        raise ValidationFailed({"recipients": "Recipients array is required and cannot be empty"})
    if not message or not message.strip():
        raise ValidationFailed({"message": "Message is required"})
    return recipients


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


class BeemSmsGateway:
    """Send SMS through the Beem Africa bulk API."""

    def __init__(
        self,
        *,
        api_key: str | None,
        secret_key: str | None,
        source_addr: str | None,
        api_url: str = "https://apisms.beem.africa/v1/send",
        timeout_seconds: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._secret_key = secret_key
        self._source_addr = source_addr
        self._api_url = api_url
        self._timeout_seconds = timeout_seconds
        self._http_client = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._secret_key and self._source_addr)

    def build_payload(self, recipients: Sequence[str], message: str) -> dict[str, Any]:
        return {
            "source_addr": self._source_addr,
            "message": message.strip(),
            "recipients": [
                {"dest_addr": phone.lstrip("+"), "recipient_id": index}
                for index, phone in enumerate(recipients, start=1)
            ],
            "encoding": 1,
            "schedule_time": "",
        }

    async def send(self, phone_numbers: Sequence[str], message: str) -> SmsDispatchResult:
        recipients = _validate_request(phone_numbers, message)
        if not self.is_configured:
            logger.error(
                "Missing Beem SMS credentials",
                has_api_key=bool(self._api_key),
                has_secret_key=bool(self._secret_key),
                has_source_addr=bool(self._source_addr),
            )
            raise SmsConfigurationError("SMS service configuration error")

        payload = self.build_payload(recipients, message)

        client = self._http_client
        close_client = False
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout_seconds)
            close_client = True

        try:
            response = await client.post(
                self._api_url,
                json=payload,
                auth=(self._api_key or "", self._secret_key or ""),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body = _safe_json(exc.response)
            logger.warning(
                "Beem SMS API returned HTTP error",
                status=exc.response.status_code,
                code=body.get("code"),
                detail=body.get("message"),
            )
            raise SmsDeliveryError(
                str(body.get("message") or "Unknown error from SMS provider"),
                provider_code=body.get("code"),
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Beem SMS request failed", error=str(exc))
            raise SmsDeliveryError("SMS provider unreachable") from exc
        finally:
            if close_client:
                await client.aclose()

        data = _safe_json(response)
        result = SmsDispatchResult(
            request_id=str(data["request_id"]) if data.get("request_id") is not None else None,
            sent_count=_as_int(data.get("valid")),
            failed_count=_as_int(data.get("invalid")) + _as_int(data.get("duplicates")),
            provider_message=data.get("message"),
        )
        logger.info(
            "Dispatched SMS",
            request_id=result.request_id,
            recipients=len(recipients),
            sent=result.sent_count,
            failed=result.failed_count,
        )
        return result


def _safe_json(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


@dataclass
class SentSms:
    phone_numbers: list[str]
    message: str


@dataclass
class InMemorySmsGateway:
    """Gateway that records outgoing messages instead of sending them."""

    sent: list[SentSms] = field(default_factory=list)
    fail_with: Exception | None = None

    async def send(self, phone_numbers: Sequence[str], message: str) -> SmsDispatchResult:
        recipients = _validate_request(phone_numbers, message)
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(SentSms(phone_numbers=list(recipients), message=message.strip()))
        return SmsDispatchResult(request_id=f"memory-{len(self.sent)}", sent_count=len(recipients), failed_count=0)


def build_sms_gateway(http_client: httpx.AsyncClient | None = None) -> BeemSmsGateway:
    return BeemSmsGateway(
        api_key=settings.beem_api_key,
        secret_key=settings.beem_secret_key,
        source_addr=settings.beem_sms_source_addr,
        api_url=settings.beem_api_url,
        timeout_seconds=settings.sms_timeout_seconds,
        http_client=http_client,
    )


__all__ = [
    "BeemSmsGateway",
    "InMemorySmsGateway",
    "SentSms",
    "SmsDispatchResult",
    "SmsGateway",
    "build_sms_gateway",
]
