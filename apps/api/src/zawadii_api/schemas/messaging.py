from uuid import UUID

from pydantic import Field

from zawadii_api.schemas.base import ApiModel


class CustomerMessageRequest(ApiModel):
    phone_number: str
    message: str
    reward_id: UUID | None = None


class BulkMessageRequest(ApiModel):
    phone_numbers: list[str] = Field(default_factory=list)
    message: str


class SmsRecipientPayload(ApiModel):
    phone: str


class RawSmsRequest(ApiModel):
    recipients: list[SmsRecipientPayload] = Field(default_factory=list)
    message: str = ""


class SmsDispatchResponse(ApiModel):
    success: bool = True
    request_id: str | None
    sent_count: int
    failed_count: int
    message: str = "SMS sent successfully"


class MessageDispatchResponse(ApiModel):
    phone_numbers: list[str]
    message: str
    reward_code: str | None
    customer_reward_id: UUID | None
    delivery: SmsDispatchResponse


class AttachableRewardResponse(ApiModel):
    reward_id: UUID
    title: str
    code_id: UUID
    code: str


class RewardEligibilityResponse(ApiModel):
    phone_number: str
    eligible: bool
