"""SMS messaging exports."""

from .gateway import (  # noqa: F401
    BeemSmsGateway,
    InMemorySmsGateway,
    SentSms,
    SmsDispatchResult,
    SmsGateway,
    build_sms_gateway,
)
from .service import AttachableReward, MessageDispatch, MessagingService  # noqa: F401
from .templates import activity_message, attach_reward, with_business_signature  # noqa: F401
