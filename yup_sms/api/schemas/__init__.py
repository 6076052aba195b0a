"""API schemas package."""

from yup_sms.api.schemas.sms import (
    ErrorResponse,
    RsvpNotificationRequest,
    RsvpNotificationResponse,
    SmsPreferenceRequest,
    SmsPreferenceResponse,
)

__all__ = [
    "ErrorResponse",
    "RsvpNotificationRequest",
    "RsvpNotificationResponse",
    "SmsPreferenceRequest",
    "SmsPreferenceResponse",
]
