"""SMS API request/response schemas."""

from pydantic import BaseModel, ConfigDict, Field


class SmsPreferenceRequest(BaseModel):
    """Self-service opt-out / opt-in request."""

    model_config = ConfigDict(populate_by_name=True)

    phone_number: str | None = Field(None, alias="phoneNumber")


class SmsPreferenceResponse(BaseModel):
    """Self-service opt-out / opt-in success response."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error body returned by the SMS endpoints."""

    error: str


class RsvpNotificationRequest(BaseModel):
    """Host notification about a guest's RSVP."""

    model_config = ConfigDict(populate_by_name=True)

    host_phone_number: str | None = Field(None, alias="hostPhoneNumber")
    guest_name: str | None = Field(None, alias="guestName")
    event_name: str | None = Field(None, alias="eventName")
    response_type: str | None = Field(None, alias="responseType")
    guest_count: int = Field(1, alias="guestCount")


class RsvpNotificationResponse(BaseModel):
    """RSVP notification result."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message_sid: str | None = Field(None, serialization_alias="messageSid")
    message: str | None = None
    error: str | None = None
