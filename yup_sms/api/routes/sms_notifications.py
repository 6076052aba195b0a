"""Outbound SMS notification endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from yup_sms.api.deps import get_sms_provider
from yup_sms.api.schemas.sms import RsvpNotificationRequest, RsvpNotificationResponse
from yup_sms.core.phone import normalize_phone_e164
from yup_sms.domain.services import sms_templates
from yup_sms.domain.services.compliant_sms_sender import CompliantSmsSender
from yup_sms.infrastructure.telephony.base import SmsProviderProtocol
from yup_sms.persistence.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


def _respond(status_code: int, body: RsvpNotificationResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@router.post("/rsvp-notification")
async def send_rsvp_notification(
    payload: RsvpNotificationRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    sms_provider: Annotated[SmsProviderProtocol | None, Depends(get_sms_provider)],
) -> JSONResponse:
    """Text a host that a guest responded to their event.

    Example body::

        {"hostPhoneNumber": "+15551234567", "guestName": "John Doe",
         "eventName": "Birthday Party", "responseType": "yup", "guestCount": 2}
    """
    if not (payload.host_phone_number and payload.guest_name and payload.event_name and payload.response_type):
        return _respond(400, RsvpNotificationResponse(
            success=False,
            error="Missing required fields: hostPhoneNumber, guestName, eventName, responseType",
        ))
    if payload.response_type not in sms_templates.RESPONSE_LABELS:
        return _respond(400, RsvpNotificationResponse(
            success=False,
            error="Invalid responseType: must be one of yup, nope, maybe",
        ))
    if payload.guest_count < 1:
        return _respond(400, RsvpNotificationResponse(
            success=False,
            error="Invalid guestCount: must be at least 1",
        ))

    template = sms_templates.rsvp_notification(
        payload.guest_name,
        payload.event_name,
        payload.response_type,
        payload.guest_count,
    )
    sender = CompliantSmsSender(db, sms_provider)
    result = await sender.send_template(normalize_phone_e164(payload.host_phone_number), template)

    if not result.success:
        logger.warning(f"RSVP notification not sent: {result.error}")
        return _respond(500, RsvpNotificationResponse(
            success=False,
            error=result.error or "Failed to send RSVP notification",
        ))

    return _respond(200, RsvpNotificationResponse(
        success=True,
        message_sid=result.message_sid,
        message="RSVP notification sent successfully",
    ))
