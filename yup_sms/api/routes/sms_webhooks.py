"""SMS webhook endpoints for Twilio."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from yup_sms.api.deps import get_sms_provider
from yup_sms.domain.services.inbound_sms_service import InboundSmsService
from yup_sms.infrastructure.telephony.base import SmsProviderProtocol
from yup_sms.persistence.database import get_db
from yup_sms.settings import settings

logger = logging.getLogger(__name__)

EMPTY_TWIML = '<?xml version="1.0" encoding="UTF-8"?><Response></Response>'

router = APIRouter()


def _twiml_ack() -> Response:
    return Response(content=EMPTY_TWIML, media_type="text/xml")


async def _validate_twilio_signature(
    request: Request,
    sms_provider: SmsProviderProtocol | None,
) -> bool:
    """Validate Twilio webhook signature.

    Args:
        request: FastAPI request
        sms_provider: Provider holding the auth token

    Returns:
        True if signature is valid, False otherwise
    """
    signature = request.headers.get("X-Twilio-Signature", "")
    if not signature:
        logger.warning("Missing X-Twilio-Signature header")
        return False
    if sms_provider is None:
        logger.error("Cannot validate Twilio signature without credentials")
        return False

    form_data = await request.form()
    params = {key: form_data[key] for key in form_data}
    return sms_provider.validate_webhook_signature(str(request.url), params, signature)


@router.get("/webhook")
async def sms_webhook_status() -> dict:
    """Answer GET checks of the webhook URL."""
    return {"message": "SMS webhook endpoint active"}


@router.post("/webhook")
async def inbound_sms_webhook(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    sms_provider: Annotated[SmsProviderProtocol | None, Depends(get_sms_provider)],
    Body: Annotated[str | None, Form()] = None,
    From: Annotated[str | None, Form()] = None,
    To: Annotated[str | None, Form()] = None,
    MessageSid: Annotated[str | None, Form()] = None,
) -> Response:
    """Handle inbound SMS webhook from Twilio.

    This endpoint:
    - Rejects deliveries missing Body or From (400)
    - Logs the raw message, dropping redelivered MessageSids
    - Applies STOP / START / HELP keywords and replies
    - Always returns an empty TwiML ACK, even if an internal step failed,
      so Twilio does not retry the delivery

    Args:
        request: FastAPI request
        db: Database session
        sms_provider: SMS gateway for replies
        Body: Message body
        From: Sender phone number
        To: Recipient phone number (our Twilio number)
        MessageSid: Twilio message SID

    Returns:
        TwiML response (empty for ACK)
    """
    if not Body or not From:
        logger.error("Missing required webhook data", extra={"message_sid": MessageSid})
        return JSONResponse(status_code=400, content={"error": "Missing required data"})

    if settings.twilio_validate_signatures:
        if not await _validate_twilio_signature(request, sms_provider):
            logger.warning("Invalid Twilio signature", extra={"message_sid": MessageSid})
            return JSONResponse(status_code=403, content={"error": "Invalid signature"})

    logger.info(
        "Incoming SMS webhook",
        extra={"from_number": From, "to_number": To, "message_sid": MessageSid},
    )

    try:
        service = InboundSmsService(db, sms_provider)
        result = await service.process_inbound_sms(
            from_number=From,
            message_body=Body,
            to_number=To,
            message_sid=MessageSid,
        )
        logger.info(
            "Inbound SMS processed",
            extra={
                "phone_number": result.phone_number,
                "action": result.action.value if result.action else None,
                "duplicate": result.duplicate,
                "reply_sent": result.reply_sent,
            },
        )
    except Exception as e:
        logger.error(f"Error processing inbound SMS webhook: {e}", exc_info=True)

    return _twiml_ack()
