"""Self-service SMS opt-out / opt-in endpoints used by the web page."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from yup_sms.api.schemas.sms import ErrorResponse, SmsPreferenceRequest, SmsPreferenceResponse
from yup_sms.core.phone import is_valid_e164, normalize_phone_e164
from yup_sms.domain.services.opt_status_service import OptStatusService
from yup_sms.persistence.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid phone number"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validated_phone(payload: SmsPreferenceRequest) -> str | JSONResponse:
    if not payload.phone_number:
        return _error(400, "Phone number is required")
    phone_number = normalize_phone_e164(payload.phone_number)
    if not is_valid_e164(phone_number):
        return _error(400, "Invalid phone number")
    return phone_number


@router.post("/opt-out", response_model=SmsPreferenceResponse, responses=_ERROR_RESPONSES)
async def web_opt_out(
    payload: SmsPreferenceRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Opt a phone number out of SMS from the web page."""
    phone_number = _validated_phone(payload)
    if isinstance(phone_number, JSONResponse):
        return phone_number

    logger.info(f"Processing web opt-out for {phone_number}")
    try:
        await OptStatusService(db).opt_out(phone_number, keyword="WEB_OPTOUT", source="web")
    except Exception as e:
        logger.error(f"Error in SMS opt-out API: {e}", exc_info=True)
        return _error(500, "Internal server error")

    return SmsPreferenceResponse(message="Successfully opted out of SMS messages")


@router.post("/opt-in", response_model=SmsPreferenceResponse, responses=_ERROR_RESPONSES)
async def web_opt_in(
    payload: SmsPreferenceRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Opt a phone number back in to SMS from the web page."""
    phone_number = _validated_phone(payload)
    if isinstance(phone_number, JSONResponse):
        return phone_number

    logger.info(f"Processing web opt-in for {phone_number}")
    try:
        await OptStatusService(db).opt_in(phone_number, keyword="WEB_OPTIN", source="web")
    except Exception as e:
        logger.error(f"Error in SMS opt-in API: {e}", exc_info=True)
        return _error(500, "Internal server error")

    return SmsPreferenceResponse(message="Successfully opted in to SMS messages")
