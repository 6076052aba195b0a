"""API routes."""

from fastapi import APIRouter

from yup_sms.api.routes import sms_notifications, sms_preferences, sms_webhooks

api_router = APIRouter()

# Public routes (gateway webhook and web opt-out page)
api_router.include_router(sms_webhooks.router, prefix="/sms", tags=["sms-webhooks"])
api_router.include_router(sms_preferences.router, prefix="/sms", tags=["sms-preferences"])

# Internal notification routes
api_router.include_router(sms_notifications.router, prefix="/sms", tags=["sms-notifications"])
