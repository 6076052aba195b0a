"""Database models."""

from yup_sms.persistence.models.compliance_log import ComplianceEventType, ComplianceLog
from yup_sms.persistence.models.phone_opt_status import PhoneOptStatus
from yup_sms.persistence.models.sms_webhook_log import SmsWebhookLog

__all__ = [
    "ComplianceEventType",
    "ComplianceLog",
    "PhoneOptStatus",
    "SmsWebhookLog",
]
