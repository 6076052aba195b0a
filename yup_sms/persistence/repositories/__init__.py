"""Repository implementations."""

from yup_sms.persistence.repositories.base import BaseRepository
from yup_sms.persistence.repositories.compliance_log_repository import ComplianceLogRepository
from yup_sms.persistence.repositories.phone_opt_status_repository import PhoneOptStatusRepository
from yup_sms.persistence.repositories.sms_webhook_log_repository import SmsWebhookLogRepository

__all__ = [
    "BaseRepository",
    "ComplianceLogRepository",
    "PhoneOptStatusRepository",
    "SmsWebhookLogRepository",
]
