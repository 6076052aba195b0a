"""Domain services."""

from yup_sms.domain.services.compliant_sms_sender import CompliantSmsSender
from yup_sms.domain.services.inbound_sms_service import InboundSmsService
from yup_sms.domain.services.opt_status_service import OptStatusService

__all__ = ["CompliantSmsSender", "InboundSmsService", "OptStatusService"]
