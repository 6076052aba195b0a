"""SMS compliance audit log model."""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from yup_sms.persistence.database import Base


class ComplianceEventType(str, enum.Enum):
    """Kinds of compliance events."""

    OPT_IN = "opt_in"
    OPT_OUT = "opt_out"
    MESSAGE_SENT = "message_sent"
    MESSAGE_FAILED = "message_failed"


class ComplianceLog(Base):
    """Append-only audit trail of consent changes and outbound sends."""

    __tablename__ = "compliance_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    phone_number = Column(String(32), nullable=False, index=True)
    event_type = Column(String(20), nullable=False, index=True)  # ComplianceEventType value
    message_content = Column(Text, nullable=True)
    campaign_type = Column(String(20), nullable=True)  # CampaignType value
    message_sid = Column(String(64), nullable=True)  # only for sent/failed
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<ComplianceLog(id={self.id}, phone={self.phone_number}, event={self.event_type})>"
