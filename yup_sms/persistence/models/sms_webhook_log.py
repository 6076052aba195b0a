"""Raw inbound SMS webhook log model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from yup_sms.persistence.database import Base


class SmsWebhookLog(Base):
    """Every inbound webhook delivery, stored before classification.

    ``message_sid`` is unique so gateway redeliveries are detected on insert.
    """

    __tablename__ = "sms_webhook_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    phone_number = Column(String(32), nullable=False, index=True)
    to_number = Column(String(32), nullable=True)
    message_body = Column(Text, nullable=False)  # original casing
    message_sid = Column(String(64), nullable=True, unique=True)
    webhook_type = Column(String(20), default="incoming", nullable=False)
    processed_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<SmsWebhookLog(id={self.id}, phone={self.phone_number}, sid={self.message_sid})>"
