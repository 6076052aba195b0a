"""SMS opt-out status model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from yup_sms.persistence.database import Base


class PhoneOptStatus(Base):
    """Current SMS subscription state for one phone number.

    Rows are created on the first opt-in/opt-out transition and are never
    deleted; deleting a row would silently re-permit messaging.
    """

    __tablename__ = "phone_opt_status"

    id = Column(Integer, primary_key=True, index=True)
    phone_number = Column(String(32), nullable=False, unique=True, index=True)  # E.164

    opted_out = Column(Boolean, default=False, nullable=False)

    # Opt-in/out tracking
    opt_out_timestamp = Column(DateTime, nullable=True)
    opt_out_keyword = Column(String(50), nullable=True)  # "STOP", "WEB_OPTOUT", etc.
    opt_in_timestamp = Column(DateTime, nullable=True)
    opt_in_keyword = Column(String(50), nullable=True)  # "START", "WEB_OPTIN", etc.

    # Compare-and-set token, bumped on every transition
    version = Column(Integer, default=1, nullable=False)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<PhoneOptStatus(id={self.id}, phone={self.phone_number}, opted_out={self.opted_out}, version={self.version})>"
