"""Pytest configuration and fixtures."""

from unittest.mock import patch

import pytest
import requests
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from yup_sms.api.deps import get_sms_provider
from yup_sms.infrastructure.telephony.base import SmsGatewayError, SmsProviderProtocol, SmsResult
from yup_sms.infrastructure.telephony.twilio_provider import TwilioSmsProvider
from yup_sms.persistence.database import Base, get_db
from yup_sms.persistence.models import *  # noqa: F401, F403


class FakeSmsProvider(SmsProviderProtocol):
    """In-memory SMS gateway that records every send."""

    def __init__(self, fail: bool = False, from_number: str = "+15550000000"):
        self.fail = fail
        self.from_number = from_number
        self.sent: list[dict] = []

    async def send_sms(self, to: str, body: str, from_: str | None = None) -> SmsResult:
        if self.fail:
            raise SmsGatewayError("Twilio SMS send failed: gateway unavailable")
        self.sent.append({"to": to, "body": body, "from_": from_ or self.from_number})
        sid = f"SM{len(self.sent):032d}"
        return SmsResult(
            message_id=sid,
            status="queued",
            to=to,
            from_=from_ or self.from_number,
            provider="fake",
        )

    def validate_webhook_signature(self, url: str, params: dict, signature: str) -> bool:
        return signature == "valid-signature"


@pytest.fixture
async def db_session():
    """Create a test database session."""
    # Use in-memory SQLite for testing; StaticPool keeps a single connection
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def sms_provider():
    """Fake SMS gateway that accepts every message."""
    return FakeSmsProvider()


@pytest.fixture
def failing_sms_provider():
    """Fake SMS gateway that rejects every message."""
    return FakeSmsProvider(fail=True)


@pytest.fixture
async def client(db_session, sms_provider):
    """Create a test HTTP client bound to the app."""
    from httpx import ASGITransport, AsyncClient
    from yup_sms.main import app

    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_sms_provider] = lambda: sms_provider

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def unreachable_twilio_provider():
    """Real Twilio provider whose HTTP transport cannot connect."""
    with patch("yup_sms.infrastructure.telephony.twilio_provider.TwilioClient"):
        provider = TwilioSmsProvider(
            account_sid="AC123",
            auth_token="token",
            from_number="+15550000000",
        )
    provider.client.messages.create.side_effect = requests.exceptions.ConnectionError("connection refused")
    return provider
