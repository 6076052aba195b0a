"""Tests for compliance-gated outbound SMS."""

import pytest

from yup_sms.domain.services import sms_templates
from yup_sms.domain.services.compliance_footer import CampaignType, ComplianceOptions
from yup_sms.domain.services.compliant_sms_sender import CompliantSmsSender
from yup_sms.domain.services.opt_status_service import OPTED_OUT_REASON, OptStatusService
from yup_sms.persistence.models.compliance_log import ComplianceEventType
from yup_sms.persistence.repositories.compliance_log_repository import ComplianceLogRepository

PHONE = "+15551234567"


@pytest.mark.asyncio
async def test_send_appends_footer_and_logs(db_session, sms_provider):
    sender = CompliantSmsSender(db_session, sms_provider)

    result = await sender.send(PHONE, "Your event starts soon", ComplianceOptions(CampaignType.REMINDER))

    assert result.success is True
    assert result.message_sid.startswith("SM")
    assert sms_provider.sent == [
        {"to": PHONE, "body": "Your event starts soon\n\nReply STOP to opt out", "from_": "+15550000000"}
    ]

    entries = await ComplianceLogRepository(db_session).list_by_phone(PHONE, ComplianceEventType.MESSAGE_SENT)
    assert len(entries) == 1
    assert entries[0].message_content == "Your event starts soon\n\nReply STOP to opt out"
    assert entries[0].campaign_type == "reminder"
    assert entries[0].message_sid == result.message_sid


@pytest.mark.asyncio
async def test_opted_out_number_is_never_sent(db_session, sms_provider):
    await OptStatusService(db_session).opt_out(PHONE)
    sender = CompliantSmsSender(db_session, sms_provider)

    result = await sender.send(PHONE, "Hello", ComplianceOptions(CampaignType.NOTIFICATION))

    assert result.success is False
    assert result.error == OPTED_OUT_REASON
    assert sms_provider.sent == []

    log_repo = ComplianceLogRepository(db_session)
    assert await log_repo.list_by_phone(PHONE, ComplianceEventType.MESSAGE_SENT) == []
    assert await log_repo.list_by_phone(PHONE, ComplianceEventType.MESSAGE_FAILED) == []


@pytest.mark.asyncio
async def test_gateway_failure_logs_message_failed(db_session, failing_sms_provider):
    sender = CompliantSmsSender(db_session, failing_sms_provider)

    result = await sender.send(PHONE, "Hello", ComplianceOptions(CampaignType.NOTIFICATION))

    assert result.success is False
    assert "gateway unavailable" in result.error

    entries = await ComplianceLogRepository(db_session).list_by_phone(PHONE)
    assert [e.event_type for e in entries] == [ComplianceEventType.MESSAGE_FAILED.value]
    assert entries[0].message_content == "Hello"
    assert entries[0].message_sid is None


@pytest.mark.asyncio
async def test_missing_provider_is_a_failed_send(db_session):
    sender = CompliantSmsSender(db_session, None)

    result = await sender.send(PHONE, "Hello", ComplianceOptions(CampaignType.NOTIFICATION))

    assert result.success is False
    entries = await ComplianceLogRepository(db_session).list_by_phone(PHONE)
    assert [e.event_type for e in entries] == ["message_failed"]


@pytest.mark.asyncio
async def test_send_template_uses_campaign_options(db_session, sms_provider):
    sender = CompliantSmsSender(db_session, sms_provider)

    result = await sender.send_template(PHONE, sms_templates.verification("424242"))

    assert result.success is True
    body = sms_provider.sent[0]["body"]
    assert body.startswith("Your YUP.RSVP verification code is 424242\n\nReply STOP to opt out. Terms: ")
    assert body.endswith("/terms. Msg&data rates may apply")


@pytest.mark.asyncio
async def test_network_error_logs_message_failed(db_session, unreachable_twilio_provider):
    sender = CompliantSmsSender(db_session, unreachable_twilio_provider)

    result = await sender.send(PHONE, "Hello", ComplianceOptions(CampaignType.NOTIFICATION))

    assert result.success is False
    assert "connection refused" in result.error

    entries = await ComplianceLogRepository(db_session).list_by_phone(PHONE)
    assert [e.event_type for e in entries] == [ComplianceEventType.MESSAGE_FAILED.value]
