"""Tests for opt-out status tracking and the compliance gate."""

import logging
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from yup_sms.domain.services.compliance_footer import CampaignType, ComplianceOptions
from yup_sms.domain.services.opt_status_service import (
    OPTED_OUT_REASON,
    OptStatusConflictError,
    OptStatusService,
)
from yup_sms.persistence.models.compliance_log import ComplianceEventType
from yup_sms.persistence.repositories.compliance_log_repository import ComplianceLogRepository
from yup_sms.settings import settings

PHONE = "+15551234567"


@pytest.mark.asyncio
async def test_unknown_number_is_subscribed(db_session):
    service = OptStatusService(db_session)

    assert await service.get_opt_status(PHONE) is None
    assert await service.check_opt_out_status(PHONE) is False


@pytest.mark.asyncio
async def test_opt_out_creates_record_and_logs(db_session):
    service = OptStatusService(db_session)

    transition = await service.opt_out(PHONE, keyword="STOP", source="sms")

    assert transition.opted_out is True
    assert transition.changed is True
    assert await service.check_opt_out_status(PHONE) is True

    record = await service.get_opt_status(PHONE)
    assert record.opted_out is True
    assert record.opt_out_keyword == "STOP"
    assert record.opt_out_timestamp is not None
    assert record.opt_in_keyword is None

    entries = await ComplianceLogRepository(db_session).list_by_phone(PHONE)
    assert [e.event_type for e in entries] == [ComplianceEventType.OPT_OUT.value]
    assert entries[0].message_content == "User opted out via SMS keyword STOP"


@pytest.mark.asyncio
async def test_opt_out_is_idempotent(db_session):
    """Repeating an opt-out keeps the state and still appends a log entry."""
    service = OptStatusService(db_session)

    first = await service.opt_out(PHONE, keyword="STOP")
    second = await service.opt_out(PHONE, keyword="QUIT")

    assert first.changed is True
    assert second.changed is False
    assert await service.check_opt_out_status(PHONE) is True

    record = await service.get_opt_status(PHONE)
    assert record.opt_out_keyword == "QUIT"
    assert record.version == 2

    entries = await ComplianceLogRepository(db_session).list_by_phone(PHONE, ComplianceEventType.OPT_OUT)
    assert len(entries) == 2


@pytest.mark.asyncio
async def test_opt_out_then_opt_in_round_trip(db_session):
    service = OptStatusService(db_session)

    await service.opt_out(PHONE, keyword="STOP")
    transition = await service.opt_in(PHONE, keyword="START")

    assert transition.changed is True
    assert transition.previously_opted_out is True
    assert await service.check_opt_out_status(PHONE) is False

    record = await service.get_opt_status(PHONE)
    assert record.opted_out is False
    assert record.opt_in_keyword == "START"
    assert record.opt_in_timestamp is not None
    assert record.opt_out_keyword is None
    assert record.opt_out_timestamp is None

    entries = await ComplianceLogRepository(db_session).list_by_phone(PHONE)
    assert [e.event_type for e in entries] == ["opt_out", "opt_in"]


@pytest.mark.asyncio
async def test_web_source_log_text(db_session):
    service = OptStatusService(db_session)

    await service.opt_out(PHONE, keyword="WEB_OPTOUT", source="web")

    entries = await ComplianceLogRepository(db_session).list_by_phone(PHONE)
    assert entries[0].message_content == "User opted out via web interface"
    assert (await service.get_opt_status(PHONE)).opt_out_keyword == "WEB_OPTOUT"


@pytest.mark.asyncio
async def test_opt_in_for_unknown_number_creates_subscribed_record(db_session):
    service = OptStatusService(db_session)

    transition = await service.opt_in(PHONE, keyword="START")

    assert transition.changed is False
    record = await service.get_opt_status(PHONE)
    assert record is not None
    assert record.opted_out is False


@pytest.mark.asyncio
async def test_lookup_failure_fails_open(db_session, caplog):
    service = OptStatusService(db_session, fail_open=True)
    service.opt_status_repo.get_by_phone = AsyncMock(
        side_effect=OperationalError("SELECT", {}, Exception("database is down"))
    )

    with caplog.at_level(logging.CRITICAL):
        assert await service.check_opt_out_status(PHONE) is False

    critical = [r for r in caplog.records if r.levelno == logging.CRITICAL]
    assert critical
    assert critical[0].event_type == "opt_out_check_fail_open"


@pytest.mark.asyncio
async def test_lookup_failure_fails_closed(db_session, caplog):
    service = OptStatusService(db_session, fail_open=False)
    service.opt_status_repo.get_by_phone = AsyncMock(
        side_effect=OperationalError("SELECT", {}, Exception("database is down"))
    )

    with caplog.at_level(logging.CRITICAL):
        assert await service.check_opt_out_status(PHONE) is True

    assert any(
        getattr(r, "event_type", None) == "opt_out_check_fail_closed" for r in caplog.records
    )


@pytest.mark.asyncio
async def test_check_compliance_blocked_still_has_footer(db_session):
    service = OptStatusService(db_session)
    options = ComplianceOptions(CampaignType.NOTIFICATION)

    allowed = await service.check_compliance(PHONE, options)
    assert allowed.can_send is True
    assert allowed.reason is None
    assert allowed.compliance_text == "\n\nReply STOP to opt out"

    await service.opt_out(PHONE)

    blocked = await service.check_compliance(PHONE, options)
    assert blocked.can_send is False
    assert blocked.reason == OPTED_OUT_REASON
    assert blocked.compliance_text == "\n\nReply STOP to opt out"


@pytest.mark.asyncio
async def test_compliance_log_failure_does_not_abort_transition(db_session, caplog):
    service = OptStatusService(db_session)
    service.compliance_log_repo.append = AsyncMock(
        side_effect=OperationalError("INSERT", {}, Exception("disk full"))
    )

    with caplog.at_level(logging.ERROR):
        transition = await service.opt_out(PHONE)

    assert transition.opted_out is True
    assert await service.check_opt_out_status(PHONE) is True
    assert any(
        getattr(r, "event_type", None) == "compliance_log_write_failed" for r in caplog.records
    )


@pytest.mark.asyncio
async def test_transition_retries_on_version_conflict(db_session):
    service = OptStatusService(db_session)
    await service.opt_out(PHONE)

    real_compare_and_set = service.opt_status_repo.compare_and_set
    calls = []

    async def lose_first_race(phone_number, expected_version, **values):
        calls.append(expected_version)
        if len(calls) == 1:
            return False
        return await real_compare_and_set(phone_number, expected_version, **values)

    service.opt_status_repo.compare_and_set = lose_first_race

    transition = await service.opt_in(PHONE)

    assert len(calls) == 2
    assert transition.opted_out is False
    assert await service.check_opt_out_status(PHONE) is False


@pytest.mark.asyncio
async def test_transition_gives_up_after_max_retries(db_session):
    service = OptStatusService(db_session, max_retries=2)
    await service.opt_out(PHONE)
    service.opt_status_repo.compare_and_set = AsyncMock(return_value=False)

    with pytest.raises(OptStatusConflictError):
        await service.opt_in(PHONE)

    assert service.opt_status_repo.compare_and_set.await_count == 2
    assert await service.check_opt_out_status(PHONE) is True


@pytest.mark.asyncio
async def test_explicit_retry_limit_is_honored(db_session):
    assert OptStatusService(db_session).max_retries == settings.sms_transition_max_retries
    service = OptStatusService(db_session, max_retries=0)
    assert service.max_retries == 0

    with pytest.raises(OptStatusConflictError):
        await service.opt_out(PHONE)

    assert await service.get_opt_status(PHONE) is None
