"""Opt-out status service: the SMS compliance gate.

Every change of a phone number's subscription state goes through
:meth:`OptStatusService.opt_out` or :meth:`OptStatusService.opt_in`, whether
it was triggered by an inbound keyword or by the web self-service page.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from sqlalchemy.ext.asyncio import AsyncSession

from yup_sms.domain.services.compliance_footer import ComplianceOptions, get_compliance_footer
from yup_sms.persistence.models.compliance_log import ComplianceEventType
from yup_sms.persistence.models.phone_opt_status import PhoneOptStatus
from yup_sms.persistence.repositories.compliance_log_repository import ComplianceLogRepository
from yup_sms.persistence.repositories.phone_opt_status_repository import PhoneOptStatusRepository
from yup_sms.settings import settings

logger = logging.getLogger(__name__)

OptSource = Literal["sms", "web"]

OPTED_OUT_REASON = "User has opted out of SMS notifications"


class OptStatusConflictError(Exception):
    """Raised when a transition keeps losing compare-and-set races."""


@dataclass
class ComplianceCheckResult:
    """Whether a message may be sent, plus the footer it must carry."""

    can_send: bool
    compliance_text: str
    reason: str | None = None


@dataclass
class OptTransition:
    """Snapshot of a phone number's state after a transition."""

    phone_number: str
    opted_out: bool
    keyword: str
    previously_opted_out: bool

    @property
    def changed(self) -> bool:
        return self.opted_out != self.previously_opted_out


class OptStatusService:
    """Service for SMS opt-out state and the compliance log."""

    def __init__(
        self,
        session: AsyncSession,
        fail_open: bool | None = None,
        max_retries: int | None = None,
    ) -> None:
        """Initialize opt status service.

        Args:
            session: Database session
            fail_open: Permit sending when the status lookup fails (defaults to settings)
            max_retries: Compare-and-set attempts per transition (defaults to settings)
        """
        self.session = session
        self.opt_status_repo = PhoneOptStatusRepository(session)
        self.compliance_log_repo = ComplianceLogRepository(session)
        self.fail_open = settings.sms_opt_out_fail_open if fail_open is None else fail_open
        self.max_retries = settings.sms_transition_max_retries if max_retries is None else max_retries

    async def get_opt_status(self, phone_number: str) -> PhoneOptStatus | None:
        """Get the status record for a phone number, if one exists."""
        return await self.opt_status_repo.get_by_phone(phone_number)

    async def check_opt_out_status(self, phone_number: str) -> bool:
        """Check whether a phone number has opted out.

        Unknown numbers are subscribed. If the lookup itself fails, the
        configured fail-open/fail-closed policy decides and the fallback is
        logged at CRITICAL.

        Args:
            phone_number: E.164 phone number

        Returns:
            True if messages to this number must not be sent
        """
        try:
            record = await self.opt_status_repo.get_by_phone(phone_number)
        except Exception:
            await self._rollback()
            policy = "fail_open" if self.fail_open else "fail_closed"
            logger.critical(
                f"Opt-out status lookup failed for {phone_number}; applying {policy} policy",
                exc_info=True,
                extra={
                    "event_type": f"opt_out_check_{policy}",
                    "phone_number": phone_number,
                },
            )
            return not self.fail_open

        return bool(record is not None and record.opted_out)

    async def check_compliance(
        self,
        phone_number: str,
        options: ComplianceOptions,
    ) -> ComplianceCheckResult:
        """Decide whether a message may be sent to a phone number.

        The compliance footer is computed even for blocked sends so callers
        can log or display it.
        """
        compliance_text = get_compliance_footer(options)
        if await self.check_opt_out_status(phone_number):
            return ComplianceCheckResult(
                can_send=False,
                compliance_text=compliance_text,
                reason=OPTED_OUT_REASON,
            )
        return ComplianceCheckResult(can_send=True, compliance_text=compliance_text)

    async def record_compliance_event(
        self,
        phone_number: str,
        event_type: ComplianceEventType,
        message_content: str | None = None,
        campaign_type: str | None = None,
        message_sid: str | None = None,
    ) -> None:
        """Append a compliance log entry.

        Best-effort: a failed write is rolled back and logged, never raised,
        so it cannot abort the send or transition that triggered it.
        """
        try:
            await self.compliance_log_repo.append(
                phone_number=phone_number,
                event_type=event_type,
                message_content=message_content,
                campaign_type=campaign_type,
                message_sid=message_sid,
            )
        except Exception:
            await self._rollback()
            logger.error(
                f"Failed to write compliance log entry for {phone_number}",
                exc_info=True,
                extra={
                    "event_type": "compliance_log_write_failed",
                    "phone_number": phone_number,
                    "compliance_event": event_type.value,
                },
            )

    async def opt_out(
        self,
        phone_number: str,
        keyword: str = "STOP",
        source: OptSource = "sms",
    ) -> OptTransition:
        """Opt out a phone number.

        Args:
            phone_number: E.164 phone number
            keyword: Inbound keyword or web marker that triggered this
            source: Entry point ("sms" or "web")

        Returns:
            State snapshot after the transition
        """
        transition = await self._transition(phone_number, opted_out=True, keyword=keyword)
        await self.record_compliance_event(
            phone_number,
            ComplianceEventType.OPT_OUT,
            message_content=_describe(source, "out", keyword),
        )
        logger.info(
            f"Opt-out processed for {phone_number}",
            extra={"phone_number": phone_number, "keyword": keyword, "source": source, "changed": transition.changed},
        )
        return transition

    async def opt_in(
        self,
        phone_number: str,
        keyword: str = "START",
        source: OptSource = "sms",
    ) -> OptTransition:
        """Opt a phone number back in.

        Args:
            phone_number: E.164 phone number
            keyword: Inbound keyword or web marker that triggered this
            source: Entry point ("sms" or "web")

        Returns:
            State snapshot after the transition
        """
        transition = await self._transition(phone_number, opted_out=False, keyword=keyword)
        await self.record_compliance_event(
            phone_number,
            ComplianceEventType.OPT_IN,
            message_content=_describe(source, "in", keyword),
        )
        logger.info(
            f"Opt-in processed for {phone_number}",
            extra={"phone_number": phone_number, "keyword": keyword, "source": source, "changed": transition.changed},
        )
        return transition

    async def _transition(self, phone_number: str, opted_out: bool, keyword: str) -> OptTransition:
        now = datetime.utcnow()
        # The opposite transition's marker is cleared so only the current one is set
        if opted_out:
            values = {
                "opted_out": True,
                "opt_out_timestamp": now,
                "opt_out_keyword": keyword,
                "opt_in_timestamp": None,
                "opt_in_keyword": None,
            }
        else:
            values = {
                "opted_out": False,
                "opt_in_timestamp": now,
                "opt_in_keyword": keyword,
                "opt_out_timestamp": None,
                "opt_out_keyword": None,
            }

        for attempt in range(1, self.max_retries + 1):
            record = await self.opt_status_repo.get_by_phone(phone_number)

            if record is None:
                created = await self.opt_status_repo.insert_if_absent(phone_number, **values)
                if created is not None:
                    return OptTransition(phone_number, opted_out, keyword, previously_opted_out=False)
            else:
                previously_opted_out = bool(record.opted_out)
                if await self.opt_status_repo.compare_and_set(phone_number, record.version, **values):
                    return OptTransition(phone_number, opted_out, keyword, previously_opted_out)

            logger.warning(
                f"Concurrent opt status update for {phone_number}, retrying",
                extra={"phone_number": phone_number, "attempt": attempt},
            )

        raise OptStatusConflictError(
            f"Could not update opt status for {phone_number} after {self.max_retries} attempts"
        )

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except Exception:
            logger.warning("Session rollback failed", exc_info=True)


def _describe(source: OptSource, direction: str, keyword: str) -> str:
    if source == "web":
        return f"User opted {direction} via web interface"
    return f"User opted {direction} via SMS keyword {keyword}"
