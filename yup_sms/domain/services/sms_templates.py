"""Outbound SMS templates, each bound to its campaign type."""

from dataclasses import dataclass
from typing import Literal

from yup_sms.domain.services.compliance_footer import CampaignType, ComplianceOptions

RsvpResponseType = Literal["yup", "nope", "maybe"]

RESPONSE_LABELS: dict[str, str] = {
    "yup": "YES",
    "nope": "NO",
    "maybe": "MAYBE",
}


@dataclass(frozen=True)
class SmsTemplate:
    """A rendered message body and the compliance options it is sent with."""

    message: str
    options: ComplianceOptions


def verification(code: str) -> SmsTemplate:
    return SmsTemplate(
        message=f"Your YUP.RSVP verification code is {code}",
        options=ComplianceOptions(campaign_type=CampaignType.VERIFICATION),
    )


def event_invitation(host_name: str, event_name: str, event_date: str, rsvp_link: str) -> SmsTemplate:
    return SmsTemplate(
        message=f'{host_name} invited you to "{event_name}" on {event_date}. RSVP: {rsvp_link}',
        options=ComplianceOptions(campaign_type=CampaignType.INVITATION),
    )


def rsvp_notification(
    guest_name: str,
    event_name: str,
    response_type: RsvpResponseType,
    guest_count: int = 1,
) -> SmsTemplate:
    """Notify a host that a guest responded.

    ``guest_count`` includes the guest themself, so a count of 3 reads
    "bringing 2 guests".
    """
    response_text = RESPONSE_LABELS.get(response_type, "MAYBE")
    guest_text = ""
    if guest_count > 1:
        extra = guest_count - 1
        guest_text = f" (bringing {extra} guest{'s' if extra > 1 else ''})"
    return SmsTemplate(
        message=f'🎉 RSVP Update: {guest_name} responded {response_text} to "{event_name}"{guest_text}',
        options=ComplianceOptions(campaign_type=CampaignType.NOTIFICATION),
    )


def event_reminder(event_name: str, event_date: str, rsvp_link: str) -> SmsTemplate:
    return SmsTemplate(
        message=f'Reminder: "{event_name}" is {event_date}. Update your RSVP: {rsvp_link}',
        options=ComplianceOptions(campaign_type=CampaignType.REMINDER),
    )
