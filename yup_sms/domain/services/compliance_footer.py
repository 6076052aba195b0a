"""Regulatory footer text appended to outbound SMS."""

import enum
from dataclasses import dataclass
from urllib.parse import quote

from yup_sms.settings import settings

DEFAULT_OPT_OUT_TEXT = "Reply STOP to opt out"
DATA_RATES_TEXT = "Msg&data rates may apply"


class CampaignType(str, enum.Enum):
    """Outbound SMS campaign categories."""

    VERIFICATION = "verification"
    NOTIFICATION = "notification"
    INVITATION = "invitation"
    REMINDER = "reminder"

    @property
    def requires_full_disclosure(self) -> bool:
        """First-contact campaigns carry the terms link and rates notice."""
        return self in (CampaignType.VERIFICATION, CampaignType.INVITATION)


@dataclass(frozen=True)
class ComplianceOptions:
    """Footer options for one outbound message."""

    campaign_type: CampaignType
    include_opt_out: bool = True
    include_terms_url: bool = True
    custom_opt_out_text: str | None = None


def get_compliance_footer(options: ComplianceOptions, site_url: str | None = None) -> str:
    """Build the compliance footer for a campaign.

    Args:
        options: Footer options
        site_url: Public site base URL (defaults to settings)

    Returns:
        Footer text, possibly empty
    """
    base_url = (site_url or settings.site_url).rstrip("/")
    footer = ""

    if options.include_opt_out:
        footer += f"\n\n{options.custom_opt_out_text or DEFAULT_OPT_OUT_TEXT}"

    if options.include_terms_url and options.campaign_type.requires_full_disclosure:
        footer += f". Terms: {base_url}/terms"

    if options.campaign_type.requires_full_disclosure:
        footer += f". {DATA_RATES_TEXT}"

    return footer


def format_message_with_compliance(
    message: str,
    options: ComplianceOptions,
    site_url: str | None = None,
) -> str:
    """Append the compliance footer to a message body."""
    return message + get_compliance_footer(options, site_url)


def create_opt_out_link(phone_number: str, site_url: str | None = None) -> str:
    """Build the web opt-out page link, pre-filled with the phone number."""
    base_url = (site_url or settings.site_url).rstrip("/")
    return f"{base_url}/sms/opt-out?phone={quote(phone_number, safe='')}"
