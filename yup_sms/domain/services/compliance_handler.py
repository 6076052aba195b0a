"""Compliance handler for SMS hard rules (STOP, START, HELP)."""

import enum
from dataclasses import dataclass

from yup_sms.settings import settings


class ComplianceAction(str, enum.Enum):
    """What an inbound message asks for."""

    OPT_OUT = "opt_out"
    OPT_IN = "opt_in"
    HELP = "help"
    OTHER = "other"


@dataclass
class ComplianceResult:
    """Result of keyword classification."""

    action: ComplianceAction
    keyword: str
    response_message: str


class ComplianceHandler:
    """Handler for SMS compliance keywords.

    Only a body that is exactly one keyword (after trimming, any case)
    counts; "please stop texting me" is not an opt-out.
    """

    OPT_OUT_KEYWORDS = frozenset({"STOP", "STOPALL", "UNSUBSCRIBE", "CANCEL", "END", "QUIT", "REMOVE"})
    OPT_IN_KEYWORDS = frozenset({"START", "SUBSCRIBE", "UNSTOP", "BEGIN", "CONTINUE", "RESUME"})
    HELP_KEYWORDS = frozenset({"HELP", "INFO", "SUPPORT"})

    def __init__(self, site_url: str | None = None) -> None:
        """Initialize compliance handler.

        Args:
            site_url: Public site base URL for reply links (defaults to settings)
        """
        self.site_url = (site_url or settings.site_url).rstrip("/")

    @staticmethod
    def clean_keyword(message: str) -> str:
        """Normalize a message body for keyword matching."""
        return (message or "").strip().upper()

    def classify(self, message: str) -> ComplianceAction:
        """Classify a message body by exact keyword match."""
        keyword = self.clean_keyword(message)
        if keyword in self.OPT_OUT_KEYWORDS:
            return ComplianceAction.OPT_OUT
        if keyword in self.OPT_IN_KEYWORDS:
            return ComplianceAction.OPT_IN
        if keyword in self.HELP_KEYWORDS:
            return ComplianceAction.HELP
        return ComplianceAction.OTHER

    def check_compliance(self, message: str) -> ComplianceResult:
        """Classify a message and pick the reply to send back.

        Args:
            message: Inbound message text

        Returns:
            ComplianceResult with action, matched keyword and reply text
        """
        action = self.classify(message)
        return ComplianceResult(
            action=action,
            keyword=self.clean_keyword(message),
            response_message=self.response_for(action),
        )

    def response_for(self, action: ComplianceAction) -> str:
        """Reply text for a classified message."""
        if action is ComplianceAction.OPT_OUT:
            return self.opt_out_confirmation()
        if action is ComplianceAction.OPT_IN:
            return self.opt_in_confirmation()
        if action is ComplianceAction.HELP:
            return self.help_message()
        return self.generic_reply()

    def opt_out_confirmation(self) -> str:
        return (
            "You have been unsubscribed from YUP.RSVP SMS messages. "
            "You will no longer receive event notifications. "
            f"Reply START to resubscribe. For help, visit {self.site_url}/support"
        )

    def opt_in_confirmation(self) -> str:
        return (
            "Welcome back to YUP.RSVP! You will now receive event notifications "
            "and account updates. Reply STOP to unsubscribe. Msg&data rates may apply. "
            f"Terms: {self.site_url}/terms"
        )

    def help_message(self) -> str:
        return (
            "YUP.RSVP SMS Help:\n"
            "• Reply STOP to unsubscribe\n"
            "• Reply START to resubscribe\n"
            "• Msg&data rates may apply\n"
            f"• Support: {self.site_url}/support\n"
            f"• Terms: {self.site_url}/terms"
        )

    def generic_reply(self) -> str:
        return (
            "Thanks for your message! For help, reply HELP. "
            f"To unsubscribe, reply STOP. Support: {self.site_url}/support"
        )
