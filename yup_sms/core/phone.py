"""Phone number utilities for consistent handling across the application."""

import re

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")


def normalize_phone_e164(phone: str) -> str:
    """Normalize a phone number to E.164 format.

    Best-effort heuristic, not a validator:
        (555) 123-4567   → +15551234567
        1-555-123-4567   → +15551234567
        +44 20 7946 0958 → +442079460958
        12345            → +12345

    Anything already starting with ``+`` is kept as-is once formatting
    characters are stripped. Callers that need a guarantee must check the
    result with :func:`is_valid_e164`.
    """
    normalized = re.sub(r"[^\d+]", "", phone or "")

    if normalized.startswith("+"):
        return normalized

    if len(normalized) == 10:
        return f"+1{normalized}"
    if len(normalized) == 11 and normalized.startswith("1"):
        return f"+{normalized}"
    return f"+{normalized}"


def is_valid_e164(phone: str) -> bool:
    """Check that a phone number is strictly E.164."""
    return bool(E164_PATTERN.match(phone or ""))


def is_us_ten_digit(phone: str) -> bool:
    """Check the ten-digit US input shape the web opt-out form requires.

    The form rejects other shapes before calling the API. The opt-out/opt-in
    endpoints themselves accept any number that normalizes to E.164.
    """
    return len(re.sub(r"\D", "", phone or "")) == 10
