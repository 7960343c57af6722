"""
M-Pesa phone number helpers
"""

import re

COUNTRY_CODE = "254"

# Optional country code or trunk zero, then a 9-digit Safaricom/Airtel subscriber number
KENYAN_MOBILE_RE = re.compile(r"^(?:254|\+254|0)?([17][0-9]{8})$")


def normalize_phone(phone: str) -> str:
    """
    Convert a phone number to the 254XXXXXXXXX form the gateway expects.

    Non-digits are stripped, a leading trunk zero is replaced by the
    country code and numbers without the country code get it prepended.
    """
    digits = re.sub(r"\D", "", phone or "")
    if digits.startswith("0"):
        digits = COUNTRY_CODE + digits[1:]
    if not digits.startswith(COUNTRY_CODE):
        digits = COUNTRY_CODE + digits
    return digits


def is_valid_kenyan_mobile(phone: str) -> bool:
    return bool(KENYAN_MOBILE_RE.match((phone or "").strip()))


def format_kenyan_mobile(phone: str) -> str:
    """Return 254 + subscriber number for a phone that passed validation."""
    match = KENYAN_MOBILE_RE.match(phone.strip())
    if not match:
        raise ValueError(f"Not a Kenyan mobile number: {phone}")
    return COUNTRY_CODE + match.group(1)
