"""
Turkish mobile phone numbers.

Numbers are accepted in international form without the leading zero,
e.g. ``905321234567``, optionally written with the usual separators
(``+90 (532) 123-45-67``). They are stored as the 12 bare digits.
"""

from typing import Optional

COUNTRY_CODE = "90"
MOBILE_PREFIX = COUNTRY_CODE + "5"
PHONE_DIGITS = 12

_SEPARATORS = " -.()"


def strip_phone_formatting(phone: str) -> str:
    """
    Remove separators and a leading ``+`` from a phone number.

    Anything else (letters, stray symbols) is left in place so the
    result still fails digit checks.

    Examples:
        strip_phone_formatting("+90 532 123 45 67") -> "905321234567"
        strip_phone_formatting("(90) 532-123-4567") -> "905321234567"
    """
    cleaned = phone.strip()
    if cleaned.startswith("+"):
        cleaned = cleaned[1:]
    return "".join(c for c in cleaned if c not in _SEPARATORS)


def is_turkish_mobile(phone: Optional[str]) -> bool:
    """Check that a phone number is a 12-digit Turkish mobile number."""
    if not isinstance(phone, str):
        return False

    digits = strip_phone_formatting(phone)
    return (
        len(digits) == PHONE_DIGITS
        and digits.isascii()
        and digits.isdigit()
        and digits.startswith(MOBILE_PREFIX)
    )


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a Turkish mobile number to its stored form.

    Args:
        phone: Phone number in any accepted format

    Returns:
        The 12 digits, or None if the number is not a Turkish mobile number

    Examples:
        normalize_phone("+90 532 123 45 67") -> "905321234567"
        normalize_phone("905321234567") -> "905321234567"
        normalize_phone("05321234567") -> None
    """
    if not is_turkish_mobile(phone):
        return None
    return strip_phone_formatting(phone)
