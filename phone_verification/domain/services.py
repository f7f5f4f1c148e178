# phone_verification/domain/services.py
from __future__ import annotations

import base64
import hashlib
import hmac
import os
import re
import secrets

from phone_verification.domain.errors import EntropyUnavailable, InvalidPhoneNumber

# E.164: "+", country code without leading zero, at most 15 digits in total.
_E164 = re.compile(r"^\+[1-9]\d{6,14}$")
_SEPARATORS = re.compile(r"[\s\-().]")

MAX_CODE_LENGTH = 12


def generate_code(length: int = 6) -> str:
    """
    Zero-padded numeric code drawn from the OS CSPRNG.
    Never falls back to a weaker generator.
    """
    if not 0 < length <= MAX_CODE_LENGTH:
        raise ValueError(f"length must be between 1 and {MAX_CODE_LENGTH}")
    try:
        return f"{secrets.randbelow(10 ** length):0{length}d}"
    except (NotImplementedError, OSError) as e:
        raise EntropyUnavailable() from e


def _sha256_salt_plus_code(salt: bytes, code: str) -> bytes:
    h = hashlib.sha256()
    h.update(salt)
    h.update(code.encode("utf-8"))
    return h.digest()


def make_code_digest(code: str) -> tuple[str, str]:
    """
    Return (salt_b64, digest_b64) where digest = SHA256(salt || code).
    """
    try:
        salt = os.urandom(16)
    except (NotImplementedError, OSError) as e:
        raise EntropyUnavailable() from e
    digest = _sha256_salt_plus_code(salt, code)
    return (
        base64.b64encode(salt).decode("utf-8"),
        base64.b64encode(digest).decode("utf-8"),
    )


def verify_code_digest(code: str, salt_b64: str, digest_b64: str) -> bool:
    """
    Constant-time check of code against (salt_b64, digest_b64) from make_code_digest().
    """
    try:
        salt = base64.b64decode(salt_b64.encode("utf-8"), validate=True)
        expected = base64.b64decode(digest_b64.encode("utf-8"), validate=True)
    except ValueError:
        return False

    calc = _sha256_salt_plus_code(salt, code)
    return hmac.compare_digest(calc, expected)


def normalize_phone_number(raw: str | None) -> str:
    """
    Strip separators and return the E.164 form ("00" prefix becomes "+").
    Only the shape is checked, not the numbering plan.
    """
    if raw is None:
        raise InvalidPhoneNumber("phone number is required")
    phone = _SEPARATORS.sub("", raw.strip())
    if not phone:
        raise InvalidPhoneNumber("phone number is required")
    if phone.startswith("00"):
        phone = "+" + phone[2:]
    if not _E164.match(phone):
        raise InvalidPhoneNumber()
    return phone


def format_sms_body(code: str, ttl_seconds: int, app_name: str = "Remore") -> str:
    minutes = max(1, ttl_seconds // 60)
    unit = "minute" if minutes == 1 else "minutes"
    return (
        f"Your {app_name} verification code is: {code}. "
        f"This code expires in {minutes} {unit}."
    )
