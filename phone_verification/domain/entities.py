from dataclasses import dataclass
from datetime import datetime, timedelta

from phone_verification.domain.services import make_code_digest, verify_code_digest


@dataclass(frozen=True)
class VerificationRecord:
    """
    A pending code for one phone number. Only a salted SHA-256 digest of
    the code is kept; the plaintext exists just long enough to be sent.
    """

    phone_number: str
    salt: str
    digest: str
    issued_at: datetime
    expires_at: datetime

    def __post_init__(self):
        if not self.phone_number:
            raise ValueError("phone_number is required")
        if not self.salt or not self.digest:
            raise ValueError("salt and digest are required")
        if self.expires_at <= self.issued_at:
            raise ValueError("expires_at must be after issued_at")

    @classmethod
    def issue(
        cls, phone_number: str, code: str, now: datetime, ttl_seconds: int
    ) -> "VerificationRecord":
        if not code:
            raise ValueError("code is required")
        salt, digest = make_code_digest(code)
        return cls(
            phone_number=phone_number,
            salt=salt,
            digest=digest,
            issued_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )

    def matches(self, code: str) -> bool:
        return verify_code_digest(code, self.salt, self.digest)

    def is_expired(self, now: datetime) -> bool:
        # a confirmation at exactly expires_at is still in time
        return now > self.expires_at

    def __repr__(self) -> str:
        return (
            f"VerificationRecord(phone_number={self.phone_number!r}, digest='******', "
            f"issued_at={self.issued_at!r}, expires_at={self.expires_at!r})"
        )
