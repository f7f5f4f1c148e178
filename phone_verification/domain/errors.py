from enum import Enum


class ErrorKind(str, Enum):
    INVALID_PHONE_NUMBER = "invalid_phone_number"
    DELIVERY_FAILED = "delivery_failed"
    NO_PENDING_VERIFICATION = "no_pending_verification"
    CODE_EXPIRED = "code_expired"
    CODE_MISMATCH = "code_mismatch"
    ENTROPY_UNAVAILABLE = "entropy_unavailable"


class DomainError(Exception):
    """Base class for all domain-level errors."""

    pass


class VerificationError(DomainError):
    """
    Failure of a request_code/confirm operation.

    `kind` lets callers tell "try again" from "request a new code"
    from "nothing pending" without matching on exception classes.
    """

    kind: ErrorKind
    message: str = "verification failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class InvalidPhoneNumber(VerificationError):
    """Phone number is empty or does not look like a phone number."""

    kind = ErrorKind.INVALID_PHONE_NUMBER
    message = "invalid phone number"


class DeliveryFailed(VerificationError):
    """The SMS gateway reported a failure. The issued code stays valid."""

    kind = ErrorKind.DELIVERY_FAILED
    message = "failed to deliver verification code"


class NoPendingVerification(VerificationError):
    """No code is pending for this phone number."""

    kind = ErrorKind.NO_PENDING_VERIFICATION
    message = "no pending verification for this phone number"


class CodeExpired(VerificationError):
    """The pending code outlived its TTL and has been discarded."""

    kind = ErrorKind.CODE_EXPIRED
    message = "verification code has expired"


class CodeMismatch(VerificationError):
    """Submitted code does not match. The pending code stays usable."""

    kind = ErrorKind.CODE_MISMATCH
    message = "invalid verification code"


class EntropyUnavailable(VerificationError):
    """The OS randomness source could not be read."""

    kind = ErrorKind.ENTROPY_UNAVAILABLE
    message = "secure randomness unavailable"


class SmsDeliveryError(Exception):
    """Raised by SMS gateway adapters on any delivery failure."""

    pass
