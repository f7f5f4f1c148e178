from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

import phone_verification.domain.services as domain_services
from phone_verification.domain.entities import VerificationRecord
from phone_verification.domain.errors import (
    CodeExpired,
    CodeMismatch,
    DeliveryFailed,
    NoPendingVerification,
    SmsDeliveryError,
)
from phone_verification.domain.ports.code_store import CodeStorePort
from phone_verification.domain.ports.sms_gateway import SmsGatewayPort
from phone_verification.logging import mask_phone_number

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RequestCodeResult:
    phone_number: str
    expires_at: datetime
    # only populated in diagnostics mode
    code: str | None = None


class VerificationService:
    """
    Issues one-time codes for phone numbers and confirms them.

    Per phone number: NoPendingCode -> CodeIssued -> Verified | Expired | Superseded.
    Failures are raised as VerificationError subclasses carrying an ErrorKind.

    Delivery failure does NOT invalidate the stored code: the record is
    committed before the SMS is sent, and the caller may get the code to
    the user another way or simply request a new one.
    """

    def __init__(
        self,
        *,
        code_store: CodeStorePort,
        sms_gateway: SmsGatewayPort,
        clock: Clock = utc_now,
        code_ttl_seconds: int = 600,
        code_length: int = 6,
        app_name: str = "Remore",
        diagnostics_mode: bool = False,
    ) -> None:
        self._store = code_store
        self._sms = sms_gateway
        self._clock = clock
        self._ttl = code_ttl_seconds
        self._code_length = code_length
        self._app_name = app_name
        self._diagnostics = diagnostics_mode

    async def request_code(self, phone_number: str) -> RequestCodeResult:
        phone = domain_services.normalize_phone_number(phone_number)
        now = self._clock()
        code = domain_services.generate_code(self._code_length)
        record = VerificationRecord.issue(phone, code, now, self._ttl)

        # supersedes any pending code for this phone
        await self._store.put(phone, record)
        extra = {
            "phone": mask_phone_number(phone),
            "expires_at": record.expires_at.isoformat(),
        }
        if self._diagnostics:
            extra["code"] = code
        logger.info("verification code issued", extra=extra)

        body = domain_services.format_sms_body(code, self._ttl, self._app_name)
        try:
            await self._sms.send(to=phone, body=body)
        except SmsDeliveryError as e:
            logger.warning(
                "verification code delivery failed",
                extra={"phone": mask_phone_number(phone), "reason": str(e)},
            )
            raise DeliveryFailed() from e

        return RequestCodeResult(
            phone_number=phone,
            expires_at=record.expires_at,
            code=code if self._diagnostics else None,
        )

    async def confirm(self, phone_number: str, submitted_code: str) -> None:
        phone = domain_services.normalize_phone_number(phone_number)
        submitted = (submitted_code or "").strip()
        if not submitted:
            raise CodeMismatch("verification code is required")

        now = self._clock()
        record = await self._store.get(phone)
        if record is None:
            raise NoPendingVerification()

        if record.is_expired(now):
            # conditional so a code issued in the meantime survives
            await self._store.consume(phone, record)
            logger.info(
                "verification code expired", extra={"phone": mask_phone_number(phone)}
            )
            raise CodeExpired()

        if not record.matches(submitted):
            logger.info(
                "verification code mismatch", extra={"phone": mask_phone_number(phone)}
            )
            raise CodeMismatch()

        # a concurrent confirm or a new issuance may have won the race
        if not await self._store.consume(phone, record):
            raise NoPendingVerification()

        logger.info("phone number verified", extra={"phone": mask_phone_number(phone)})
