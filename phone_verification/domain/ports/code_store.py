from __future__ import annotations

from typing import Protocol

from phone_verification.domain.entities import VerificationRecord


class CodeStorePort(Protocol):
    """
    Pending verification records keyed by normalized phone number.

    Operations on one key are linearizable; operations on different
    keys never wait on each other. Expiry is NOT enforced here.
    """

    async def put(self, phone_number: str, record: VerificationRecord) -> None:
        """Store/replace the record for phone_number (supersedes any previous one)."""

    async def get(self, phone_number: str) -> VerificationRecord | None:
        """Current record, expired or not. None if nothing is stored."""

    async def delete(self, phone_number: str) -> None:
        """Remove the record. No error if absent."""

    async def consume(self, phone_number: str, record: VerificationRecord) -> bool:
        """True if the stored record was exactly `record` (and is now deleted), else False."""

    async def aclose(self) -> None:
        """Release backend resources."""
