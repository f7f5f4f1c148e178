from __future__ import annotations

import threading
from datetime import datetime, timedelta

from phone_verification.domain.entities import VerificationRecord
from phone_verification.domain.ports.code_store import CodeStorePort


class InMemoryCodeStore(CodeStorePort):
    """
    Process-local CodeStorePort for single-instance deployments and tests.

    Records are sharded over a fixed set of stripes, each a dict with its
    own lock, so different phone numbers rarely share a lock. Locks are
    plain threading locks held only around dict operations (never across
    an await), and every read or write of a shard happens under its lock.

    Like the Redis backend, a record is kept for `retention_seconds` past
    expires_at so a late confirm still reports it expired.
    """

    def __init__(self, *, stripes: int = 64, retention_seconds: int = 3600) -> None:
        if stripes <= 0:
            raise ValueError("stripes must be positive")
        if retention_seconds < 0:
            raise ValueError("retention_seconds must not be negative")
        self._shards: list[dict[str, VerificationRecord]] = [{} for _ in range(stripes)]
        self._locks = [threading.Lock() for _ in range(stripes)]
        self._retention = timedelta(seconds=retention_seconds)

    def _stripe(self, phone_number: str) -> int:
        return hash(phone_number) % len(self._shards)

    async def put(self, phone_number: str, record: VerificationRecord) -> None:
        i = self._stripe(phone_number)
        with self._locks[i]:
            self._shards[i][phone_number] = record

    async def get(self, phone_number: str) -> VerificationRecord | None:
        i = self._stripe(phone_number)
        with self._locks[i]:
            return self._shards[i].get(phone_number)

    async def delete(self, phone_number: str) -> None:
        i = self._stripe(phone_number)
        with self._locks[i]:
            self._shards[i].pop(phone_number, None)

    async def consume(self, phone_number: str, record: VerificationRecord) -> bool:
        i = self._stripe(phone_number)
        with self._locks[i]:
            shard = self._shards[i]
            if shard.get(phone_number) != record:
                return False
            del shard[phone_number]
            return True

    async def purge_expired(self, now: datetime) -> int:
        """Drop records whose retention window has passed. Returns how many were removed."""
        cutoff = now - self._retention
        removed = 0
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                stale = [p for p, r in shard.items() if r.is_expired(cutoff)]
                for phone_number in stale:
                    del shard[phone_number]
                removed += len(stale)
        return removed

    async def aclose(self) -> None:
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                shard.clear()

    def __len__(self) -> int:
        total = 0
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                total += len(shard)
        return total
