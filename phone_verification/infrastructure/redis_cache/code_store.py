from __future__ import annotations

from datetime import datetime, timedelta

from redis.asyncio import Redis

from phone_verification.domain.entities import VerificationRecord
from phone_verification.domain.ports.code_store import CodeStorePort


_FIELDS = ("salt", "digest", "issued_at", "expires_at")

_LUA_CONSUME = """
-- KEYS[1]: verification key
-- ARGV[1]: expected digest (base64)
-- ARGV[2]: expected issued_at (isoformat)
local key = KEYS[1]
local cur = redis.call('HMGET', key, 'digest', 'issued_at')
if not cur[1] then
  return 0
end
if cur[1] ~= ARGV[1] or cur[2] ~= ARGV[2] then
  return 0
end
redis.call('DEL', key)
return 1
"""


class RedisCodeStore(CodeStorePort):
    """
    One hash per phone number: {salt, digest, issued_at, expires_at}.
    The plaintext code never reaches Redis.

    The key outlives expires_at by `retention_seconds` so a late confirm
    still sees the record and reports it expired; after that Redis
    reclaims it on its own.
    """

    def __init__(
        self,
        redis: Redis,
        *,
        key_prefix: str = "pv:",
        retention_seconds: int = 3600,
        owns_client: bool = False,
    ) -> None:
        self._redis = redis
        self._prefix = key_prefix
        self._retention = timedelta(seconds=retention_seconds)
        self._owns_client = owns_client

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisCodeStore":
        # decode_responses=True -> we get/put str, not bytes.
        redis = Redis.from_url(url, encoding="utf-8", decode_responses=True)
        return cls(redis, owns_client=True, **kwargs)

    def _key(self, phone_number: str) -> str:
        return f"{self._prefix}{phone_number}"

    async def put(self, phone_number: str, record: VerificationRecord) -> None:
        key = self._key(phone_number)
        pipe = self._redis.pipeline(transaction=True)
        pipe.delete(key)
        pipe.hset(
            key,
            mapping={
                "salt": record.salt,
                "digest": record.digest,
                "issued_at": record.issued_at.isoformat(),
                "expires_at": record.expires_at.isoformat(),
            },
        )
        # epoch ms from the aware datetime; expireat(datetime) assumes local time
        reclaim_at = record.expires_at + self._retention
        pipe.pexpireat(key, int(reclaim_at.timestamp() * 1000))
        await pipe.execute()

    async def get(self, phone_number: str) -> VerificationRecord | None:
        stored = await self._redis.hgetall(self._key(phone_number))
        if not stored or not set(_FIELDS) <= stored.keys():
            return None
        return VerificationRecord(
            phone_number=phone_number,
            salt=stored["salt"],
            digest=stored["digest"],
            issued_at=datetime.fromisoformat(stored["issued_at"]),
            expires_at=datetime.fromisoformat(stored["expires_at"]),
        )

    async def delete(self, phone_number: str) -> None:
        await self._redis.delete(self._key(phone_number))

    async def consume(self, phone_number: str, record: VerificationRecord) -> bool:
        # atomic compare-and-delete
        res = await self._redis.eval(
            _LUA_CONSUME,
            1,
            self._key(phone_number),
            record.digest,
            record.issued_at.isoformat(),
        )
        return int(res) == 1

    async def aclose(self) -> None:
        if self._owns_client:
            await self._redis.aclose()
