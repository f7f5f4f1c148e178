from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from phone_verification.infrastructure.memory.code_store import InMemoryCodeStore

logger = logging.getLogger(__name__)


class ExpiredCodeReaper:
    """
    Periodically purges expired records from an InMemoryCodeStore.
    Redis reclaims its keys on its own and needs no reaper.
    """

    def __init__(
        self,
        *,
        store: InMemoryCodeStore,
        clock: Callable[[], datetime],
        interval: float = 60.0,
    ) -> None:
        self.store = store
        self.clock = clock
        self.interval = interval

    async def run_forever(self) -> None:
        logger.info("expired code reaper started", extra={"interval": self.interval})
        while True:
            await asyncio.sleep(self.interval)
            await self._sweep_once()

    async def _sweep_once(self) -> int:
        removed = await self.store.purge_expired(self.clock())
        if removed:
            logger.info("purged expired codes", extra={"count": removed})
        return removed
