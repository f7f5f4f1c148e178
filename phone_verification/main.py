import asyncio
import logging
from contextlib import asynccontextmanager, suppress

import httpx
from fastapi import FastAPI

from phone_verification.application.verification_service import (
    VerificationService,
    utc_now,
)
from phone_verification.domain.ports.code_store import CodeStorePort
from phone_verification.domain.ports.sms_gateway import SmsGatewayPort
from phone_verification.infrastructure.memory.code_store import InMemoryCodeStore
from phone_verification.infrastructure.memory.reaper import ExpiredCodeReaper
from phone_verification.infrastructure.redis_cache.code_store import RedisCodeStore
from phone_verification.infrastructure.sms.console_sms_gateway import (
    ConsoleSmsGateway,
)
from phone_verification.infrastructure.sms.http_sms_gateway import HttpSmsGateway
from phone_verification.infrastructure.sms.twilio_sms_gateway import (
    TwilioSmsGateway,
)
from phone_verification.logging import setup_logging
from phone_verification.presentation.api import api
from phone_verification.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_code_store(settings: Settings) -> CodeStorePort:
    if settings.code_store_backend == "redis":
        return RedisCodeStore.from_url(
            settings.redis_url,
            key_prefix=settings.redis_key_prefix,
            retention_seconds=settings.expired_retention_seconds,
        )
    return InMemoryCodeStore(retention_seconds=settings.expired_retention_seconds)


def build_sms_gateway(settings: Settings, client: httpx.AsyncClient) -> SmsGatewayPort:
    if settings.sms_provider == "http":
        return HttpSmsGateway(
            settings.sms_base_url,
            client=client,
            api_token=settings.sms_api_token,
            sender=settings.sms_sender,
        )
    if settings.sms_provider == "twilio":
        return TwilioSmsGateway(
            account_sid=settings.twilio_account_sid,
            auth_token=settings.twilio_auth_token,
            sender=settings.sms_sender,
            client=client,
        )
    return ConsoleSmsGateway(reveal_body=settings.diagnostics_mode)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # startup
    http_client = httpx.AsyncClient(timeout=settings.sms_timeout_seconds)
    code_store = build_code_store(settings)
    sms_gateway = build_sms_gateway(settings, http_client)
    app.state.verification_service = VerificationService(
        code_store=code_store,
        sms_gateway=sms_gateway,
        clock=utc_now,
        code_ttl_seconds=settings.code_ttl_seconds,
        code_length=settings.code_length,
        app_name=settings.app_name,
        diagnostics_mode=settings.diagnostics_mode,
    )
    if settings.diagnostics_mode:
        logger.warning("diagnostics mode enabled: verification codes are exposed")

    reaper_task = None
    if isinstance(code_store, InMemoryCodeStore):
        reaper = ExpiredCodeReaper(
            store=code_store, clock=utc_now, interval=settings.purge_interval_seconds
        )
        reaper_task = asyncio.create_task(reaper.run_forever())

    try:
        yield
    finally:
        # shutdown
        if reaper_task is not None:
            reaper_task.cancel()
            with suppress(asyncio.CancelledError):
                await reaper_task
        await sms_gateway.aclose()  # it won't close the shared client
        await http_client.aclose()
        await code_store.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level, reveal_codes=settings.diagnostics_mode)
    app = FastAPI(title="Phone Verification API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.include_router(api)
    return app


app = create_app()
