import pytest
from fastapi.testclient import TestClient

from phone_verification.application.verification_service import VerificationService
from phone_verification.infrastructure.memory.code_store import InMemoryCodeStore
from phone_verification.main import create_app
from phone_verification.presentation.dependencies import get_verification_service
from phone_verification.settings import Settings
from tests.fakes import FakeClock, FakeSmsOK


@pytest.fixture()
def app_and_deps():
    app = create_app(Settings(_env_file=None))
    store = InMemoryCodeStore()
    sms = FakeSmsOK()
    clock = FakeClock()
    service = VerificationService(code_store=store, sms_gateway=sms, clock=clock)

    def _get_service():
        return service

    app.dependency_overrides[get_verification_service] = _get_service

    try:
        yield app, store, sms, clock
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app_and_deps):
    app, _, _, _ = app_and_deps
    return TestClient(app, raise_server_exceptions=False)


def override_service(client: TestClient, service: VerificationService) -> None:
    client.app.dependency_overrides[get_verification_service] = lambda: service
