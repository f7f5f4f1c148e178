import pytest

from phone_verification.application.verification_service import VerificationService
from phone_verification.infrastructure.memory.code_store import InMemoryCodeStore
from tests.fakes import FakeClock, FakeSmsFailing, FakeSmsOK


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store():
    return InMemoryCodeStore()


@pytest.fixture()
def sms():
    return FakeSmsOK()


@pytest.fixture()
def sms_failing():
    return FakeSmsFailing()


@pytest.fixture()
def service(store, sms, clock):
    return VerificationService(code_store=store, sms_gateway=sms, clock=clock)


@pytest.fixture(autouse=True)
def patch_code(monkeypatch):
    """
    Make the 6-digit code deterministic in all tests.
    You can override in a specific test by re-monkeypatching.
    """
    from phone_verification.domain import services as domain_services

    monkeypatch.setattr(domain_services, "generate_code", lambda length=6: "048213")
    yield
