"""Pytest bootstrap configuration.

Every test gets a freshly built marketplace (store, clock, settlement ledger),
so no state leaks between cases.
"""
import pytest
from fastapi.testclient import TestClient

from application.services.attendance_service import AttendanceService
from application.services.chain_service import ChainService
from application.services.class_registry_service import ClassRegistryService
from application.services.payment_service import PaymentProcessorService
from core.config import PaymentSettings, Settings
from infrastructure.bootstrap import build_marketplace
from tests.factories import VAULT


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DEBUG=True,
        ENVIRONMENT="test",
        payments=PaymentSettings(fee_vault_address=VAULT),
    )


@pytest.fixture
def marketplace(settings):
    return build_marketplace(settings)


@pytest.fixture
def payments(marketplace) -> PaymentProcessorService:
    return PaymentProcessorService(marketplace.uow, marketplace.lock, marketplace.payment_processor)


@pytest.fixture
def classes(marketplace) -> ClassRegistryService:
    return ClassRegistryService(marketplace.uow, marketplace.lock, marketplace.class_registry)


@pytest.fixture
def attendance(marketplace) -> AttendanceService:
    return AttendanceService(marketplace.uow, marketplace.lock, marketplace.attendance_tracker)


@pytest.fixture
def chain(marketplace) -> ChainService:
    return ChainService(marketplace.clock, marketplace.ledger, marketplace.lock)


@pytest.fixture
def client(settings, marketplace):
    from main import create_app

    app = create_app(settings, marketplace)
    with TestClient(app) as test_client:
        yield test_client
