import pytest

from application.services.payment_service import PaymentProcessorService
from core.config import Settings
from domain.payment.exceptions import (
    InvalidFeePercentException,
    InvalidPrincipalException,
    NotAuthorizedException,
)
from infrastructure.bootstrap import build_marketplace
from tests.factories import ALICE, OWNER


@pytest.mark.asyncio
async def test_config_snapshot_defaults(payments, settings):
    config = await payments.get_config()

    assert config.owner == OWNER
    assert config.fee_vault_address == settings.payments.fee_vault_address
    assert config.platform_fee_percent == 2
    assert config.settlement_token == "STX"
    assert config.dispute_window_blocks == 144
    assert config.max_payments_per_class == 100


@pytest.mark.asyncio
async def test_owner_updates_addresses(payments):
    config = await payments.set_fee_vault_address(OWNER, "ST3NEWVAULT")
    assert config.fee_vault_address == "ST3NEWVAULT"

    config = await payments.set_class_registry_address(OWNER, "ST3REGISTRY.class-registry")
    assert config.class_registry_address == "ST3REGISTRY.class-registry"


@pytest.mark.asyncio
async def test_setters_are_owner_only(payments):
    with pytest.raises(NotAuthorizedException):
        await payments.set_fee_vault_address(ALICE, "ST3NEWVAULT")
    with pytest.raises(NotAuthorizedException):
        await payments.set_class_registry_address(ALICE, "ST3REGISTRY")
    with pytest.raises(NotAuthorizedException):
        await payments.set_platform_fee_percent(ALICE, 5)


@pytest.mark.asyncio
async def test_empty_principal_rejected(payments):
    with pytest.raises(InvalidPrincipalException):
        await payments.set_fee_vault_address(OWNER, "")


@pytest.mark.asyncio
@pytest.mark.parametrize("percent", [0, -1, 11])
async def test_fee_percent_range(payments, percent):
    with pytest.raises(InvalidFeePercentException):
        await payments.set_platform_fee_percent(OWNER, percent)
    assert (await payments.get_config()).platform_fee_percent == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("percent", [1, 10])
async def test_fee_percent_bounds_accepted(payments, percent):
    config = await payments.set_platform_fee_percent(OWNER, percent)
    assert config.platform_fee_percent == percent


@pytest.mark.asyncio
async def test_fee_ceiling_ignores_environment_overrides(monkeypatch):
    monkeypatch.setenv("PAYMENTS__MAX_FEE_PERCENT", "50")
    monkeypatch.setenv("PAYMENTS__MAX_PAYMENTS_PER_CLASS", "2")
    marketplace = build_marketplace(Settings())
    payments = PaymentProcessorService(marketplace.uow, marketplace.lock, marketplace.payment_processor)

    with pytest.raises(InvalidFeePercentException):
        await payments.set_platform_fee_percent(OWNER, 40)

    config = await payments.get_config()
    assert config.platform_fee_percent == 2
    assert config.dispute_window_blocks == 144
    assert config.max_payments_per_class == 100
