import pytest

from application.services.class_registry_service import ClassRegistryService
from application.services.payment_service import PaymentProcessorService
from core.config import PaymentSettings, Settings
from domain.payment.events import PaymentRecorded
from domain.payment.exceptions import (
    AlreadyPaidException,
    FeeTransferFailedException,
    InstructorTransferFailedException,
    RefundTransferFailedException,
    TransferRejected,
)
from infrastructure.bootstrap import build_marketplace
from tests.factories import ALICE, INSTRUCTOR, VAULT, create_class


@pytest.fixture
def strict():
    marketplace = build_marketplace(Settings(
        payments=PaymentSettings(fee_vault_address=VAULT, strict_balances=True),
    ))
    return (
        marketplace,
        ClassRegistryService(marketplace.uow, marketplace.lock, marketplace.class_registry),
        PaymentProcessorService(marketplace.uow, marketplace.lock, marketplace.payment_processor),
    )


@pytest.mark.asyncio
async def test_ledger_rejects_overdraft_and_negative_amounts(marketplace):
    ledger = marketplace.ledger
    ledger.strict_balances = True
    ledger.fund(ALICE, 10)

    with pytest.raises(TransferRejected) as excinfo:
        await ledger.transfer(11, ALICE, INSTRUCTOR)
    assert excinfo.value.reason == "insufficient_funds"

    with pytest.raises(TransferRejected):
        await ledger.transfer(-1, ALICE, INSTRUCTOR)

    entry = await ledger.transfer(10, ALICE, INSTRUCTOR)
    assert entry.sequence == 0
    assert ledger.balance_of(ALICE) == 0
    assert ledger.balance_of(INSTRUCTOR) == 10


@pytest.mark.asyncio
async def test_instructor_transfer_failure_rolls_back_everything(strict):
    marketplace, classes, payments = strict
    class_id = await create_class(classes, price=1000)
    # enough for the fee only
    marketplace.ledger.fund(ALICE, 20)

    with pytest.raises(InstructorTransferFailedException):
        await payments.pay_for_class(ALICE, class_id, "STX")

    assert marketplace.ledger.transfers == []
    assert marketplace.ledger.balance_of(ALICE) == 20
    assert marketplace.ledger.balance_of(VAULT) == 0
    stats = await payments.get_stats()
    assert (stats.total_fees_collected, stats.total_payments_processed) == (0, 0)
    assert (await payments.get_payments_for_class(class_id)).payment_ids is None

    # the failed attempt consumed no payment id and left no duplicate marker
    marketplace.ledger.fund(ALICE, 980)
    payment = await payments.pay_for_class(ALICE, class_id, "STX")
    assert payment.id == 0
    with pytest.raises(AlreadyPaidException):
        await payments.pay_for_class(ALICE, class_id, "STX")


@pytest.mark.asyncio
async def test_fee_transfer_failure(strict):
    marketplace, classes, payments = strict
    class_id = await create_class(classes, price=1000)

    with pytest.raises(FeeTransferFailedException):
        await payments.pay_for_class(ALICE, class_id, "STX")
    assert marketplace.ledger.transfers == []


@pytest.mark.asyncio
async def test_refund_transfer_failure_keeps_payment_paid(strict):
    marketplace, classes, payments = strict
    class_id = await create_class(classes, price=1000)
    marketplace.ledger.fund(ALICE, 1000)
    payment = await payments.pay_for_class(ALICE, class_id, "STX")

    # instructor only received 980
    with pytest.raises(RefundTransferFailedException):
        await payments.refund_payment(INSTRUCTOR, payment.id, 1000)

    assert (await payments.get_payment(payment.id)).status == "paid"
    assert len(marketplace.ledger.transfers) == 2
    refunded = await payments.refund_payment(INSTRUCTOR, payment.id, 980)
    assert refunded.status == "refunded"
    assert marketplace.ledger.balance_of(ALICE) == 980


@pytest.mark.asyncio
async def test_events_of_rolled_back_operation_are_discarded(marketplace, classes):
    class_id = await create_class(classes, price=1000)
    marketplace.ledger.strict_balances = True
    marketplace.ledger.fund(ALICE, 1000)

    async with marketplace.uow() as uow:
        processor = marketplace.payment_processor(uow)
        payment = await processor.pay_for_class(ALICE, class_id, "STX")
        events = processor.clear_events()

    assert payment.id == 0
    assert len(events) == 1
    assert isinstance(events[0], PaymentRecorded)
    assert (events[0].fee, events[0].net) == (20, 980)

    with pytest.raises(AlreadyPaidException):
        async with marketplace.uow() as uow:
            processor = marketplace.payment_processor(uow)
            await processor.pay_for_class(ALICE, class_id, "STX")
    assert processor.clear_events() == []
