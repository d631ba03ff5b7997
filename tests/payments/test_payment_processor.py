import asyncio

import pytest

from domain.payment.exceptions import (
    AlreadyPaidException,
    ClassNotActiveException,
    InvalidClassException,
    InvalidCurrencyException,
    InvalidTimestampException,
    MaxPaymentsExceededException,
    PaymentNotFoundException,
)
from tests.factories import ALICE, BOB, INSTRUCTOR, OWNER, VAULT, create_class


@pytest.mark.asyncio
async def test_pay_for_class_splits_fee_and_net(payments, classes, chain):
    class_id = await create_class(classes, price=1000)

    payment = await payments.pay_for_class(ALICE, class_id, "STX")

    assert payment.id == 0
    assert payment.amount == 1000
    assert payment.status == "paid"
    assert payment.refunded is False
    assert payment.instructor == INSTRUCTOR
    transfers = await chain.transfers()
    assert [(t.amount, t.sender, t.recipient) for t in transfers] == [
        (20, ALICE, VAULT),
        (980, ALICE, INSTRUCTOR),
    ]
    stats = await payments.get_stats()
    assert stats.total_fees_collected == 20
    assert stats.total_payments_processed == 1


@pytest.mark.asyncio
async def test_fee_rounds_down_and_parts_sum_to_price(payments, classes, chain):
    await payments.set_platform_fee_percent(OWNER, 5)
    class_id = await create_class(classes, price=999)

    await payments.pay_for_class(ALICE, class_id, "STX")

    fee, net = [t.amount for t in await chain.transfers()]
    assert (fee, net) == (49, 950)
    assert fee + net == 999


@pytest.mark.asyncio
async def test_duplicate_payment_is_rejected_without_side_effects(payments, classes, chain):
    class_id = await create_class(classes)
    await payments.pay_for_class(ALICE, class_id, "STX")

    with pytest.raises(AlreadyPaidException):
        await payments.pay_for_class(ALICE, class_id, "STX")

    assert len(await chain.transfers()) == 2
    assert (await payments.get_stats()).total_payments_processed == 1
    assert (await payments.get_payments_for_class(class_id)).payment_ids == [0]


@pytest.mark.asyncio
async def test_concurrent_duplicate_payments_serialize(payments, classes):
    class_id = await create_class(classes)

    results = await asyncio.gather(
        payments.pay_for_class(ALICE, class_id, "STX"),
        payments.pay_for_class(ALICE, class_id, "STX"),
        return_exceptions=True,
    )

    assert sum(isinstance(r, AlreadyPaidException) for r in results) == 1
    assert (await payments.get_payments_for_class(class_id)).count == 1


@pytest.mark.asyncio
async def test_ledger_reads_wait_for_in_flight_writes(payments, classes, chain, marketplace):
    class_id = await create_class(classes)

    await marketplace.lock.acquire()
    try:
        reader = asyncio.create_task(chain.transfers())
        writer = asyncio.create_task(payments.pay_for_class(ALICE, class_id, "STX"))
        await asyncio.sleep(0)
        assert not reader.done()
    finally:
        marketplace.lock.release()

    # 锁按 FIFO 交出：读取先于支付完成
    assert await reader == []
    await writer
    assert len(await chain.transfers()) == 2


@pytest.mark.asyncio
async def test_payment_ids_are_monotonic_across_classes(payments, classes):
    first = await create_class(classes)
    second = await create_class(classes, title="Evening Pilates")

    p0 = await payments.pay_for_class(ALICE, first, "STX")
    p1 = await payments.pay_for_class(BOB, first, "STX")
    p2 = await payments.pay_for_class(ALICE, second, "STX")

    assert [p0.id, p1.id, p2.id] == [0, 1, 2]
    listed = await payments.get_payments_for_class(first)
    assert listed.payment_ids == [0, 1]
    assert listed.count == 2


@pytest.mark.asyncio
async def test_wrong_currency_is_checked_first(payments):
    with pytest.raises(InvalidCurrencyException):
        await payments.pay_for_class(ALICE, 42, "BTC")


@pytest.mark.asyncio
async def test_unknown_class(payments):
    with pytest.raises(InvalidClassException):
        await payments.pay_for_class(ALICE, 42, "STX")


@pytest.mark.asyncio
async def test_cancelled_class_cannot_be_paid(payments, classes):
    class_id = await create_class(classes)
    await classes.cancel_class(INSTRUCTOR, class_id)

    with pytest.raises(ClassNotActiveException):
        await payments.pay_for_class(ALICE, class_id, "STX")


@pytest.mark.asyncio
async def test_started_class_cannot_be_paid(payments, classes, chain):
    class_id = await create_class(classes, start_time=100)
    await chain.advance(100)
    await payments.pay_for_class(ALICE, class_id, "STX")

    await chain.advance(1)
    with pytest.raises(InvalidTimestampException):
        await payments.pay_for_class(BOB, class_id, "STX")


@pytest.mark.asyncio
async def test_per_class_payment_cap(payments, classes):
    class_id = await create_class(classes)
    for i in range(100):
        await payments.pay_for_class(f"ST1PARTICIPANT{i:03d}", class_id, "STX")

    with pytest.raises(MaxPaymentsExceededException):
        await payments.pay_for_class("ST1CAROL", class_id, "STX")
    assert (await payments.get_payments_for_class(class_id)).count == 100


@pytest.mark.asyncio
async def test_reads_for_unknown_keys(payments):
    with pytest.raises(PaymentNotFoundException):
        await payments.get_payment(7)
    empty = await payments.get_payments_for_class(7)
    assert empty.payment_ids is None
    assert empty.count == 0
    stats = await payments.get_stats()
    assert (stats.total_fees_collected, stats.total_payments_processed, stats.platform_fee_percent) == (0, 0, 2)
