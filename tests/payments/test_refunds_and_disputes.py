import pytest
import pytest_asyncio

from domain.payment.exceptions import (
    AlreadyResolvedException,
    DisputeAlreadyFiledException,
    DisputeNotAllowedException,
    DisputeNotFoundException,
    DisputeOpenException,
    InvalidDisputeReasonException,
    InvalidOutcomeException,
    InvalidPaymentStatusException,
    InvalidRefundAmountException,
    NotAuthorizedException,
    OnlyInstructorException,
    OnlyParticipantException,
    PaymentNotFoundException,
)
from tests.factories import ALICE, BOB, INSTRUCTOR, OWNER, create_class


@pytest_asyncio.fixture
async def paid(payments, classes):
    class_id = await create_class(classes, price=1000)
    payment = await payments.pay_for_class(ALICE, class_id, "STX")
    return payment.id


# ----------------------------------------------------------------------
# Direct refunds
# ----------------------------------------------------------------------
@pytest.mark.asyncio
async def test_instructor_partial_refund(payments, chain, paid):
    refunded = await payments.refund_payment(INSTRUCTOR, paid, 500)

    assert refunded.status == "refunded"
    assert refunded.refunded is True
    last = (await chain.transfers())[-1]
    assert (last.amount, last.sender, last.recipient) == (500, INSTRUCTOR, ALICE)


@pytest.mark.asyncio
async def test_only_instructor_may_refund(payments, paid):
    with pytest.raises(OnlyInstructorException):
        await payments.refund_payment(BOB, paid, 500)


@pytest.mark.asyncio
async def test_refund_is_terminal(payments, chain, paid):
    await payments.refund_payment(INSTRUCTOR, paid, 1000)

    with pytest.raises(InvalidPaymentStatusException):
        await payments.refund_payment(INSTRUCTOR, paid, 1)
    assert len(await chain.transfers()) == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -5, 1001])
async def test_refund_amount_bounds(payments, paid, amount):
    with pytest.raises(InvalidRefundAmountException):
        await payments.refund_payment(INSTRUCTOR, paid, amount)
    assert (await payments.get_payment(paid)).status == "paid"


@pytest.mark.asyncio
async def test_refund_unknown_payment(payments):
    with pytest.raises(PaymentNotFoundException):
        await payments.refund_payment(INSTRUCTOR, 99, 10)


@pytest.mark.asyncio
async def test_open_dispute_blocks_direct_refund(payments, paid):
    await payments.file_dispute(ALICE, paid, "Class never happened")

    with pytest.raises(DisputeOpenException):
        await payments.refund_payment(INSTRUCTOR, paid, 1000)


# ----------------------------------------------------------------------
# Filing disputes
# ----------------------------------------------------------------------
@pytest.mark.asyncio
async def test_dispute_window_boundary(payments, classes, chain):
    class_id = await create_class(classes, start_time=500)
    first = (await payments.pay_for_class(ALICE, class_id, "STX")).id
    second = (await payments.pay_for_class(BOB, class_id, "STX")).id

    await chain.advance(143)
    dispute = await payments.file_dispute(ALICE, first, "Instructor absent")
    assert dispute.resolved is False
    assert dispute.outcome == "pending"
    assert dispute.timestamp == 143

    await chain.advance(1)
    with pytest.raises(DisputeNotAllowedException):
        await payments.file_dispute(BOB, second, "Too late")


@pytest.mark.asyncio
async def test_only_participant_may_dispute(payments, paid):
    with pytest.raises(OnlyParticipantException):
        await payments.file_dispute(BOB, paid, "Not my payment")


@pytest.mark.asyncio
async def test_empty_reason_rejected(payments, paid):
    with pytest.raises(InvalidDisputeReasonException):
        await payments.file_dispute(ALICE, paid, "")


@pytest.mark.asyncio
async def test_second_dispute_rejected(payments, paid):
    await payments.file_dispute(ALICE, paid, "first")

    with pytest.raises(DisputeAlreadyFiledException):
        await payments.file_dispute(ALICE, paid, "second")
    assert (await payments.get_dispute(paid)).reason == "first"


@pytest.mark.asyncio
async def test_refunded_payment_cannot_be_disputed(payments, paid):
    await payments.refund_payment(INSTRUCTOR, paid, 300)

    with pytest.raises(InvalidPaymentStatusException):
        await payments.file_dispute(ALICE, paid, "want the rest")


# ----------------------------------------------------------------------
# Resolving disputes
# ----------------------------------------------------------------------
@pytest.mark.asyncio
async def test_no_refund_ignores_amount(payments, chain, paid):
    await payments.file_dispute(ALICE, paid, "meh")
    transfers_before = len(await chain.transfers())

    dispute = await payments.resolve_dispute(OWNER, paid, "no-refund", 999)

    assert dispute.resolved is True
    assert dispute.outcome == "no-refund"
    assert dispute.resolver == OWNER
    assert len(await chain.transfers()) == transfers_before
    assert (await payments.get_payment(paid)).status == "paid"


@pytest.mark.asyncio
async def test_resolved_dispute_no_longer_blocks_refund(payments, paid):
    await payments.file_dispute(ALICE, paid, "meh")
    await payments.resolve_dispute(OWNER, paid, "no-refund")

    refunded = await payments.refund_payment(INSTRUCTOR, paid, 100)
    assert refunded.status == "refunded"


@pytest.mark.asyncio
async def test_refund_outcome_pays_participant(payments, chain, paid):
    await payments.file_dispute(ALICE, paid, "Class cancelled without notice")

    dispute = await payments.resolve_dispute(OWNER, paid, "refund", 750)

    assert dispute.outcome == "refund"
    payment = await payments.get_payment(paid)
    assert payment.status == "disputed-refunded"
    assert payment.refunded is True
    last = (await chain.transfers())[-1]
    assert (last.amount, last.sender, last.recipient) == (750, INSTRUCTOR, ALICE)

    with pytest.raises(AlreadyResolvedException):
        await payments.resolve_dispute(OWNER, paid, "refund", 250)


@pytest.mark.asyncio
async def test_refund_outcome_validates_amount(payments, paid):
    await payments.file_dispute(ALICE, paid, "bad")

    with pytest.raises(InvalidRefundAmountException):
        await payments.resolve_dispute(OWNER, paid, "refund", 5000)
    assert (await payments.get_dispute(paid)).resolved is False


@pytest.mark.asyncio
async def test_resolve_requires_existing_dispute_before_owner_check(payments, paid):
    with pytest.raises(DisputeNotFoundException):
        await payments.resolve_dispute(BOB, paid, "refund", 10)


@pytest.mark.asyncio
async def test_only_owner_resolves(payments, paid):
    await payments.file_dispute(ALICE, paid, "bad")

    with pytest.raises(NotAuthorizedException):
        await payments.resolve_dispute(INSTRUCTOR, paid, "refund", 10)


@pytest.mark.asyncio
@pytest.mark.parametrize("outcome", ["pending", "maybe", ""])
async def test_invalid_outcomes(payments, paid, outcome):
    await payments.file_dispute(ALICE, paid, "bad")

    with pytest.raises(InvalidOutcomeException):
        await payments.resolve_dispute(OWNER, paid, outcome, 10)
