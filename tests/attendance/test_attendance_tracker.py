import pytest

from application.services.attendance_service import AttendanceService
from core.config import AttendanceSettings, Settings
from domain.attendance.exceptions import (
    AlreadyCheckedInException,
    AttendanceClassNotFoundException,
    AttendanceNotAuthorizedException,
    AttendanceNotFoundException,
    AttendanceNotInstructorException,
    CheckinWindowClosedException,
    CheckoutNotAllowedException,
    MaxAttendanceExceededException,
)
from application.services.class_registry_service import ClassRegistryService
from infrastructure.bootstrap import build_marketplace
from tests.factories import ALICE, BOB, INSTRUCTOR, OWNER, create_class


@pytest.mark.asyncio
async def test_check_in_window(attendance, classes, chain):
    class_id = await create_class(classes, start_time=100)

    await chain.advance(99)
    with pytest.raises(CheckinWindowClosedException):
        await attendance.check_in(ALICE, class_id)

    await chain.advance(1)
    record = await attendance.check_in(ALICE, class_id)
    assert record.status == "checked-in"
    assert record.checkin_time == 100

    await chain.advance(30)
    late = await attendance.check_in(BOB, class_id)
    assert late.checkin_time == 130

    await chain.advance(1)
    with pytest.raises(CheckinWindowClosedException):
        await attendance.check_in("ST1CAROL", class_id)


@pytest.mark.asyncio
async def test_check_in_once_per_class(attendance, classes, chain):
    class_id = await create_class(classes, start_time=0)

    first = await attendance.check_in(ALICE, class_id)
    with pytest.raises(AlreadyCheckedInException):
        await attendance.check_in(ALICE, class_id)

    lookup = await attendance.get_participant_attendance(ALICE, class_id)
    assert lookup.attendance_id == first.id
    assert lookup.checked_in is True
    assert (await attendance.get_participant_attendance(BOB, class_id)).checked_in is False


@pytest.mark.asyncio
async def test_check_in_unknown_class(attendance):
    with pytest.raises(AttendanceClassNotFoundException):
        await attendance.check_in(ALICE, 5)


@pytest.mark.asyncio
async def test_attendance_cap():
    marketplace = build_marketplace(Settings(attendance=AttendanceSettings(max_attendance_per_class=1)))
    classes = ClassRegistryService(marketplace.uow, marketplace.lock, marketplace.class_registry)
    attendance = AttendanceService(marketplace.uow, marketplace.lock, marketplace.attendance_tracker)
    class_id = await create_class(classes, start_time=0)
    await attendance.check_in(ALICE, class_id)

    with pytest.raises(MaxAttendanceExceededException):
        await attendance.check_in(BOB, class_id)


@pytest.mark.asyncio
async def test_check_out(attendance, classes, chain):
    class_id = await create_class(classes, start_time=0)
    record = await attendance.check_in(ALICE, class_id)
    await chain.advance(60)

    with pytest.raises(AttendanceNotAuthorizedException):
        await attendance.check_out(BOB, record.id)

    done = await attendance.check_out(ALICE, record.id)
    assert done.status == "completed"
    assert done.checkout_time == 60

    with pytest.raises(CheckoutNotAllowedException):
        await attendance.check_out(ALICE, record.id)
    with pytest.raises(AttendanceNotFoundException):
        await attendance.check_out(ALICE, 42)

    # 签退后仍视为已签到
    lookup = await attendance.get_participant_attendance(ALICE, class_id)
    assert (lookup.attendance_id, lookup.checked_in) == (record.id, True)
    other = await attendance.get_participant_attendance(ALICE, class_id + 1)
    assert (other.attendance_id, other.checked_in) == (None, False)


@pytest.mark.asyncio
async def test_mark_no_show(attendance, classes):
    class_id = await create_class(classes, start_time=0)
    record = await attendance.check_in(ALICE, class_id)

    with pytest.raises(AttendanceNotInstructorException):
        await attendance.mark_no_show(BOB, record.id)

    marked = await attendance.mark_no_show(INSTRUCTOR, record.id)
    assert marked.status == "no-show"
    assert marked.checkout_time is None

    with pytest.raises(CheckoutNotAllowedException):
        await attendance.check_out(ALICE, record.id)


@pytest.mark.asyncio
async def test_class_attendance_listing(attendance, classes):
    class_id = await create_class(classes, start_time=0)
    await attendance.check_in(ALICE, class_id)
    await attendance.check_in(BOB, class_id)

    listing = await attendance.get_class_attendance(class_id)
    assert listing.attendance_ids == [0, 1]
    assert listing.count == 2
    assert (await attendance.get_class_attendance(99)).count == 0


@pytest.mark.asyncio
async def test_owner_only_configuration(attendance, marketplace):
    with pytest.raises(AttendanceNotAuthorizedException):
        await attendance.set_class_registry_address(ALICE, "ST3REG")

    await attendance.set_class_registry_address(OWNER, "ST3REG")
    await attendance.set_payment_processor_address(OWNER, "ST3PAY")

    async with marketplace.uow(readonly=True) as uow:
        state = await marketplace.attendance_tracker(uow).get_state()
    assert (state.class_registry_address, state.payment_processor_address) == ("ST3REG", "ST3PAY")
