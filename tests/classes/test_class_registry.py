import pytest

from application.dtos.classes import UpdateClassRequest
from application.services.class_registry_service import ClassRegistryService
from core.config import ClassRegistrySettings, Settings
from domain.class_registry.exceptions import (
    ClassFieldException,
    ClassInactiveException,
    ClassNotFoundException,
    InvalidClassStatusException,
    MaxClassesExceededException,
    MaxInstructorClassesExceededException,
    MaxRegistrationsException,
    NotInstructorException,
    PastStartTimeException,
    RegistryNotAuthorizedException,
)
from infrastructure.bootstrap import build_marketplace
from tests.factories import ALICE, INSTRUCTOR, OTHER_INSTRUCTOR, OWNER, class_request, create_class


def update_request(**overrides) -> UpdateClassRequest:
    data = {"title": "Power Yoga", "description": "", "price": 1500, "duration": 90, "capacity": 20}
    data.update(overrides)
    return UpdateClassRequest(**data)


@pytest.mark.asyncio
async def test_create_class_records_instructor_and_height(classes, chain):
    await chain.advance(5)

    record = await classes.create_class(INSTRUCTOR, class_request(start_time=50))

    assert record.id == 0
    assert record.instructor == INSTRUCTOR
    assert record.registered_count == 0
    assert record.active is True
    assert record.created_at == record.updated_at == 5
    assert (await classes.get_classes_by_instructor(INSTRUCTOR)).class_ids == [0]
    assert (await classes.get_active_class_ids()).class_ids == [0]
    assert (await classes.get_stats()).total_classes == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides, error_type",
    [
        ({"title": ""}, "InvalidTitle"),
        ({"title": "x" * 101}, "InvalidTitle"),
        ({"description": "d" * 501}, "InvalidDescription"),
        ({"price": 0}, "InvalidPrice"),
        ({"duration": 0}, "InvalidDuration"),
        ({"capacity": 0}, "InvalidCapacity"),
        ({"capacity": 501}, "InvalidCapacity"),
        # title is validated before price
        ({"title": "", "price": 0}, "InvalidTitle"),
    ],
)
async def test_create_class_field_validation(classes, overrides, error_type):
    with pytest.raises(ClassFieldException) as excinfo:
        await classes.create_class(INSTRUCTOR, class_request(**overrides))
    assert excinfo.value.error_type == error_type
    assert (await classes.get_stats()).total_classes == 0


@pytest.mark.asyncio
async def test_start_time_in_the_past_rejected(classes, chain):
    await chain.advance(10)

    with pytest.raises(ClassFieldException) as excinfo:
        await classes.create_class(INSTRUCTOR, class_request(start_time=9))
    assert excinfo.value.error_type == "InvalidStartTime"


@pytest.mark.asyncio
async def test_class_limits():
    marketplace = build_marketplace(Settings(
        classes=ClassRegistrySettings(max_classes=3, max_classes_per_instructor=2),
    ))
    classes = ClassRegistryService(marketplace.uow, marketplace.lock, marketplace.class_registry)
    await create_class(classes)
    await create_class(classes)

    with pytest.raises(MaxInstructorClassesExceededException):
        await create_class(classes)

    await create_class(classes, instructor=OTHER_INSTRUCTOR)
    with pytest.raises(MaxClassesExceededException):
        await create_class(classes, instructor=OTHER_INSTRUCTOR)


@pytest.mark.asyncio
async def test_update_class(classes, chain):
    class_id = await create_class(classes)
    await chain.advance(3)

    updated = await classes.update_class(INSTRUCTOR, class_id, update_request())

    assert (updated.title, updated.price, updated.duration, updated.capacity) == ("Power Yoga", 1500, 90, 20)
    assert updated.updated_at == 3
    assert updated.created_at == 0


@pytest.mark.asyncio
async def test_update_class_guards(classes, chain):
    class_id = await create_class(classes, start_time=20)

    with pytest.raises(ClassNotFoundException):
        await classes.update_class(INSTRUCTOR, 99, update_request())
    with pytest.raises(NotInstructorException):
        await classes.update_class(ALICE, class_id, update_request())

    await chain.advance(21)
    with pytest.raises(PastStartTimeException):
        await classes.update_class(INSTRUCTOR, class_id, update_request())


@pytest.mark.asyncio
async def test_capacity_cannot_drop_below_registrations(classes):
    class_id = await create_class(classes, capacity=5)
    for _ in range(3):
        await classes.increment_registered_count(class_id)

    with pytest.raises(ClassFieldException) as excinfo:
        await classes.update_class(INSTRUCTOR, class_id, update_request(capacity=2))
    assert excinfo.value.error_type == "InvalidCapacity"

    updated = await classes.update_class(INSTRUCTOR, class_id, update_request(capacity=3))
    assert updated.capacity == 3


@pytest.mark.asyncio
async def test_cancel_class(classes):
    class_id = await create_class(classes)

    with pytest.raises(NotInstructorException):
        await classes.cancel_class(ALICE, class_id)

    cancelled = await classes.cancel_class(INSTRUCTOR, class_id)
    assert cancelled.active is False
    assert (await classes.get_active_class_ids()).class_ids == []

    with pytest.raises(InvalidClassStatusException):
        await classes.cancel_class(INSTRUCTOR, class_id)
    with pytest.raises(ClassInactiveException):
        await classes.update_class(INSTRUCTOR, class_id, update_request())


@pytest.mark.asyncio
async def test_registration_count(classes):
    class_id = await create_class(classes, capacity=2)

    await classes.increment_registered_count(class_id)
    record = await classes.increment_registered_count(class_id)
    assert record.registered_count == 2

    with pytest.raises(MaxRegistrationsException):
        await classes.increment_registered_count(class_id)
    with pytest.raises(ClassNotFoundException):
        await classes.increment_registered_count(99)

    await classes.cancel_class(INSTRUCTOR, class_id)
    with pytest.raises(ClassInactiveException):
        await classes.increment_registered_count(class_id)


@pytest.mark.asyncio
async def test_platform_fee_recipient_is_owner_only(classes):
    with pytest.raises(RegistryNotAuthorizedException):
        await classes.set_platform_fee_recipient(ALICE, "ST3NEW")

    stats = await classes.set_platform_fee_recipient(OWNER, "ST3NEW")
    assert stats.platform_fee_recipient == "ST3NEW"
