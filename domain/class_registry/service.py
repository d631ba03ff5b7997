"""
课程注册表领域服务 - 课程的创建、修改、取消与报名计数
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .entity import ClassRecord
from .exceptions import (
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
from .repository import ClassRepository, RegistryStateRepository
from domain.payment.entity import ClassDetails
from domain.payment.exceptions import InvalidClassException
from domain.services.clock import BlockClock
from shared.codes.class_codes import ClassCode


@dataclass(frozen=True)
class RegistryPolicy:
    max_classes: int = 1000
    max_classes_per_instructor: int = 200
    max_title_length: int = 100
    max_description_length: int = 500
    max_capacity: int = 500


class ClassRegistry:
    """Owns class records; the payment processor only reads ``get_class_details``."""

    def __init__(
        self,
        class_repository: ClassRepository,
        state_repository: RegistryStateRepository,
        clock: BlockClock,
        policy: RegistryPolicy | None = None,
    ):
        self.class_repository = class_repository
        self.state_repository = state_repository
        self.clock = clock
        self.policy = policy or RegistryPolicy()

    def _validate_fields(
        self,
        title: str,
        description: str,
        price: int,
        duration: int,
        capacity: int,
        *,
        min_capacity: int = 1,
        start_time: Optional[int] = None,
    ) -> None:
        if not title or len(title) > self.policy.max_title_length:
            raise ClassFieldException(
                "title", ClassCode.INVALID_TITLE, "InvalidTitle",
                f"Title must be 1..{self.policy.max_title_length} characters",
            )
        if len(description) > self.policy.max_description_length:
            raise ClassFieldException(
                "description", ClassCode.INVALID_DESCRIPTION, "InvalidDescription",
                f"Description must be at most {self.policy.max_description_length} characters",
            )
        if price <= 0:
            raise ClassFieldException("price", ClassCode.INVALID_PRICE, "InvalidPrice", "Price must be positive")
        if duration <= 0:
            raise ClassFieldException(
                "duration", ClassCode.INVALID_DURATION, "InvalidDuration", "Duration must be positive",
            )
        if start_time is not None:
            height = self.clock.current_height()
            if start_time < height:
                raise ClassFieldException(
                    "start_time", ClassCode.INVALID_START_TIME, "InvalidStartTime",
                    f"Start time {start_time} is before block {height}",
                )
        if capacity < max(1, min_capacity) or capacity > self.policy.max_capacity:
            raise ClassFieldException(
                "capacity", ClassCode.INVALID_CAPACITY, "InvalidCapacity",
                f"Capacity must be {max(1, min_capacity)}..{self.policy.max_capacity}",
            )

    async def _get_owned(self, caller: str, class_id: int) -> ClassRecord:
        record = await self.class_repository.get_by_id(class_id)
        if record is None:
            raise ClassNotFoundException(class_id)
        if record.instructor != caller:
            raise NotInstructorException(caller)
        return record

    async def set_platform_fee_recipient(self, caller: str, recipient: str) -> None:
        state = await self.state_repository.load()
        if caller != state.owner:
            raise RegistryNotAuthorizedException(caller)
        if not recipient:
            raise ClassFieldException(
                "recipient", ClassCode.INVALID_RECIPIENT, "InvalidRecipient", "Recipient must not be empty",
            )
        state.platform_fee_recipient = recipient
        await self.state_repository.save(state)

    async def create_class(
        self,
        caller: str,
        title: str,
        description: str,
        price: int,
        duration: int,
        start_time: int,
        capacity: int,
    ) -> ClassRecord:
        state = await self.state_repository.load()
        if state.next_class_id >= self.policy.max_classes:
            raise MaxClassesExceededException(self.policy.max_classes)
        height = self.clock.current_height()
        self._validate_fields(title, description, price, duration, capacity, start_time=start_time)
        owned = await self.class_repository.list_ids_by_instructor(caller)
        if len(owned) >= self.policy.max_classes_per_instructor:
            raise MaxInstructorClassesExceededException(caller, self.policy.max_classes_per_instructor)

        record = ClassRecord(
            id=state.next_class_id,
            title=title,
            description=description,
            instructor=caller,
            price=price,
            duration=duration,
            start_time=start_time,
            capacity=capacity,
            created_at=height,
            updated_at=height,
        )
        created = await self.class_repository.add(record)
        state.next_class_id += 1
        await self.state_repository.save(state)
        return created

    async def update_class(
        self,
        caller: str,
        class_id: int,
        title: str,
        description: str,
        price: int,
        duration: int,
        capacity: int,
    ) -> ClassRecord:
        record = await self._get_owned(caller, class_id)
        if not record.active:
            raise ClassInactiveException(class_id)
        height = self.clock.current_height()
        if record.has_started(height):
            raise PastStartTimeException(class_id, record.start_time)
        self._validate_fields(
            title, description, price, duration, capacity, min_capacity=record.registered_count,
        )

        record.title = title
        record.description = description
        record.price = price
        record.duration = duration
        record.capacity = capacity
        record.updated_at = height
        return await self.class_repository.update(record)

    async def cancel_class(self, caller: str, class_id: int) -> ClassRecord:
        record = await self._get_owned(caller, class_id)
        if not record.active:
            raise InvalidClassStatusException(class_id)
        record.active = False
        record.updated_at = self.clock.current_height()
        return await self.class_repository.update(record)

    async def increment_registered_count(self, class_id: int) -> ClassRecord:
        record = await self.class_repository.get_by_id(class_id)
        if record is None:
            raise ClassNotFoundException(class_id)
        if not record.active:
            raise ClassInactiveException(class_id)
        if record.is_full():
            raise MaxRegistrationsException(class_id, record.capacity)
        record.registered_count += 1
        return await self.class_repository.update(record)

    # Reads
    async def get_class(self, class_id: int) -> Optional[ClassRecord]:
        return await self.class_repository.get_by_id(class_id)

    async def get_class_details(self, class_id: int) -> ClassDetails:
        record = await self.class_repository.get_by_id(class_id)
        if record is None:
            raise InvalidClassException(class_id)
        return record.to_details()

    async def get_classes_by_instructor(self, instructor: str) -> List[int]:
        return await self.class_repository.list_ids_by_instructor(instructor)

    async def get_active_class_ids(self) -> List[int]:
        return await self.class_repository.list_active_ids()

    async def get_total_classes(self) -> int:
        return (await self.state_repository.load()).next_class_id

    async def get_platform_fee_recipient(self) -> str:
        return (await self.state_repository.load()).platform_fee_recipient
