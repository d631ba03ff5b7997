"""
课程注册表应用服务
"""
from __future__ import annotations

from application.dtos.classes import (
    ClassDTO,
    ClassIdsDTO,
    CreateClassRequest,
    RegistryStatsDTO,
    UpdateClassRequest,
)
from application.services.base import SerializedService
from domain.class_registry.exceptions import ClassNotFoundException
from domain.class_registry.service import ClassRegistry


class ClassRegistryService(SerializedService):
    component = "class_registry"

    async def create_class(self, caller: str, data: CreateClassRequest) -> ClassDTO:
        record = await self._execute(
            "create_class",
            lambda r: r.create_class(
                caller,
                title=data.title,
                description=data.description,
                price=data.price,
                duration=data.duration,
                start_time=data.start_time,
                capacity=data.capacity,
            ),
            caller=caller,
        )
        return ClassDTO.model_validate(record)

    async def update_class(self, caller: str, class_id: int, data: UpdateClassRequest) -> ClassDTO:
        record = await self._execute(
            "update_class",
            lambda r: r.update_class(
                caller,
                class_id,
                title=data.title,
                description=data.description,
                price=data.price,
                duration=data.duration,
                capacity=data.capacity,
            ),
            caller=caller,
            class_id=class_id,
        )
        return ClassDTO.model_validate(record)

    async def cancel_class(self, caller: str, class_id: int) -> ClassDTO:
        record = await self._execute(
            "cancel_class", lambda r: r.cancel_class(caller, class_id), caller=caller, class_id=class_id,
        )
        return ClassDTO.model_validate(record)

    async def increment_registered_count(self, class_id: int) -> ClassDTO:
        record = await self._execute(
            "increment_registered_count", lambda r: r.increment_registered_count(class_id), class_id=class_id,
        )
        return ClassDTO.model_validate(record)

    async def set_platform_fee_recipient(self, caller: str, recipient: str) -> RegistryStatsDTO:
        await self._execute(
            "set_platform_fee_recipient",
            lambda r: r.set_platform_fee_recipient(caller, recipient),
            caller=caller,
        )
        return await self.get_stats()

    async def get_class(self, class_id: int) -> ClassDTO:
        record = await self._read(lambda r: r.get_class(class_id))
        if record is None:
            raise ClassNotFoundException(class_id)
        return ClassDTO.model_validate(record)

    async def get_classes_by_instructor(self, instructor: str) -> ClassIdsDTO:
        return ClassIdsDTO(class_ids=await self._read(lambda r: r.get_classes_by_instructor(instructor)))

    async def get_active_class_ids(self) -> ClassIdsDTO:
        return ClassIdsDTO(class_ids=await self._read(lambda r: r.get_active_class_ids()))

    async def get_stats(self) -> RegistryStatsDTO:
        async def _collect(r: ClassRegistry) -> RegistryStatsDTO:
            return RegistryStatsDTO(
                total_classes=await r.get_total_classes(),
                active_classes=len(await r.get_active_class_ids()),
                platform_fee_recipient=await r.get_platform_fee_recipient(),
            )

        return await self._read(_collect)
