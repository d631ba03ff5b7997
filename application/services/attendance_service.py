"""
签到应用服务
"""
from __future__ import annotations

from application.dtos.attendance import (
    AttendanceDTO,
    ClassAttendanceDTO,
    ParticipantAttendanceDTO,
)
from application.services.base import SerializedService
from domain.attendance.exceptions import AttendanceNotFoundException
from domain.attendance.service import AttendanceTracker


class AttendanceService(SerializedService):
    component = "attendance_tracker"

    async def check_in(self, caller: str, class_id: int) -> AttendanceDTO:
        record = await self._execute(
            "check_in", lambda t: t.check_in(caller, class_id), caller=caller, class_id=class_id,
        )
        return AttendanceDTO.model_validate(record)

    async def check_out(self, caller: str, attendance_id: int) -> AttendanceDTO:
        record = await self._execute(
            "check_out", lambda t: t.check_out(caller, attendance_id), caller=caller, attendance_id=attendance_id,
        )
        return AttendanceDTO.model_validate(record)

    async def mark_no_show(self, caller: str, attendance_id: int) -> AttendanceDTO:
        record = await self._execute(
            "mark_no_show",
            lambda t: t.mark_no_show(caller, attendance_id),
            caller=caller,
            attendance_id=attendance_id,
        )
        return AttendanceDTO.model_validate(record)

    async def set_class_registry_address(self, caller: str, address: str) -> None:
        await self._execute(
            "set_class_registry_address", lambda t: t.set_class_registry_address(caller, address), caller=caller,
        )

    async def set_payment_processor_address(self, caller: str, address: str) -> None:
        await self._execute(
            "set_payment_processor_address",
            lambda t: t.set_payment_processor_address(caller, address),
            caller=caller,
        )

    async def get_attendance(self, attendance_id: int) -> AttendanceDTO:
        record = await self._read(lambda t: t.get_attendance(attendance_id))
        if record is None:
            raise AttendanceNotFoundException(attendance_id)
        return AttendanceDTO.model_validate(record)

    async def get_class_attendance(self, class_id: int) -> ClassAttendanceDTO:
        async def _collect(t: AttendanceTracker) -> ClassAttendanceDTO:
            return ClassAttendanceDTO(
                class_id=class_id,
                attendance_ids=await t.get_attendance_for_class(class_id),
                count=await t.get_class_attendance_count(class_id),
            )

        return await self._read(_collect)

    async def get_participant_attendance(self, participant: str, class_id: int) -> ParticipantAttendanceDTO:
        async def _collect(t: AttendanceTracker) -> ParticipantAttendanceDTO:
            return ParticipantAttendanceDTO(
                participant=participant,
                class_id=class_id,
                attendance_id=await t.get_attendance_by_participant(participant, class_id),
                checked_in=await t.has_checked_in(participant, class_id),
            )

        return await self._read(_collect)
