"""
签到领域服务 - 课程开始后的签到窗口、签退与缺席标记
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .entity import Attendance, TrackerState
from .exceptions import (
    AlreadyCheckedInException,
    AttendanceClassNotFoundException,
    AttendanceNotAuthorizedException,
    AttendanceNotFoundException,
    AttendanceNotInstructorException,
    CheckinWindowClosedException,
    CheckoutNotAllowedException,
    MaxAttendanceExceededException,
)
from .repository import AttendanceRepository, TrackerStateRepository
from domain.payment.entity import ClassDetails
from domain.payment.exceptions import InvalidClassException
from domain.services.class_catalog import ClassCatalog
from domain.services.clock import BlockClock


@dataclass(frozen=True)
class AttendancePolicy:
    checkin_window_blocks: int = 30
    max_attendance_per_class: int = 500


class AttendanceTracker:
    def __init__(
        self,
        attendance_repository: AttendanceRepository,
        state_repository: TrackerStateRepository,
        catalog: ClassCatalog,
        clock: BlockClock,
        policy: AttendancePolicy | None = None,
    ):
        self.attendance_repository = attendance_repository
        self.state_repository = state_repository
        self.catalog = catalog
        self.clock = clock
        self.policy = policy or AttendancePolicy()

    async def _require_owner(self, caller: str) -> TrackerState:
        state = await self.state_repository.load()
        if caller != state.owner:
            raise AttendanceNotAuthorizedException(caller)
        return state

    async def set_class_registry_address(self, caller: str, address: str) -> None:
        state = await self._require_owner(caller)
        state.class_registry_address = address
        await self.state_repository.save(state)

    async def set_payment_processor_address(self, caller: str, address: str) -> None:
        state = await self._require_owner(caller)
        state.payment_processor_address = address
        await self.state_repository.save(state)

    async def _class(self, class_id: int) -> ClassDetails:
        try:
            return await self.catalog.get_class_details(class_id)
        except InvalidClassException:
            raise AttendanceClassNotFoundException(class_id) from None

    async def _get_record(self, attendance_id: int) -> Attendance:
        record = await self.attendance_repository.get_by_id(attendance_id)
        if record is None:
            raise AttendanceNotFoundException(attendance_id)
        return record

    async def check_in(self, caller: str, class_id: int) -> Attendance:
        details = await self._class(class_id)
        height = self.clock.current_height()
        closes = details.start_time + self.policy.checkin_window_blocks
        if height < details.start_time or height > closes:
            raise CheckinWindowClosedException(class_id, height, details.start_time, closes)
        if await self.attendance_repository.find_id(caller, class_id) is not None:
            raise AlreadyCheckedInException(caller, class_id)
        if await self.attendance_repository.count_for_class(class_id) >= self.policy.max_attendance_per_class:
            raise MaxAttendanceExceededException(class_id, self.policy.max_attendance_per_class)

        state = await self.state_repository.load()
        record = Attendance(
            id=state.next_attendance_id,
            class_id=class_id,
            participant=caller,
            checkin_time=height,
        )
        created = await self.attendance_repository.add(record)
        state.next_attendance_id += 1
        await self.state_repository.save(state)
        return created

    async def check_out(self, caller: str, attendance_id: int) -> Attendance:
        record = await self._get_record(attendance_id)
        if record.participant != caller:
            raise AttendanceNotAuthorizedException(caller)
        if not record.is_checked_in:
            raise CheckoutNotAllowedException(attendance_id, record.status.value)
        record.check_out(self.clock.current_height())
        return await self.attendance_repository.update(record)

    async def mark_no_show(self, caller: str, attendance_id: int) -> Attendance:
        record = await self._get_record(attendance_id)
        details = await self._class(record.class_id)
        if caller != details.instructor:
            raise AttendanceNotInstructorException(caller)
        if not record.is_checked_in:
            raise CheckoutNotAllowedException(attendance_id, record.status.value)
        record.mark_no_show()
        return await self.attendance_repository.update(record)

    async def get_attendance(self, attendance_id: int) -> Optional[Attendance]:
        return await self.attendance_repository.get_by_id(attendance_id)

    async def get_attendance_by_participant(self, participant: str, class_id: int) -> Optional[int]:
        return await self.attendance_repository.find_id(participant, class_id)

    async def get_attendance_for_class(self, class_id: int) -> List[int]:
        return await self.attendance_repository.list_ids_for_class(class_id)

    async def get_class_attendance_count(self, class_id: int) -> int:
        return await self.attendance_repository.count_for_class(class_id)

    async def has_checked_in(self, participant: str, class_id: int) -> bool:
        return await self.attendance_repository.find_id(participant, class_id) is not None

    async def get_state(self) -> TrackerState:
        return await self.state_repository.load()
