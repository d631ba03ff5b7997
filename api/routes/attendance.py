"""
签到API路由
"""
from fastapi import APIRouter, Depends

from api.dependencies import get_attendance_service, get_caller
from application.dtos.attendance import (
    AttendanceDTO,
    CheckInRequest,
    ClassAttendanceDTO,
    ParticipantAttendanceDTO,
)
from application.dtos.payments import SetAddressRequest
from application.services.attendance_service import AttendanceService
from core.response import Response as ApiResponse, success_response


router = APIRouter(prefix="/attendance", tags=["Attendance"])


@router.post("/check-in", summary="签到", response_model=ApiResponse[AttendanceDTO])
async def check_in(
    body: CheckInRequest,
    caller: str = Depends(get_caller),
    service: AttendanceService = Depends(get_attendance_service),
):
    """课程开始后 30 个区块内允许签到，每人每课一次"""
    record = await service.check_in(caller, body.class_id)
    return success_response(data=record, message="Checked in")


@router.put("/config/class-registry", summary="设置课程注册表地址")
async def set_class_registry_address(
    body: SetAddressRequest,
    caller: str = Depends(get_caller),
    service: AttendanceService = Depends(get_attendance_service),
):
    await service.set_class_registry_address(caller, body.address)
    return success_response(message="Class registry address updated")


@router.put("/config/payment-processor", summary="设置支付处理器地址")
async def set_payment_processor_address(
    body: SetAddressRequest,
    caller: str = Depends(get_caller),
    service: AttendanceService = Depends(get_attendance_service),
):
    await service.set_payment_processor_address(caller, body.address)
    return success_response(message="Payment processor address updated")


@router.get("/classes/{class_id}", summary="课程签到列表", response_model=ApiResponse[ClassAttendanceDTO])
async def get_class_attendance(class_id: int, service: AttendanceService = Depends(get_attendance_service)):
    return success_response(data=await service.get_class_attendance(class_id))


@router.get(
    "/classes/{class_id}/participants/{participant}",
    summary="参与者签到状态",
    response_model=ApiResponse[ParticipantAttendanceDTO],
)
async def get_participant_attendance(
    class_id: int,
    participant: str,
    service: AttendanceService = Depends(get_attendance_service),
):
    return success_response(data=await service.get_participant_attendance(participant, class_id))


@router.get("/{attendance_id}", summary="查询签到记录", response_model=ApiResponse[AttendanceDTO])
async def get_attendance(attendance_id: int, service: AttendanceService = Depends(get_attendance_service)):
    return success_response(data=await service.get_attendance(attendance_id))


@router.post("/{attendance_id}/check-out", summary="签退", response_model=ApiResponse[AttendanceDTO])
async def check_out(
    attendance_id: int,
    caller: str = Depends(get_caller),
    service: AttendanceService = Depends(get_attendance_service),
):
    return success_response(data=await service.check_out(caller, attendance_id), message="Checked out")


@router.post("/{attendance_id}/no-show", summary="标记缺席", response_model=ApiResponse[AttendanceDTO])
async def mark_no_show(
    attendance_id: int,
    caller: str = Depends(get_caller),
    service: AttendanceService = Depends(get_attendance_service),
):
    return success_response(data=await service.mark_no_show(caller, attendance_id), message="Marked as no-show")
