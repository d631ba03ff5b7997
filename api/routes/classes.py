"""
课程注册表API路由
"""
from fastapi import APIRouter, Depends

from api.dependencies import get_caller, get_class_registry_service
from application.dtos.classes import (
    ClassDTO,
    ClassIdsDTO,
    CreateClassRequest,
    RegistryStatsDTO,
    SetRecipientRequest,
    UpdateClassRequest,
)
from application.services.class_registry_service import ClassRegistryService
from core.response import Response as ApiResponse, success_response


router = APIRouter(prefix="/classes", tags=["Classes"])


@router.post("", summary="创建课程", response_model=ApiResponse[ClassDTO])
async def create_class(
    body: CreateClassRequest,
    caller: str = Depends(get_caller),
    service: ClassRegistryService = Depends(get_class_registry_service),
):
    """调用方成为该课程的讲师"""
    record = await service.create_class(caller, body)
    return success_response(data=record, message="Class created")


@router.get("/active", summary="进行中的课程ID", response_model=ApiResponse[ClassIdsDTO])
async def get_active_class_ids(service: ClassRegistryService = Depends(get_class_registry_service)):
    return success_response(data=await service.get_active_class_ids())


@router.get("/stats", summary="注册表统计", response_model=ApiResponse[RegistryStatsDTO])
async def get_stats(service: ClassRegistryService = Depends(get_class_registry_service)):
    return success_response(data=await service.get_stats())


@router.put("/fee-recipient", summary="设置平台费用接收方", response_model=ApiResponse[RegistryStatsDTO])
async def set_platform_fee_recipient(
    body: SetRecipientRequest,
    caller: str = Depends(get_caller),
    service: ClassRegistryService = Depends(get_class_registry_service),
):
    return success_response(data=await service.set_platform_fee_recipient(caller, body.recipient))


@router.get("/instructors/{instructor}", summary="讲师的课程ID", response_model=ApiResponse[ClassIdsDTO])
async def get_classes_by_instructor(
    instructor: str,
    service: ClassRegistryService = Depends(get_class_registry_service),
):
    return success_response(data=await service.get_classes_by_instructor(instructor))


@router.get("/{class_id}", summary="查询课程", response_model=ApiResponse[ClassDTO])
async def get_class(class_id: int, service: ClassRegistryService = Depends(get_class_registry_service)):
    return success_response(data=await service.get_class(class_id))


@router.put("/{class_id}", summary="修改课程", response_model=ApiResponse[ClassDTO])
async def update_class(
    class_id: int,
    body: UpdateClassRequest,
    caller: str = Depends(get_caller),
    service: ClassRegistryService = Depends(get_class_registry_service),
):
    return success_response(data=await service.update_class(caller, class_id, body), message="Class updated")


@router.post("/{class_id}/cancel", summary="取消课程", response_model=ApiResponse[ClassDTO])
async def cancel_class(
    class_id: int,
    caller: str = Depends(get_caller),
    service: ClassRegistryService = Depends(get_class_registry_service),
):
    return success_response(data=await service.cancel_class(caller, class_id), message="Class cancelled")


@router.post("/{class_id}/register", summary="报名计数加一", response_model=ApiResponse[ClassDTO])
async def increment_registered_count(
    class_id: int,
    service: ClassRegistryService = Depends(get_class_registry_service),
):
    return success_response(data=await service.increment_registered_count(class_id))
