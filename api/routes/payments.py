"""
Payments API routes.

Thin layer over PaymentProcessorService: caller identity comes from the
X-Principal header, business errors are rendered by the global handlers.
"""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_caller, get_chain_service, get_payment_service
from application.dtos.payments import (
    ClassPaymentsDTO,
    DisputeDTO,
    FileDisputeRequest,
    PayForClassRequest,
    PaymentDTO,
    ProcessorConfigDTO,
    ProcessorStatsDTO,
    RefundRequest,
    ResolveDisputeRequest,
    SetAddressRequest,
    SetFeePercentRequest,
    TransferDTO,
)
from application.services.chain_service import ChainService
from application.services.payment_service import PaymentProcessorService
from core.response import Response as ApiResponse, success_response


router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("", summary="课程支付", response_model=ApiResponse[PaymentDTO])
async def pay_for_class(
    body: PayForClassRequest,
    caller: str = Depends(get_caller),
    service: PaymentProcessorService = Depends(get_payment_service),
):
    """
    支付课程费用：平台手续费转入费用金库，其余转给讲师。

    - **class_id**: 课程ID
    - **currency**: 币种，必须为结算代币（STX）
    """
    payment = await service.pay_for_class(caller, body.class_id, body.currency)
    return success_response(data=payment, message="Payment recorded")


@router.get("/stats", summary="支付统计", response_model=ApiResponse[ProcessorStatsDTO])
async def get_stats(service: PaymentProcessorService = Depends(get_payment_service)):
    return success_response(data=await service.get_stats())


@router.get("/config", summary="支付处理器配置", response_model=ApiResponse[ProcessorConfigDTO])
async def get_config(service: PaymentProcessorService = Depends(get_payment_service)):
    return success_response(data=await service.get_config())


@router.put("/config/fee-vault", summary="设置费用金库地址", response_model=ApiResponse[ProcessorConfigDTO])
async def set_fee_vault_address(
    body: SetAddressRequest,
    caller: str = Depends(get_caller),
    service: PaymentProcessorService = Depends(get_payment_service),
):
    return success_response(data=await service.set_fee_vault_address(caller, body.address))


@router.put("/config/class-registry", summary="设置课程注册表地址", response_model=ApiResponse[ProcessorConfigDTO])
async def set_class_registry_address(
    body: SetAddressRequest,
    caller: str = Depends(get_caller),
    service: PaymentProcessorService = Depends(get_payment_service),
):
    return success_response(data=await service.set_class_registry_address(caller, body.address))


@router.put("/config/fee-percent", summary="设置平台手续费比例", response_model=ApiResponse[ProcessorConfigDTO])
async def set_platform_fee_percent(
    body: SetFeePercentRequest,
    caller: str = Depends(get_caller),
    service: PaymentProcessorService = Depends(get_payment_service),
):
    return success_response(data=await service.set_platform_fee_percent(caller, body.percent))


@router.get("/transfers", summary="结算转账流水", response_model=ApiResponse[List[TransferDTO]])
async def list_transfers(chain: ChainService = Depends(get_chain_service)):
    return success_response(data=await chain.transfers())


@router.get("/classes/{class_id}", summary="课程的支付列表", response_model=ApiResponse[ClassPaymentsDTO])
async def get_payments_for_class(
    class_id: int,
    service: PaymentProcessorService = Depends(get_payment_service),
):
    return success_response(data=await service.get_payments_for_class(class_id))


@router.get("/{payment_id}", summary="查询支付", response_model=ApiResponse[PaymentDTO])
async def get_payment(
    payment_id: int,
    service: PaymentProcessorService = Depends(get_payment_service),
):
    return success_response(data=await service.get_payment(payment_id))


@router.post("/{payment_id}/refund", summary="讲师退款", response_model=ApiResponse[PaymentDTO])
async def refund_payment(
    payment_id: int,
    body: RefundRequest,
    caller: str = Depends(get_caller),
    service: PaymentProcessorService = Depends(get_payment_service),
):
    payment = await service.refund_payment(caller, payment_id, body.refund_amount)
    return success_response(data=payment, message="Payment refunded")


@router.post("/{payment_id}/disputes", summary="发起争议", response_model=ApiResponse[DisputeDTO])
async def file_dispute(
    payment_id: int,
    body: FileDisputeRequest,
    caller: str = Depends(get_caller),
    service: PaymentProcessorService = Depends(get_payment_service),
):
    dispute = await service.file_dispute(caller, payment_id, body.reason)
    return success_response(data=dispute, message="Dispute filed")


@router.get("/{payment_id}/dispute", summary="查询争议", response_model=ApiResponse[DisputeDTO])
async def get_dispute(
    payment_id: int,
    service: PaymentProcessorService = Depends(get_payment_service),
):
    return success_response(data=await service.get_dispute(payment_id))


@router.post("/{payment_id}/dispute/resolve", summary="仲裁争议", response_model=ApiResponse[DisputeDTO])
async def resolve_dispute(
    payment_id: int,
    body: ResolveDisputeRequest,
    caller: str = Depends(get_caller),
    service: PaymentProcessorService = Depends(get_payment_service),
):
    """
    管理员仲裁争议

    - **outcome**: `refund` 或 `no-refund`
    - **refund_amount**: 仅在 `refund` 时生效
    """
    dispute = await service.resolve_dispute(caller, payment_id, body.outcome, body.refund_amount)
    return success_response(data=dispute, message="Dispute resolved")
