"""
API依赖项 - 调用方身份与应用服务装配
"""
from typing import Optional

from fastapi import Depends, Header, Request

from application.services.attendance_service import AttendanceService
from application.services.chain_service import ChainService
from application.services.class_registry_service import ClassRegistryService
from application.services.payment_service import PaymentProcessorService
from core.exceptions import ManualClockDisabledException, UnauthorizedException
from infrastructure.bootstrap import Marketplace


async def get_caller(
    x_principal: Optional[str] = Header(default=None, alias="X-Principal"),
) -> str:
    """从 X-Principal 请求头获取调用方 principal"""
    principal = (x_principal or "").strip()
    if not principal:
        raise UnauthorizedException()
    return principal


def get_marketplace(request: Request) -> Marketplace:
    return request.app.state.marketplace


async def get_payment_service(
    marketplace: Marketplace = Depends(get_marketplace),
) -> PaymentProcessorService:
    return PaymentProcessorService(marketplace.uow, marketplace.lock, marketplace.payment_processor)


async def get_class_registry_service(
    marketplace: Marketplace = Depends(get_marketplace),
) -> ClassRegistryService:
    return ClassRegistryService(marketplace.uow, marketplace.lock, marketplace.class_registry)


async def get_attendance_service(
    marketplace: Marketplace = Depends(get_marketplace),
) -> AttendanceService:
    return AttendanceService(marketplace.uow, marketplace.lock, marketplace.attendance_tracker)


async def get_chain_service(
    marketplace: Marketplace = Depends(get_marketplace),
) -> ChainService:
    return ChainService(marketplace.clock, marketplace.ledger, marketplace.lock)


async def require_manual_chain_control(
    marketplace: Marketplace = Depends(get_marketplace),
) -> None:
    """仅在允许手动推进区块的环境中开放"""
    if not marketplace.settings.manual_advance_allowed:
        raise ManualClockDisabledException()
