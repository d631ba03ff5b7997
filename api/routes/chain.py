"""
区块时钟与结算账本控制API（开发/测试环境）
"""
from fastapi import APIRouter, Depends

from api.dependencies import get_chain_service, require_manual_chain_control
from application.dtos.chain import AdvanceRequest, BalanceDTO, BlockHeightDTO, FundRequest
from application.services.chain_service import ChainService
from core.response import Response as ApiResponse, success_response


router = APIRouter(prefix="/chain", tags=["Chain"])


@router.get("/height", summary="当前区块高度", response_model=ApiResponse[BlockHeightDTO])
async def get_height(chain: ChainService = Depends(get_chain_service)):
    return success_response(data=await chain.height())


@router.post(
    "/advance",
    summary="推进区块高度",
    response_model=ApiResponse[BlockHeightDTO],
    dependencies=[Depends(require_manual_chain_control)],
)
async def advance(body: AdvanceRequest, chain: ChainService = Depends(get_chain_service)):
    return success_response(data=await chain.advance(body.blocks))


@router.post(
    "/fund",
    summary="为账户注资",
    response_model=ApiResponse[BalanceDTO],
    dependencies=[Depends(require_manual_chain_control)],
)
async def fund(body: FundRequest, chain: ChainService = Depends(get_chain_service)):
    return success_response(data=await chain.fund(body.principal, body.amount))


@router.get("/balances/{principal}", summary="账户余额", response_model=ApiResponse[BalanceDTO])
async def get_balance(principal: str, chain: ChainService = Depends(get_chain_service)):
    return success_response(data=await chain.balance(principal))
