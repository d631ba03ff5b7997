"""
区块时钟与结算账本的开发/测试控制面
"""
from __future__ import annotations

import asyncio
from typing import List

from application.dtos.chain import BalanceDTO, BlockHeightDTO
from application.dtos.payments import TransferDTO
from core.logging_config import get_logger
from infrastructure.clock import ManualBlockClock
from infrastructure.external.settlement.ledger import InMemorySettlementLedger


logger = get_logger(__name__)


class ChainService:
    def __init__(self, clock: ManualBlockClock, ledger: InMemorySettlementLedger, lock: asyncio.Lock) -> None:
        self.clock = clock
        self.ledger = ledger
        self._lock = lock

    async def height(self) -> BlockHeightDTO:
        async with self._lock:
            return BlockHeightDTO(height=self.clock.current_height())

    async def advance(self, blocks: int) -> BlockHeightDTO:
        # 与写操作互斥，保证一次操作内看到的高度不变
        async with self._lock:
            height = self.clock.advance(blocks)
        logger.info("block_height_advanced", height=height, blocks=blocks)
        return BlockHeightDTO(height=height)

    async def fund(self, principal: str, amount: int) -> BalanceDTO:
        async with self._lock:
            balance = self.ledger.fund(principal, amount)
        logger.info("principal_funded", principal=principal, amount=amount, balance=balance)
        return BalanceDTO(principal=principal, balance=balance)

    # 读取同样持锁，避免看到进行中操作的中间状态
    async def balance(self, principal: str) -> BalanceDTO:
        async with self._lock:
            return BalanceDTO(principal=principal, balance=self.ledger.balance_of(principal))

    async def transfers(self) -> List[TransferDTO]:
        async with self._lock:
            return [TransferDTO.model_validate(t) for t in self.ledger.transfers]
