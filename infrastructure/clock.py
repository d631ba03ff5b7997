"""
手动推进的区块时钟

The marketplace never advances height on its own; operators (or tests) call
``advance``. Height only moves forward.
"""
from __future__ import annotations

from core.logging_config import get_logger


logger = get_logger(__name__)


class ManualBlockClock:
    def __init__(self, initial_height: int = 0) -> None:
        if initial_height < 0:
            raise ValueError("Block height must be non-negative")
        self._height = initial_height

    def current_height(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        if blocks < 0:
            raise ValueError("Block height cannot move backwards")
        self._height += blocks
        logger.debug("block_height_advanced", height=self._height, blocks=blocks)
        return self._height
