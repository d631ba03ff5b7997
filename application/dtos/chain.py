"""
Block clock and settlement ledger DTOs (dev/test control surface).
"""
from __future__ import annotations

from pydantic import Field

from .base import DTOBase


class AdvanceRequest(DTOBase):
    blocks: int = Field(default=1, ge=0)


class FundRequest(DTOBase):
    principal: str = Field(min_length=1)
    amount: int = Field(gt=0)


class BlockHeightDTO(DTOBase):
    height: int


class BalanceDTO(DTOBase):
    principal: str
    balance: int
