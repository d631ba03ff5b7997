"""
Settlement gateway abstraction (domain/service).

This layer must not import infrastructure. It defines the replaceable
monetary transfer contract the payment processor depends upon.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from domain.payment.entity import Transfer


@runtime_checkable
class SettlementGateway(Protocol):
    """Moves settlement-token amounts between principals.

    ``transfer`` either returns the journal entry or raises
    ``domain.payment.exceptions.TransferRejected``; it never half-applies.
    """

    token: str

    async def transfer(self, amount: int, sender: str, recipient: str) -> Transfer: ...
