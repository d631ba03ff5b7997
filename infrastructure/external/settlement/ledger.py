"""
In-process settlement ledger: an append-only transfer journal plus balances.

Implements the domain SettlementGateway port. Participates in the unit of
work through ``snapshot``/``restore`` so a failed operation leaves no
transfer behind.
"""
from __future__ import annotations

import copy
from collections import defaultdict
from typing import Dict, List, Tuple

from core.logging_config import get_logger
from domain.payment.entity import Transfer
from domain.payment.exceptions import TransferRejected
from domain.services.clock import BlockClock


logger = get_logger(__name__)

LedgerSnapshot = Tuple[List[Transfer], Dict[str, int]]


class InMemorySettlementLedger:
    def __init__(self, clock: BlockClock, *, token: str = "STX", strict_balances: bool = False) -> None:
        self.clock = clock
        self.token = token
        self.strict_balances = strict_balances
        self._transfers: List[Transfer] = []
        self._balances: Dict[str, int] = defaultdict(int)

    async def transfer(self, amount: int, sender: str, recipient: str) -> Transfer:
        if amount < 0:
            raise TransferRejected(amount, sender, recipient, "negative_amount")
        if self.strict_balances and self._balances[sender] < amount:
            logger.warning(
                "settlement_insufficient_funds",
                sender=sender,
                amount=amount,
                balance=self._balances[sender],
            )
            raise TransferRejected(amount, sender, recipient, "insufficient_funds")

        self._balances[sender] -= amount
        self._balances[recipient] += amount
        entry = Transfer(
            sequence=len(self._transfers),
            amount=amount,
            sender=sender,
            recipient=recipient,
            block_height=self.clock.current_height(),
        )
        self._transfers.append(entry)
        logger.debug("settlement_transfer", sequence=entry.sequence, amount=amount, sender=sender, recipient=recipient)
        return entry

    def fund(self, principal: str, amount: int) -> int:
        """Credit ``principal`` out of thin air (dev/test faucet); returns the new balance."""
        if amount <= 0:
            raise ValueError("Funding amount must be positive")
        self._balances[principal] += amount
        return self._balances[principal]

    def balance_of(self, principal: str) -> int:
        return self._balances.get(principal, 0)

    @property
    def transfers(self) -> List[Transfer]:
        return list(self._transfers)

    def snapshot(self) -> LedgerSnapshot:
        return list(self._transfers), copy.copy(dict(self._balances))

    def restore(self, snapshot: LedgerSnapshot) -> None:
        transfers, balances = snapshot
        self._transfers = list(transfers)
        self._balances = defaultdict(int, balances)

    def reset(self) -> None:
        self._transfers = []
        self._balances = defaultdict(int)
