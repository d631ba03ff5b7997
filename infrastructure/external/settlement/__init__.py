"""
Factory for settlement gateways.
"""
from __future__ import annotations

from core.config import PaymentSettings
from domain.services.clock import BlockClock
from domain.services.settlement import SettlementGateway

from .ledger import InMemorySettlementLedger


def get_settlement_gateway(config: PaymentSettings, clock: BlockClock) -> SettlementGateway:
    name = (config.settlement_backend or "ledger").lower()
    if name in {"ledger", "memory", "inmemory"}:
        return InMemorySettlementLedger(
            clock,
            token=config.settlement_token,
            strict_balances=config.strict_balances,
        )
    raise ValueError(f"Unsupported settlement backend: {name}")


__all__ = ["InMemorySettlementLedger", "get_settlement_gateway"]
