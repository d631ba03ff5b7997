"""
Payment domain events.

Dataclass events record important payment lifecycle facts for downstream handling
(e.g., audit logging). Domain remains free of infrastructure imports.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import uuid


@dataclass
class PaymentEvent:
    payment_id: Optional[int]
    block_height: int
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class PaymentRecorded(PaymentEvent):
    class_id: int = 0
    participant: str = ""
    amount: int = 0
    fee: int = 0
    net: int = 0


@dataclass
class PaymentRefunded(PaymentEvent):
    amount: int = 0
    via_dispute: bool = False


@dataclass
class DisputeFiled(PaymentEvent):
    reason: str = ""


@dataclass
class DisputeResolved(PaymentEvent):
    outcome: str = ""
    resolver: str = ""


@dataclass
class ProcessorConfigChanged(PaymentEvent):
    setting: str = ""
    value: str = ""
