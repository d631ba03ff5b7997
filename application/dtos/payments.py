"""
Payment DTOs (Pydantic v2) used at application boundaries.

Request models only check shapes and types; business limits (fee range,
refund bounds, empty reasons) are enforced by the domain so callers get the
stable error names.
"""
from __future__ import annotations

from typing import Optional
from pydantic import Field, field_validator

from .base import DTOBase, enum_value


class PayForClassRequest(DTOBase):
    class_id: int
    currency: str = Field(default="STX")


class RefundRequest(DTOBase):
    refund_amount: int


class FileDisputeRequest(DTOBase):
    reason: str


class ResolveDisputeRequest(DTOBase):
    outcome: str = Field(description="refund | no-refund")
    # no-refund 时被忽略
    refund_amount: int = 0


class SetAddressRequest(DTOBase):
    address: str


class SetFeePercentRequest(DTOBase):
    percent: int


class PaymentDTO(DTOBase):
    id: int
    class_id: int
    participant: str
    amount: int
    timestamp: int
    instructor: str
    currency: str
    status: str
    refunded: bool

    status_value = field_validator("status", mode="before")(enum_value)


class DisputeDTO(DTOBase):
    payment_id: int
    reason: str
    timestamp: int
    resolver: str
    resolved: bool
    outcome: str

    outcome_value = field_validator("outcome", mode="before")(enum_value)


class ClassPaymentsDTO(DTOBase):
    class_id: int
    # None: 该课程从未有过支付
    payment_ids: Optional[list[int]] = None
    count: int = 0


class ProcessorStatsDTO(DTOBase):
    total_fees_collected: int
    total_payments_processed: int
    platform_fee_percent: int


class ProcessorConfigDTO(DTOBase):
    owner: str
    fee_vault_address: str
    class_registry_address: str
    platform_fee_percent: int
    settlement_token: str
    dispute_window_blocks: int
    max_payments_per_class: int


class TransferDTO(DTOBase):
    sequence: int
    amount: int
    sender: str
    recipient: str
    block_height: int
