"""
Payment processor specific codes (6xxxx).

The last two digits follow the processor's historical error numbering so
that operators can match log lines against older reports.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):
    # Generic success
    SUCCESS = 0

    NOT_AUTHORIZED = 60100
    INVALID_CLASS = 60101
    CLASS_NOT_ACTIVE = 60105
    ALREADY_PAID = 60106
    FEE_TRANSFER_FAILED = 60107
    INSTRUCTOR_TRANSFER_FAILED = 60108
    INVALID_FEE_PERCENT = 60109
    INVALID_TIMESTAMP = 60112
    REFUND_TRANSFER_FAILED = 60114
    DISPUTE_OPEN = 60115
    NO_PAYMENT_FOUND = 60116
    INVALID_REFUND_AMOUNT = 60117
    ONLY_INSTRUCTOR = 60118
    ONLY_PARTICIPANT = 60119
    MAX_PAYMENTS_EXCEEDED = 60121
    INVALID_CURRENCY = 60122
    DISPUTE_NOT_ALLOWED = 60123
    INVALID_DISPUTE_REASON = 60125
    INVALID_STATUS = 60126
    NO_DISPUTE = 60127
    ALREADY_RESOLVED = 60128
    INVALID_OUTCOME = 60129
    DISPUTE_ALREADY_FILED = 60130
    INVALID_PRINCIPAL = 60131
    TRANSFER_REJECTED = 60140
