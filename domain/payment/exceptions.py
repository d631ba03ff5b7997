"""
Payment processor exceptions mapped to the unified BusinessException categories.
"""
from __future__ import annotations

from typing import Optional

from domain.common.exceptions import (
    AuthorizationException,
    CapacityException,
    DomainValidationException,
    NotFoundException,
    SettlementException,
    StateConflictException,
)
from shared.codes.payment_codes import PaymentCode


class NotAuthorizedException(AuthorizationException):
    def __init__(self, caller: Optional[str] = None):
        super().__init__(
            "Only the processor owner may perform this operation",
            code=PaymentCode.NOT_AUTHORIZED,
            error_type="NotAuthorized",
            caller=caller,
        )


class OnlyInstructorException(AuthorizationException):
    def __init__(self, caller: Optional[str] = None):
        super().__init__(
            "Only the instructor of the payment may refund it",
            code=PaymentCode.ONLY_INSTRUCTOR,
            error_type="OnlyInstructor",
            caller=caller,
        )


class OnlyParticipantException(AuthorizationException):
    def __init__(self, caller: Optional[str] = None):
        super().__init__(
            "Only the participant of the payment may dispute it",
            code=PaymentCode.ONLY_PARTICIPANT,
            error_type="OnlyParticipant",
            caller=caller,
        )


class InvalidClassException(NotFoundException):
    def __init__(self, class_id: int):
        super().__init__(
            f"Class {class_id} does not exist",
            code=PaymentCode.INVALID_CLASS,
            error_type="InvalidClass",
            details={"class_id": class_id},
        )


class PaymentNotFoundException(NotFoundException):
    def __init__(self, payment_id: int):
        super().__init__(
            f"Payment {payment_id} not found",
            code=PaymentCode.NO_PAYMENT_FOUND,
            error_type="NoPaymentFound",
            details={"payment_id": payment_id},
        )


class DisputeNotFoundException(NotFoundException):
    def __init__(self, payment_id: int):
        super().__init__(
            f"No dispute filed for payment {payment_id}",
            code=PaymentCode.NO_DISPUTE,
            error_type="NoDispute",
            details={"payment_id": payment_id},
        )


class ClassNotActiveException(StateConflictException):
    def __init__(self, class_id: int):
        super().__init__(
            f"Class {class_id} is not active",
            code=PaymentCode.CLASS_NOT_ACTIVE,
            error_type="ClassNotActive",
            details={"class_id": class_id},
        )


class AlreadyPaidException(StateConflictException):
    def __init__(self, class_id: int, participant: str):
        super().__init__(
            f"{participant} already paid for class {class_id}",
            code=PaymentCode.ALREADY_PAID,
            error_type="AlreadyPaid",
            details={"class_id": class_id, "participant": participant},
        )


class InvalidPaymentStatusException(StateConflictException):
    def __init__(self, payment_id: int, status: str):
        super().__init__(
            f"Payment {payment_id} has status {status}",
            code=PaymentCode.INVALID_STATUS,
            error_type="InvalidStatus",
            details={"payment_id": payment_id, "status": status},
        )


class DisputeOpenException(StateConflictException):
    def __init__(self, payment_id: int):
        super().__init__(
            f"Payment {payment_id} has an open dispute",
            code=PaymentCode.DISPUTE_OPEN,
            error_type="DisputeOpen",
            details={"payment_id": payment_id},
        )


class DisputeAlreadyFiledException(StateConflictException):
    def __init__(self, payment_id: int):
        super().__init__(
            f"A dispute was already filed for payment {payment_id}",
            code=PaymentCode.DISPUTE_ALREADY_FILED,
            error_type="DisputeAlreadyFiled",
            details={"payment_id": payment_id},
        )


class AlreadyResolvedException(StateConflictException):
    def __init__(self, payment_id: int):
        super().__init__(
            f"Dispute for payment {payment_id} is already resolved",
            code=PaymentCode.ALREADY_RESOLVED,
            error_type="AlreadyResolved",
            details={"payment_id": payment_id},
        )


class InvalidCurrencyException(DomainValidationException):
    def __init__(self, currency: str, expected: str):
        super().__init__(
            f"Unsupported currency {currency!r}, expected {expected}",
            code=PaymentCode.INVALID_CURRENCY,
            error_type="InvalidCurrency",
            field="currency",
            details={"currency": currency, "expected": expected},
        )


class InvalidFeePercentException(DomainValidationException):
    def __init__(self, percent: int, maximum: int):
        super().__init__(
            f"Platform fee percent must be in (0, {maximum}]: {percent}",
            code=PaymentCode.INVALID_FEE_PERCENT,
            error_type="InvalidFeePercent",
            field="percent",
            details={"percent": percent, "max": maximum},
        )


class InvalidTimestampException(DomainValidationException):
    def __init__(self, start_time: int, block_height: int):
        super().__init__(
            f"Class started at block {start_time}, current height is {block_height}",
            code=PaymentCode.INVALID_TIMESTAMP,
            error_type="InvalidTimestamp",
            details={"start_time": start_time, "block_height": block_height},
        )


class InvalidRefundAmountException(DomainValidationException):
    def __init__(self, refund_amount: int, paid_amount: int):
        super().__init__(
            f"Refund amount {refund_amount} is not within (0, {paid_amount}]",
            code=PaymentCode.INVALID_REFUND_AMOUNT,
            error_type="InvalidRefundAmount",
            field="refund_amount",
            details={"refund_amount": refund_amount, "amount": paid_amount},
        )


class DisputeNotAllowedException(DomainValidationException):
    def __init__(self, payment_id: int, elapsed: int, window: int):
        super().__init__(
            f"Dispute window of {window} blocks elapsed for payment {payment_id}",
            code=PaymentCode.DISPUTE_NOT_ALLOWED,
            error_type="DisputeNotAllowed",
            details={"payment_id": payment_id, "elapsed": elapsed, "window": window},
        )


class InvalidDisputeReasonException(DomainValidationException):
    def __init__(self):
        super().__init__(
            "Dispute reason must not be empty",
            code=PaymentCode.INVALID_DISPUTE_REASON,
            error_type="InvalidDisputeReason",
            field="reason",
        )


class InvalidOutcomeException(DomainValidationException):
    def __init__(self, outcome: str):
        super().__init__(
            f"Invalid dispute outcome: {outcome!r}",
            code=PaymentCode.INVALID_OUTCOME,
            error_type="InvalidOutcome",
            field="outcome",
            details={"outcome": outcome},
        )


class InvalidPrincipalException(DomainValidationException):
    def __init__(self, field: str):
        super().__init__(
            f"{field} must be a non-empty principal",
            code=PaymentCode.INVALID_PRINCIPAL,
            error_type="InvalidPrincipal",
            field=field,
        )


class MaxPaymentsExceededException(CapacityException):
    def __init__(self, class_id: int, limit: int):
        super().__init__(
            f"Class {class_id} reached the limit of {limit} payments",
            code=PaymentCode.MAX_PAYMENTS_EXCEEDED,
            error_type="MaxPaymentsExceeded",
            limit=limit,
        )


class TransferRejected(SettlementException):
    """Raised by a settlement gateway when a single transfer cannot be executed."""

    def __init__(self, amount: int, sender: str, recipient: str, reason: str):
        super().__init__(
            f"Transfer of {amount} from {sender} to {recipient} rejected: {reason}",
            code=PaymentCode.TRANSFER_REJECTED,
            error_type="TransferRejected",
            details={"amount": amount, "sender": sender, "recipient": recipient, "reason": reason},
        )
        self.reason = reason


class FeeTransferFailedException(SettlementException):
    def __init__(self, cause: TransferRejected):
        super().__init__(
            "Platform fee transfer failed",
            code=PaymentCode.FEE_TRANSFER_FAILED,
            error_type="FeeTransferFailed",
            details=cause.details,
        )


class InstructorTransferFailedException(SettlementException):
    def __init__(self, cause: TransferRejected):
        super().__init__(
            "Instructor payout transfer failed",
            code=PaymentCode.INSTRUCTOR_TRANSFER_FAILED,
            error_type="InstructorTransferFailed",
            details=cause.details,
        )


class RefundTransferFailedException(SettlementException):
    def __init__(self, cause: TransferRejected):
        super().__init__(
            "Refund transfer failed",
            code=PaymentCode.REFUND_TRANSFER_FAILED,
            error_type="RefundTransferFailed",
            details=cause.details,
        )
