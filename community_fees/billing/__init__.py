"""Fee calculation, payment entry and the payment ledger."""

from community_fees.billing.calculator import FeeBreakdown, calculate_fees, month_span
from community_fees.billing.entry import PaymentEntry
from community_fees.billing.ledger import PaymentLedger
from community_fees.billing.periods import PeriodForm
from community_fees.billing.reports import (
    ReceiptView,
    ResidentPaymentStatus,
    payment_status_report,
    receipt_for,
)

__all__ = [
    "FeeBreakdown",
    "PaymentEntry",
    "PaymentLedger",
    "PeriodForm",
    "ReceiptView",
    "ResidentPaymentStatus",
    "calculate_fees",
    "month_span",
    "payment_status_report",
    "receipt_for",
]
