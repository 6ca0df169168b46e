"""Rows consumed by the report exporter and the receipt renderer."""

from dataclasses import dataclass

from community_fees.billing.ledger import PaymentLedger
from community_fees.models.base import YearMonth
from community_fees.models.community import PaymentRecord, Resident


@dataclass
class ResidentPaymentStatus:
    """Paid/unpaid status of one resident for one calendar month."""

    resident: Resident
    paid: bool
    record: PaymentRecord | None = None

    @property
    def management_fee(self) -> int:
        return self.record.management_fee if self.record else 0

    @property
    def motorcycle_fee(self) -> int:
        return self.record.motorcycle_fee if self.record else 0

    @property
    def car_fee(self) -> int:
        return self.record.car_fee if self.record else 0

    @property
    def total(self) -> int:
        return self.record.total if self.record else 0


def payment_status_report(ledger: PaymentLedger, target: YearMonth) -> list[ResidentPaymentStatus]:
    """One status row per resident for the calendar month ``target``."""
    rows = []
    for resident in ledger.store.residents.values():
        record = ledger.covering_record(resident.resident_id, target)
        rows.append(ResidentPaymentStatus(resident=resident, paid=record is not None, record=record))
    return rows


def unpaid_residents(ledger: PaymentLedger, target: YearMonth) -> list[Resident]:
    return [row.resident for row in payment_status_report(ledger, target) if not row.paid]


@dataclass
class ReceiptView:
    """One payment with its resident, ready for printing."""

    record: PaymentRecord
    resident: Resident
    operator_name: str | None = None

    @property
    def unit_label(self) -> str:
        return f"No. {self.resident.address_number}, {self.resident.floor}F"

    def period_lines(self) -> list[tuple[str, str, int]]:
        """(category, "start ~ end", amount) for each fee category."""
        r = self.record
        return [
            ("management", f"{r.management_start} ~ {r.management_end}", r.management_fee),
            ("motorcycle", f"{r.motorcycle_start} ~ {r.motorcycle_end}", r.motorcycle_fee),
            ("car", f"{r.car_start} ~ {r.car_end}", r.car_fee),
        ]


def receipt_for(
    ledger: PaymentLedger,
    record: PaymentRecord | None = None,
    operator_name: str | None = None,
) -> ReceiptView | None:
    """Receipt for ``record`` (the latest payment by default).

    Returns None when there is no record or its resident is missing.
    """
    record = record or ledger.latest()
    if record is None:
        return None
    resident = ledger.store.get_resident(record.resident_id)
    if resident is None:
        return None
    return ReceiptView(record=record, resident=resident, operator_name=operator_name)
