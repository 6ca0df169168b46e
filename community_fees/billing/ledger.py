"""Payment ledger: one record per (resident, year, month)."""

import logging
from datetime import datetime, timedelta

from community_fees.exceptions import StorageError, ValidationError
from community_fees.models.base import YearMonth
from community_fees.models.community import PaymentRecord, Resident
from community_fees.store.community import PAYMENTS, RESIDENTS, CommunityDataStore

logger = logging.getLogger(__name__)


class PaymentLedger:
    """Upsert-by-natural-key store of payment records.

    A submission whose key already exists replaces the stored record in
    place; this is the override path used to settle disputes.
    """

    def __init__(self, store: CommunityDataStore) -> None:
        self.store = store

    def submit(
        self,
        record: PaymentRecord,
        resident_update: Resident | None = None,
    ) -> PaymentRecord | None:
        """Store ``record`` and the resident snapshot update together.

        Parameters
        ----------
        record : PaymentRecord
            Record to insert or override.
        resident_update : Resident | None
            Refreshed resident (parking and cached periods) to persist with it.

        Returns
        -------
        PaymentRecord | None
            The stored record, or None when the resident does not exist.

        Raises
        ------
        StorageError
            If persisting failed; in-memory state is rolled back.
        """
        if record.resident_id not in self.store.residents:
            logger.warning("Ignoring payment for unknown resident %s", record.resident_id)
            return None
        if resident_update is not None and resident_update.resident_id != record.resident_id:
            raise ValidationError(
                f"Resident update {resident_update.resident_id} does not match "
                f"payment for {record.resident_id}"
            )

        prior_resident = self.store.residents[record.resident_id]
        replaced = self.store.put_payment(record)
        if resident_update is not None:
            self.store.update_resident(resident_update)

        try:
            if resident_update is not None:
                self.store.sync(PAYMENTS, RESIDENTS)
            else:
                self.store.sync(PAYMENTS)
        except StorageError:
            self._restore(record.key, replaced)
            self.store.residents[record.resident_id] = prior_resident
            raise

        if replaced is not None:
            logger.info(
                "Overrode payment %s %d-%02d (total %d -> %d)",
                record.resident_id, record.year, record.month, replaced.total, record.total,
            )
        else:
            logger.info(
                "Recorded payment %s %d-%02d total %d",
                record.resident_id, record.year, record.month, record.total,
            )
        return record

    def _restore(self, key: tuple[str, int, int], previous: PaymentRecord | None) -> None:
        if previous is None:
            self.store.remove_payment(key)
        else:
            self.store.payments[key] = previous

    def get(self, resident_id: str, year: int, month: int) -> PaymentRecord | None:
        return self.store.get_payment((resident_id, year, month))

    def is_period_locked(self, resident_id: str, year: int, month: int) -> bool:
        """True when a record exists for this natural key."""
        return (resident_id, year, month) in self.store.payments

    def covering_record(self, resident_id: str, target: YearMonth) -> PaymentRecord | None:
        """Record whose management period contains the calendar month ``target``."""
        for record in self.store.payments.values():
            if record.resident_id == resident_id and record.management_period.contains(target):
                return record
        return None

    def is_paid_for_calendar_month(self, resident_id: str, target: YearMonth) -> bool:
        """True when some record's management period covers ``target``.

        One record may prepay many months, so this differs from
        ``is_period_locked``, which only matches the period start.
        """
        return self.covering_record(resident_id, target) is not None

    def delete(self, resident_id: str, year: int, month: int) -> bool:
        """Remove the record with this natural key. Returns False if none existed."""
        key = (resident_id, year, month)
        removed = self.store.remove_payment(key)
        if removed is None:
            return False
        try:
            self.store.sync(PAYMENTS)
        except StorageError:
            self.store.payments[key] = removed
            raise
        logger.info("Deleted payment %s %d-%02d", resident_id, year, month)
        return True

    def records_for_resident(self, resident_id: str) -> list[PaymentRecord]:
        """All records of one resident, newest first."""
        records = [p for p in self.store.payments.values() if p.resident_id == resident_id]
        return sorted(records, key=lambda p: p.paid_at, reverse=True)

    def deletion_cutoff(self, now: datetime | None = None, days: int | None = None) -> datetime:
        """Midnight ``days`` days before ``now``."""
        now = now or datetime.now()
        if days is None:
            days = self.store.config.ledger.deletion_window_days
        return (now - timedelta(days=days)).replace(hour=0, minute=0, second=0, microsecond=0)

    def is_recent(self, record: PaymentRecord, now: datetime | None = None) -> bool:
        return record.paid_at >= self.deletion_cutoff(now)

    def recent_payments(
        self, now: datetime | None = None, days: int | None = None
    ) -> list[PaymentRecord]:
        """Records paid within the recency window, newest first.

        Records whose resident no longer exists are skipped.
        """
        cutoff = self.deletion_cutoff(now, days)
        records = [
            p
            for p in self.store.payments.values()
            if p.paid_at >= cutoff and p.resident_id in self.store.residents
        ]
        return sorted(records, key=lambda p: p.paid_at, reverse=True)

    def latest(self) -> PaymentRecord | None:
        """Most recently paid record, used for the receipt."""
        if not self.store.payments:
            return None
        return max(self.store.payments.values(), key=lambda p: p.paid_at)
