"""Session-aware entry point used by UI code.

Every operation checks the capability table against the session user
before touching the ledger, the user directory or the registrations.
"""

import logging
from dataclasses import replace
from datetime import date, datetime

from community_fees.access import Action, Session, authorize, can_access_resident
from community_fees.accounts import RegistrationWorkflow, UserDirectory
from community_fees.billing import (
    FeeBreakdown,
    PaymentEntry,
    PaymentLedger,
    ReceiptView,
    ResidentPaymentStatus,
    payment_status_report,
    receipt_for,
)
from community_fees.config import AppConfig
from community_fees.exceptions import (
    InvalidStateTransitionError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from community_fees.models.base import YearMonth
from community_fees.models.community import (
    AddressRegistration,
    FeeConfig,
    PaymentRecord,
    Resident,
    Role,
    TierRates,
    User,
    build_resident_id,
)
from community_fees.storage import Storage, create_storage
from community_fees.store.community import FEE_CONFIG, CommunityDataStore

logger = logging.getLogger(__name__)


class FeeOffice:
    """Fee management operations on behalf of the session user."""

    def __init__(self, store: CommunityDataStore, session: Session | None = None) -> None:
        self.store = store
        self.session = session or Session(store)
        self.ledger = PaymentLedger(store)
        self.users = UserDirectory(store)
        self.registrations = RegistrationWorkflow(store)

    @classmethod
    def open(cls, config: AppConfig | None = None, storage: Storage | None = None) -> "FeeOffice":
        """Load state, ensure an admin exists and resume any saved session."""
        config = config or AppConfig()
        store = CommunityDataStore(storage=storage or create_storage(config.storage), config=config)
        store.load()
        office = cls(store)
        office.users.bootstrap_admin()
        office.session.restore()
        return office

    @property
    def user(self) -> User | None:
        return self.session.user

    def can(self, action: Action) -> bool:
        return authorize(self.user, action)

    def _require(self, action: Action) -> User:
        user = self.user
        if not authorize(user, action):
            raise PermissionDeniedError("You do not have permission for this action")
        return user

    # Residents
    def lookup_resident(
        self,
        address_number: str | None,
        floor: int | str | None,
        suffix: str | None = None,
    ) -> Resident | None:
        """Find a unit from the search form; both number and floor are required."""
        if not address_number or floor in (None, "", 0):
            raise ValidationError("Please select the full address number and floor")
        return self.store.get_resident(build_resident_id(address_number, floor, suffix))

    def accessible_residents(self) -> list[Resident]:
        """Residents the session user may view."""
        user = self.user
        return [r for r in self.store.residents.values() if can_access_resident(user, r.resident_id)]

    def visible_payments(self, resident_id: str) -> list[PaymentRecord]:
        """Payment history of one resident, newest first."""
        if not can_access_resident(self.user, resident_id):
            raise PermissionDeniedError("You cannot view this address")
        return self.ledger.records_for_resident(resident_id)

    # Payments
    def new_entry(self, resident_id: str, today: date | None = None) -> PaymentEntry | None:
        """Payment entry pre-filled from the resident's last payment."""
        resident = self.store.get_resident(resident_id)
        if resident is None:
            return None
        return PaymentEntry.prefilled(resident, today)

    def preview(self, entry: PaymentEntry) -> FeeBreakdown:
        return entry.preview(self.store.rates)

    def is_locked(self, entry: PaymentEntry) -> bool:
        return self.ledger.is_period_locked(*entry.key)

    def confirm_payment(
        self,
        entry: PaymentEntry,
        override: bool = False,
        now: datetime | None = None,
    ) -> PaymentRecord | None:
        """Record a payment, replacing a locked period only in override mode.

        Returns None when the resident does not exist.

        Raises
        ------
        InvalidStateTransitionError
            The period is already paid and ``override`` is False.
        PermissionDeniedError
            Missing submit or override capability.
        """
        self._require(Action.PAYMENT_SUBMIT)
        resident = self.store.get_resident(entry.resident_id)
        if resident is None:
            logger.warning("Cannot confirm payment for unknown resident %s", entry.resident_id)
            return None

        if self.is_locked(entry):
            if not override:
                raise InvalidStateTransitionError("This period has already been paid")
            self._require(Action.PAYMENT_OVERRIDE)

        record = entry.build_record(self.store.rates, paid_at=now)
        return self.ledger.submit(record, entry.build_resident_update(resident))

    def deletable_payments(self, now: datetime | None = None) -> list[PaymentRecord]:
        self._require(Action.PAYMENT_DELETE)
        return self.ledger.recent_payments(now)

    def delete_payment(
        self, resident_id: str, year: int, month: int, now: datetime | None = None
    ) -> bool:
        """Delete a recent payment. Returns False when no such record exists."""
        self._require(Action.PAYMENT_DELETE)
        record = self.ledger.get(resident_id, year, month)
        if record is None:
            return False
        if not self.ledger.is_recent(record, now):
            days = self.store.config.ledger.deletion_window_days
            raise InvalidStateTransitionError(f"Only payments from the last {days} days can be deleted")
        return self.ledger.delete(resident_id, year, month)

    def receipt(self, record: PaymentRecord | None = None) -> ReceiptView | None:
        user = self.user
        return receipt_for(self.ledger, record, operator_name=user.username if user else None)

    def status_report(self, target: YearMonth) -> list[ResidentPaymentStatus]:
        self._require(Action.REPORT_EXPORT)
        return payment_status_report(self.ledger, target)

    # Fee table
    def update_fee_config(
        self,
        management: int | None = None,
        motorcycle: TierRates | None = None,
        car: TierRates | None = None,
        now: datetime | None = None,
    ) -> FeeConfig:
        user = self._require(Action.FEE_CONFIG_EDIT)
        current = self.store.rates
        updated = replace(
            current,
            management=current.management if management is None else management,
            motorcycle=motorcycle or current.motorcycle,
            car=car or current.car,
            last_modified_by=user.user_id,
            last_modified_at=now or datetime.now(),
        )
        if any(
            isinstance(rate, bool) or not isinstance(rate, int) or rate < 0
            for rate in updated.rates
        ):
            raise ValidationError("Rates must be non-negative whole amounts")

        self.store.fee_config = updated
        try:
            self.store.sync(FEE_CONFIG)
        except StorageError:
            self.store.fee_config = current
            raise
        logger.info("%s updated the fee table", user.username)
        return updated

    # Users
    def create_user(self, username: str, password: str, role: Role = Role.EXT) -> User:
        self._require(Action.USER_MANAGE)
        return self.users.create_user(username, password, role)

    def update_role(self, user_id: str, role: Role) -> User:
        user = self._require(Action.USER_MANAGE)
        if user.user_id == user_id:
            raise ValidationError("You cannot change your own role")
        return self.users.update_role(user_id, role)

    def delete_user(self, user_id: str) -> User:
        user = self._require(Action.USER_MANAGE)
        return self.users.delete_user(user_id, acting_user=user)

    # Registrations
    def submit_claim(self, address_number: str | None, floor: int | str | None) -> AddressRegistration:
        return self.registrations.submit_unit_claim(self._require_login(), address_number, floor)

    def submit_staff_claim(self) -> AddressRegistration:
        return self.registrations.submit_staff_claim(self._require_login())

    def my_registrations(self) -> list[AddressRegistration]:
        return self.registrations.for_user(self._require_login().user_id)

    def review_queue(self, pending_only: bool = True) -> list[AddressRegistration]:
        self._require(Action.REGISTRATION_REVIEW)
        return self.registrations.pending() if pending_only else self.registrations.all()

    def approve_registration(self, registration_id: str) -> AddressRegistration:
        return self.registrations.approve(registration_id, self._require_login())

    def reject_registration(self, registration_id: str) -> AddressRegistration:
        return self.registrations.reject(registration_id, self._require_login())

    def _require_login(self) -> User:
        user = self.user
        if user is None:
            raise PermissionDeniedError("Please log in first")
        return user
