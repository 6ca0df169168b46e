"""Demo data for a community: resident accounts, claims and payments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterator

from community_fees.accounts import RegistrationWorkflow, UserDirectory
from community_fees.billing import PaymentEntry, PaymentLedger
from community_fees.generators.base import BaseGenerator
from community_fees.models.base import PeriodRange, YearMonth
from community_fees.models.community import ParkingConfig, PeriodSelection, Resident, Role, User
from community_fees.store.community import CommunityDataStore

logger = logging.getLogger(__name__)


@dataclass
class DemoAccount:
    """A generated user with its clear-text password."""

    user: User
    password: str


class PaymentEntryGenerator(BaseGenerator):
    """Generate plausible payment entries."""

    # Most households prepay a quarter, half or full year
    SPAN_CHOICES = [1, 3, 6, 12]
    SPAN_WEIGHTS = [0.40, 0.30, 0.15, 0.15]

    def generate(self, resident: Resident, start: YearMonth) -> PaymentEntry:
        span = self.random.choices(self.SPAN_CHOICES, weights=self.SPAN_WEIGHTS, k=1)[0]
        period = PeriodRange(start=start, end=start.shift(span - 1))

        motorcycle = ParkingConfig(
            small_count=self.random.choices([0, 1, 2], weights=[0.5, 0.35, 0.15], k=1)[0],
            large_count=self.random.choices([0, 1], weights=[0.85, 0.15], k=1)[0],
        )
        car = ParkingConfig(
            small_count=self.random.choices([0, 1], weights=[0.7, 0.3], k=1)[0],
            large_count=self.random.choices([0, 1], weights=[0.9, 0.1], k=1)[0],
        )
        return PaymentEntry(
            resident_id=resident.resident_id,
            periods=PeriodSelection(
                management=period,
                motorcycle=PeriodRange(start=period.start, end=period.end),
                car=PeriodRange(start=period.start, end=period.end),
            ),
            motorcycle=motorcycle,
            car=car,
        )

    def generate_batch(
        self, residents: list[Resident], start: YearMonth, count: int
    ) -> Iterator[PaymentEntry]:
        """Entries for ``count`` distinct residents, all starting at ``start``."""
        for resident in self.random.sample(residents, k=min(count, len(residents))):
            yield self.generate(resident, start)


class DemoDataGenerator(BaseGenerator):
    """Populate a store with accounts, approved claims and payments."""

    def __init__(self, seed: int | None = None, locale: str = "en_US") -> None:
        super().__init__(seed, locale)
        self._entries = PaymentEntryGenerator(seed=seed, locale=locale)

    def generate_account(self, directory: UserDirectory, role: Role = Role.EXT) -> DemoAccount:
        username = self.fake.unique.user_name()
        password = self.fake.password(length=10)
        created_at = self.fake.date_time_between(start_date="-2y", end_date="now")
        user = directory.create_user(username, password, role, now=created_at)
        return DemoAccount(user=user, password=password)

    def populate(
        self,
        store: CommunityDataStore,
        num_residents: int = 20,
        num_staff: int = 2,
        num_payments: int = 40,
        start: YearMonth | None = None,
    ) -> list[DemoAccount]:
        """Create accounts, approve one unit claim each and record payments.

        Parameters
        ----------
        store : CommunityDataStore
            Loaded store to populate.
        num_residents : int
            EXT accounts to create.
        num_staff : int
            KEEP accounts to create.
        num_payments : int
            Payment records to create, spread over consecutive start months.
        start : YearMonth | None
            First billed month (default: a year before today).

        Returns
        -------
        list[DemoAccount]
            Generated accounts with their passwords.
        """
        directory = UserDirectory(store)
        workflow = RegistrationWorkflow(store)
        ledger = PaymentLedger(store)

        admin = directory.bootstrap_admin() or next(
            u for u in store.users.values() if u.role == Role.ADMIN
        )
        accounts = [self.generate_account(directory, Role.KEEP) for _ in range(num_staff)]

        residents = list(store.residents.values())
        for _ in range(num_residents):
            account = self.generate_account(directory)
            unit = self.random.choice(residents)
            claim = workflow.submit_unit_claim(account.user, unit.address_number, unit.floor)
            if self.random.random() < 0.8:
                workflow.approve(claim.registration_id, admin)
            account.user = store.users[account.user.user_id]
            accounts.append(account)

        if start is None:
            today = datetime.now()
            start = YearMonth(today.year, today.month).shift(-12)

        month = start
        remaining = num_payments
        while remaining > 0:
            batch = min(remaining, len(residents))
            paid_at = datetime(month.year, month.month, 1) + timedelta(
                days=self.random.randint(0, 27)
            )
            for entry in self._entries.generate_batch(residents, month, batch):
                record = entry.build_record(store.rates, paid_at=paid_at)
                resident = store.residents[entry.resident_id]
                ledger.submit(record, entry.build_resident_update(resident))
            remaining -= batch
            month = month.shift(1)

        logger.info("Populated demo data: %s", store.summary())
        return accounts
