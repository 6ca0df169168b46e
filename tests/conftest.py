"""Pytest configuration and fixtures."""

from datetime import datetime
from typing import Callable

import pytest

from community_fees.accounts import UserDirectory
from community_fees.billing import PaymentLedger
from community_fees.exceptions import StorageError
from community_fees.models.community import PaymentRecord, Role, User
from community_fees.office import FeeOffice
from community_fees.storage import MemoryStorage
from community_fees.store import CommunityDataStore


class FailingStorage(MemoryStorage):
    """Memory storage whose writes can be made to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    def set(self, key: str, value: object) -> None:
        if self.fail:
            raise StorageError("disk full")
        super().set(key, value)


@pytest.fixture
def now() -> datetime:
    """Fixed clock for reproducible tests."""
    return datetime(2024, 3, 15, 10, 0, 0)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> CommunityDataStore:
    """Loaded store with all residents materialized."""
    return CommunityDataStore(storage=storage).load()


@pytest.fixture
def ledger(store: CommunityDataStore) -> PaymentLedger:
    return PaymentLedger(store)


@pytest.fixture
def directory(store: CommunityDataStore) -> UserDirectory:
    return UserDirectory(store)


@pytest.fixture
def admin(directory: UserDirectory) -> User:
    return directory.create_user("boss", "pw-boss", Role.ADMIN, user_id="user-admin")


@pytest.fixture
def manager(directory: UserDirectory) -> User:
    return directory.create_user("chair", "pw-chair", Role.MGR, user_id="user-mgr")


@pytest.fixture
def keeper(directory: UserDirectory) -> User:
    return directory.create_user("guard", "pw-guard", Role.KEEP, user_id="user-keep")


@pytest.fixture
def resident_user(directory: UserDirectory) -> User:
    return directory.create_user("amy", "pw-amy", Role.EXT, user_id="user-ext")


@pytest.fixture
def office(store: CommunityDataStore) -> FeeOffice:
    return FeeOffice(store)


@pytest.fixture
def make_record(now: datetime) -> Callable[..., PaymentRecord]:
    """Factory for payment records; fees default to a single 800 month."""

    def _make(
        resident_id: str = "13-5",
        start: str = "2024-01",
        end: str | None = None,
        total: int = 800,
        paid_at: datetime | None = None,
    ) -> PaymentRecord:
        year, month = (int(part) for part in start.split("-"))
        return PaymentRecord(
            resident_id=resident_id,
            year=year,
            month=month,
            management_fee=total,
            motorcycle_fee=0,
            car_fee=0,
            total=total,
            paid_at=paid_at or now,
            management_start=start,
            management_end=end or start,
            motorcycle_start=start,
            motorcycle_end=start,
            car_start=start,
            car_end=start,
        )

    return _make


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()
