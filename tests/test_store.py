"""Tests for CommunityDataStore loading, syncing and integrity checks."""

import json
from datetime import datetime
from typing import Callable

import pytest

from community_fees.config import AppConfig, FeeDefaults, StorageConfig
from community_fees.exceptions import EntityNotFoundError, ReferentialIntegrityError
from community_fees.models.community import (
    ADDRESS_NUMBERS,
    AddressRegistration,
    FeeConfig,
    PaymentRecord,
    Resident,
    TierRates,
)
from community_fees.storage import MemoryStorage
from community_fees.store import CommunityDataStore
from community_fees.store.community import PAYMENTS, RESIDENTS, USERS


class TestLoad:
    """Tests for load and resident materialization."""

    def test_materializes_all_units(self, store: CommunityDataStore) -> None:
        assert len(store.residents) == len(ADDRESS_NUMBERS) * 10
        assert "13-1" in store.residents
        assert "13-10" in store.residents
        assert "21-2-3" in store.residents
        assert "13-11" not in store.residents

    def test_resident_ids_derive_from_number_and_floor(self, store: CommunityDataStore) -> None:
        for resident in store.residents.values():
            assert resident.resident_id == f"{resident.address_number}-{resident.floor}"

    def test_materialized_residents_persisted(self, store: CommunityDataStore) -> None:
        stored = store.storage.get(store.key(RESIDENTS))
        assert len(stored) == 160

    def test_existing_residents_not_rematerialized(self, storage: MemoryStorage) -> None:
        store = CommunityDataStore(storage=storage).load()
        store.residents["13-5"].car_count = 2
        store.sync(RESIDENTS)

        reloaded = CommunityDataStore(storage=storage).load()
        assert reloaded.residents["13-5"].car_count == 2

    def test_malformed_json_loads_empty(self) -> None:
        storage = MemoryStorage({"jiahe_users": "[{broken", "jiahe_payments": "not json"})
        store = CommunityDataStore(storage=storage).load()
        assert store.users == {}
        assert store.payments == {}

    def test_wrong_shape_loads_empty(self) -> None:
        storage = MemoryStorage(
            {
                "jiahe_users": json.dumps({"user_id": "u1"}),
                "jiahe_registrations": json.dumps([{"registration_id": "r1"}]),
            }
        )
        store = CommunityDataStore(storage=storage).load()
        assert store.users == {}
        assert store.registrations == {}

    def test_bad_period_string_loads_empty(
        self, storage: MemoryStorage, make_record: Callable[..., PaymentRecord]
    ) -> None:
        store = CommunityDataStore(storage=storage).load()
        store.put_payment(make_record())
        store.sync(PAYMENTS)
        raw = storage.get(store.key(PAYMENTS))
        raw[0]["management_end"] = "2024-13"
        storage.set(store.key(PAYMENTS), raw)

        assert CommunityDataStore(storage=storage).load().payments == {}

    def test_malformed_residents_rematerialized(self) -> None:
        storage = MemoryStorage({"jiahe_residents": "]"})
        store = CommunityDataStore(storage=storage).load()
        assert len(store.residents) == 160

    def test_mismatched_resident_id_rematerialized(self, storage: MemoryStorage) -> None:
        store = CommunityDataStore(storage=storage).load()
        raw = storage.get(store.key(RESIDENTS))
        raw[0]["resident_id"] = "99-1"
        storage.set(store.key(RESIDENTS), raw)

        reloaded = CommunityDataStore(storage=storage).load()

        assert "99-1" not in reloaded.residents
        assert len(reloaded.residents) == 160

    def test_key_prefix(self) -> None:
        config = AppConfig(storage=StorageConfig(key_prefix="test_"))
        storage = MemoryStorage()
        CommunityDataStore(storage=storage, config=config).load()
        assert storage.keys() == ["test_residents"]


class TestFeeConfig:
    def test_defaults_from_config(self) -> None:
        config = AppConfig(fees=FeeDefaults(management=900, car_large=2000))
        store = CommunityDataStore(config=config).load()
        assert store.rates.management == 900
        assert store.rates.car.large == 2000
        assert store.rates.motorcycle.small == 100

    def test_round_trip(self, storage: MemoryStorage) -> None:
        store = CommunityDataStore(storage=storage).load()
        store.fee_config = FeeConfig(
            management=850,
            motorcycle=TierRates(120, 220),
            car=TierRates(1300, 1900),
            last_modified_by="user-mgr",
            last_modified_at=datetime(2024, 2, 1, 9, 30),
        )
        store.sync()

        assert CommunityDataStore(storage=storage).load().fee_config == store.fee_config

    def test_malformed_fee_config_uses_defaults(self) -> None:
        storage = MemoryStorage({"jiahe_fee_config": json.dumps({"management": 1})})
        assert CommunityDataStore(storage=storage).load().rates == FeeConfig()

    def test_numeric_strings_loaded_as_int(self) -> None:
        raw = {
            "management": "850",
            "motorcycle": {"small": "150", "large": "250"},
            "car": {"small": 1200, "large": 1800},
        }
        storage = MemoryStorage({"jiahe_fee_config": json.dumps(raw)})

        rates = CommunityDataStore(storage=storage).load().rates

        assert rates.motorcycle == TierRates(small=150, large=250)
        assert rates.management == 850
        assert all(type(rate) is int for rate in rates.rates)

    @pytest.mark.parametrize(
        "motorcycle",
        [
            {"small": "1e2", "large": "200"},
            {"small": 100, "large": -200},
            {"small": 100},
            [100, 200],
            {"small": 1.5, "large": 200},
        ],
    )
    def test_bad_stored_rates_use_defaults(self, motorcycle: object) -> None:
        raw = {"management": 900, "motorcycle": motorcycle, "car": {"small": 1200, "large": 1800}}
        storage = MemoryStorage({"jiahe_fee_config": json.dumps(raw)})

        rates = CommunityDataStore(storage=storage).load().rates

        assert rates == FeeConfig()
        assert all(type(rate) is int for rate in rates.rates)


class TestIntegrity:
    """Tests for referential integrity and lookups."""

    def test_payment_requires_resident(
        self, store: CommunityDataStore, make_record: Callable[..., PaymentRecord]
    ) -> None:
        with pytest.raises(ReferentialIntegrityError, match="Resident .* not found"):
            store.put_payment(make_record(resident_id="99-1"))

    def test_put_payment_returns_replaced(
        self, store: CommunityDataStore, make_record: Callable[..., PaymentRecord]
    ) -> None:
        first = make_record(total=800)
        assert store.put_payment(first) is None
        assert store.put_payment(make_record(total=500)) is first
        assert len(store.payments) == 1

    def test_registration_requires_user(self, store: CommunityDataStore, now: datetime) -> None:
        registration = AddressRegistration(
            registration_id="reg-1", user_id="ghost", resident_id="13-5", requested_at=now
        )
        with pytest.raises(ReferentialIntegrityError, match="User ghost not found"):
            store.put_registration(registration)

    def test_update_unknown_resident(self, store: CommunityDataStore) -> None:
        with pytest.raises(EntityNotFoundError):
            store.update_resident(Resident.for_unit("99", 1))

    def test_find_user_by_username(self, store: CommunityDataStore, keeper) -> None:
        assert store.find_user_by_username("guard") is keeper
        assert store.find_user_by_username("nobody") is None


class TestSyncAndSession:
    def test_sync_named_collection_only(self, storage: MemoryStorage) -> None:
        store = CommunityDataStore(storage=storage).load()
        store.sync(USERS)
        assert storage.get("jiahe_payments") is None
        assert storage.get("jiahe_users") == []

    def test_sync_unknown_collection(self, store: CommunityDataStore) -> None:
        with pytest.raises(ValueError):
            store.sync("widgets")

    def test_session_helpers(self, store: CommunityDataStore) -> None:
        assert store.read_session() is None
        store.write_session("user-1")
        assert store.read_session() == "user-1"
        store.clear_session()
        assert store.read_session() is None

    def test_summary(
        self, store: CommunityDataStore, keeper, make_record: Callable[..., PaymentRecord]
    ) -> None:
        store.put_payment(make_record())
        assert store.summary() == {
            "residents": 160,
            "users": 1,
            "registrations": 0,
            "payments": 1,
        }
