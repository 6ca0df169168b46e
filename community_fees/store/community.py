"""Community data store: indexed in-memory maps synced to key-value storage."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from community_fees.config import AppConfig
from community_fees.exceptions import (
    EntityNotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from community_fees.models.community import (
    ADDRESS_NUMBERS,
    FLOORS,
    AddressRegistration,
    FeeConfig,
    PaymentRecord,
    Resident,
    TierRates,
    User,
)
from community_fees.storage import MemoryStorage, Storage
from community_fees.storage.serialization import to_dict

logger = logging.getLogger(__name__)

T = TypeVar("T")

USERS = "users"
REGISTRATIONS = "registrations"
PAYMENTS = "payments"
RESIDENTS = "residents"
FEE_CONFIG = "fee_config"
CURRENT_USER = "current_user"

COLLECTIONS = (USERS, REGISTRATIONS, PAYMENTS, RESIDENTS, FEE_CONFIG)

PaymentKey = tuple[str, int, int]


@dataclass
class CommunityDataStore:
    """In-memory store for community entities with an explicit sync step.

    Collections are loaded wholesale from storage by ``load()`` and written
    back wholesale by ``sync()``; the last write wins.
    """

    storage: Storage = field(default_factory=MemoryStorage)
    config: AppConfig = field(default_factory=AppConfig)

    residents: dict[str, Resident] = field(default_factory=dict)
    users: dict[str, User] = field(default_factory=dict)
    registrations: dict[str, AddressRegistration] = field(default_factory=dict)
    # Keyed by natural key (resident_id, year, month), in submission order
    payments: dict[PaymentKey, PaymentRecord] = field(default_factory=dict)
    fee_config: FeeConfig | None = None

    def key(self, name: str) -> str:
        """Storage key for a collection name."""
        return f"{self.config.storage.key_prefix}{name}"

    # Loading and syncing
    def load(self) -> "CommunityDataStore":
        """Read every collection from storage.

        Malformed collections are logged and treated as empty. Residents are
        materialized and persisted when none are stored.
        """
        self.users = {u.user_id: u for u in self._load_list(USERS, User.from_dict)}
        self.registrations = {
            r.registration_id: r
            for r in self._load_list(REGISTRATIONS, AddressRegistration.from_dict)
        }
        self.residents = {
            r.resident_id: r for r in self._load_list(RESIDENTS, Resident.from_dict)
        }
        self.payments = {p.key: p for p in self._load_list(PAYMENTS, PaymentRecord.from_dict)}
        self.fee_config = self._load_fee_config()

        if not self.residents:
            self.materialize_residents()
            self.sync(RESIDENTS)

        logger.debug("Loaded store: %s", self.summary())
        return self

    def _load_list(self, name: str, factory: Callable[[dict], T]) -> list[T]:
        raw = self.storage.get(self.key(name))
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("Ignoring %s: expected a list, got %s", name, type(raw).__name__)
            return []
        try:
            return [factory(item) for item in raw]
        except (KeyError, TypeError, ValueError, AttributeError, ValidationError):
            logger.warning("Ignoring malformed %s collection", name, exc_info=True)
            return []

    def _load_fee_config(self) -> FeeConfig:
        raw = self.storage.get(self.key(FEE_CONFIG))
        if isinstance(raw, dict):
            try:
                return FeeConfig.from_dict(raw)
            except (KeyError, TypeError, ValueError):
                logger.warning("Ignoring malformed fee config", exc_info=True)
        return self.default_fee_config()

    def default_fee_config(self) -> FeeConfig:
        """Fee table built from configured default rates."""
        defaults = self.config.fees
        return FeeConfig(
            management=defaults.management,
            motorcycle=TierRates(small=defaults.motorcycle_small, large=defaults.motorcycle_large),
            car=TierRates(small=defaults.car_small, large=defaults.car_large),
        )

    def sync(self, *names: str) -> None:
        """Write the named collections (all by default) back to storage."""
        for name in names or COLLECTIONS:
            self.storage.set(self.key(name), self._serialize(name))

    def _serialize(self, name: str) -> Any:
        if name == USERS:
            return [to_dict(u) for u in self.users.values()]
        if name == REGISTRATIONS:
            return [to_dict(r) for r in self.registrations.values()]
        if name == PAYMENTS:
            return [to_dict(p) for p in self.payments.values()]
        if name == RESIDENTS:
            return [to_dict(r) for r in self.residents.values()]
        if name == FEE_CONFIG:
            return to_dict(self.rates)
        raise ValueError(f"Unknown collection {name!r}")

    @property
    def rates(self) -> FeeConfig:
        if self.fee_config is None:
            self.fee_config = self.default_fee_config()
        return self.fee_config

    # Residents
    def materialize_residents(self) -> None:
        """Create every address number x floor unit."""
        for number in ADDRESS_NUMBERS:
            for floor in FLOORS:
                self.add_resident(Resident.for_unit(number, floor))

    def add_resident(self, resident: Resident) -> None:
        """Add a resident to the store."""
        self.residents[resident.resident_id] = resident

    def get_resident(self, resident_id: str) -> Resident | None:
        return self.residents.get(resident_id)

    def update_resident(self, resident: Resident) -> Resident:
        """Replace a stored resident, returning the previous version."""
        previous = self.residents.get(resident.resident_id)
        if previous is None:
            raise EntityNotFoundError(f"Resident {resident.resident_id} not found")
        self.residents[resident.resident_id] = resident
        return previous

    # Users
    def put_user(self, user: User) -> None:
        self.users[user.user_id] = user

    def get_user(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    def remove_user(self, user_id: str) -> User | None:
        return self.users.pop(user_id, None)

    def find_user_by_username(self, username: str) -> User | None:
        return next((u for u in self.users.values() if u.username == username), None)

    # Registrations
    def put_registration(self, registration: AddressRegistration) -> None:
        if registration.user_id not in self.users:
            raise ReferentialIntegrityError(f"User {registration.user_id} not found")
        self.registrations[registration.registration_id] = registration

    def get_registration(self, registration_id: str) -> AddressRegistration | None:
        return self.registrations.get(registration_id)

    # Payments
    def put_payment(self, record: PaymentRecord) -> PaymentRecord | None:
        """Upsert a payment by natural key, returning the record it replaced."""
        if record.resident_id not in self.residents:
            raise ReferentialIntegrityError(f"Resident {record.resident_id} not found")

        previous = self.payments.get(record.key)
        # Assigning an existing key keeps its position
        self.payments[record.key] = record
        return previous

    def get_payment(self, key: PaymentKey) -> PaymentRecord | None:
        return self.payments.get(key)

    def remove_payment(self, key: PaymentKey) -> PaymentRecord | None:
        return self.payments.pop(key, None)

    # Session
    def read_session(self) -> str | None:
        """User id stored for the current session, if any."""
        raw = self.storage.get(self.key(CURRENT_USER))
        if isinstance(raw, dict) and isinstance(raw.get("user_id"), str):
            return raw["user_id"]
        return None

    def write_session(self, user_id: str) -> None:
        self.storage.set(self.key(CURRENT_USER), {"user_id": user_id})

    def clear_session(self) -> None:
        self.storage.remove(self.key(CURRENT_USER))

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "residents": len(self.residents),
            "users": len(self.users),
            "registrations": len(self.registrations),
            "payments": len(self.payments),
        }
