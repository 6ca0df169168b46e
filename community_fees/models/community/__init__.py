"""Community domain models."""

from community_fees.models.community.enums import (
    STAFF_ROLES,
    FeeCategory,
    ParkingTier,
    RegistrationStatus,
    Role,
)
from community_fees.models.community.fee_config import FeeConfig, TierRates
from community_fees.models.community.payment import PaymentRecord
from community_fees.models.community.registration import STAFF_CLAIM, AddressRegistration
from community_fees.models.community.resident import (
    ADDRESS_NUMBERS,
    FLOORS,
    ParkingConfig,
    ParkingSnapshot,
    PeriodSelection,
    Resident,
    build_resident_id,
)
from community_fees.models.community.user import User

__all__ = [
    "ADDRESS_NUMBERS",
    "AddressRegistration",
    "FLOORS",
    "FeeCategory",
    "FeeConfig",
    "ParkingConfig",
    "ParkingSnapshot",
    "ParkingTier",
    "PaymentRecord",
    "PeriodSelection",
    "RegistrationStatus",
    "Resident",
    "Role",
    "STAFF_CLAIM",
    "STAFF_ROLES",
    "TierRates",
    "User",
    "build_resident_id",
]
