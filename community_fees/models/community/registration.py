"""Address registration (claim) model."""

from dataclasses import dataclass
from datetime import datetime

from community_fees.models.community.enums import RegistrationStatus

# Claims a gatekeeper role instead of a unit
STAFF_CLAIM = "__staff__"


@dataclass
class AddressRegistration:
    """A user's request to be linked to a unit, or to become staff."""

    registration_id: str
    user_id: str
    resident_id: str
    requested_at: datetime
    status: RegistrationStatus = RegistrationStatus.PENDING
    approved_by: str | None = None
    approved_at: datetime | None = None

    @property
    def is_staff_claim(self) -> bool:
        return self.resident_id == STAFF_CLAIM

    @classmethod
    def from_dict(cls, data: dict) -> "AddressRegistration":
        approved_at = data.get("approved_at")
        return cls(
            registration_id=data["registration_id"],
            user_id=data["user_id"],
            resident_id=data["resident_id"],
            requested_at=datetime.fromisoformat(data["requested_at"]),
            status=RegistrationStatus(data["status"]),
            approved_by=data.get("approved_by"),
            approved_at=datetime.fromisoformat(approved_at) if approved_at else None,
        )
