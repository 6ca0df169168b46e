"""User account model."""

from dataclasses import dataclass, field
from datetime import datetime

from community_fees.models.community.enums import Role


@dataclass
class User:
    """Login account with a role and the units it may view."""

    user_id: str
    username: str
    password_hash: str
    role: Role
    created_at: datetime
    registered_addresses: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            user_id=data["user_id"],
            username=data["username"],
            password_hash=data["password_hash"],
            role=Role(data["role"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            registered_addresses=list(data.get("registered_addresses", [])),
        )
