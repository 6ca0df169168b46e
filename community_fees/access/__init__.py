"""Access control: role capabilities and the login session."""

from community_fees.access.permissions import (
    CAPABILITIES,
    Action,
    authorize,
    can_access_resident,
    has_permission,
)
from community_fees.access.session import Session, hash_password, verify_password

__all__ = [
    "CAPABILITIES",
    "Action",
    "Session",
    "authorize",
    "can_access_resident",
    "has_permission",
    "hash_password",
    "verify_password",
]
