"""Enumeration types for community entities."""

from enum import Enum


class Role(str, Enum):
    """User roles, least to most privileged."""

    EXT = "EXT"  # resident / external
    KEEP = "KEEP"  # gatekeeper
    MGR = "MGR"  # manager (committee chair)
    ADMIN = "ADMIN"


class ParkingTier(str, Enum):
    NONE = "none"
    SMALL = "small"
    LARGE = "large"


class FeeCategory(str, Enum):
    MANAGEMENT = "management"
    MOTORCYCLE = "motorcycle"
    CAR = "car"


class RegistrationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


STAFF_ROLES = frozenset({Role.KEEP, Role.MGR, Role.ADMIN})
