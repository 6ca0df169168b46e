"""Custom exception hierarchy for community-fees.

Messages are meant to be shown to the user as-is.
"""


class CommunityFeesError(Exception):
    """Base exception for all community-fees errors."""


class EntityNotFoundError(CommunityFeesError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class ValidationError(CommunityFeesError):
    """Raised when user input is incomplete or malformed."""


class DuplicateEntityError(ValidationError):
    """Raised when a unique key (username, claim) already exists."""


class InvalidStateTransitionError(CommunityFeesError):
    """Raised when an entity is in an invalid state for the operation."""


class PermissionDeniedError(CommunityFeesError):
    """Raised when the session user may not perform an action."""


class AuthenticationError(CommunityFeesError):
    """Raised when a login attempt fails."""


class ConfigurationError(CommunityFeesError):
    """Raised when configuration is invalid or missing."""


class StorageError(CommunityFeesError):
    """Raised when a storage write fails."""
