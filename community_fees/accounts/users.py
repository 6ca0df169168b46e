"""User directory: account creation, roles and the bootstrap admin."""

import logging
import uuid
from dataclasses import replace
from datetime import datetime

from community_fees.access.session import hash_password
from community_fees.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    StorageError,
    ValidationError,
)
from community_fees.models.community import Role, User
from community_fees.store.community import REGISTRATIONS, USERS, CommunityDataStore

logger = logging.getLogger(__name__)


class UserDirectory:
    """Create, update and delete user accounts."""

    def __init__(self, store: CommunityDataStore) -> None:
        self.store = store

    def get(self, user_id: str) -> User | None:
        return self.store.get_user(user_id)

    def get_by_username(self, username: str) -> User | None:
        return self.store.find_user_by_username(username)

    def all(self) -> list[User]:
        return sorted(self.store.users.values(), key=lambda u: u.created_at)

    def create_user(
        self,
        username: str,
        password: str,
        role: Role = Role.EXT,
        now: datetime | None = None,
        user_id: str | None = None,
    ) -> User:
        """Create an account.

        Raises
        ------
        ValidationError
            Blank username or password.
        DuplicateEntityError
            The username is taken.
        """
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Username and password are required")
        if self.store.find_user_by_username(username) is not None:
            raise DuplicateEntityError("Username already exists")

        user = User(
            user_id=user_id or f"user-{username.lower()}-{uuid.uuid4().hex[:8]}",
            username=username,
            password_hash=hash_password(password),
            role=Role(role),
            created_at=now or datetime.now(),
        )
        self.store.put_user(user)
        try:
            self.store.sync(USERS)
        except StorageError:
            self.store.remove_user(user.user_id)
            raise
        logger.info("Created user %s (%s)", username, user.role.value)
        return user

    def update_role(self, user_id: str, role: Role) -> User:
        user = self._require(user_id)
        updated = replace(user, role=Role(role))
        self.store.put_user(updated)
        try:
            self.store.sync(USERS)
        except StorageError:
            self.store.put_user(user)
            raise
        logger.info("Changed role of %s from %s to %s", user.username, user.role.value, updated.role.value)
        return updated

    def delete_user(self, user_id: str, acting_user: User | None = None) -> User:
        """Delete an account together with its registrations.

        Raises
        ------
        ValidationError
            ``acting_user`` tried to delete themself.
        EntityNotFoundError
            No such user.
        """
        if acting_user is not None and acting_user.user_id == user_id:
            raise ValidationError("You cannot delete your own account")
        user = self._require(user_id)

        registrations = self.store.registrations
        self.store.remove_user(user_id)
        self.store.registrations = {
            rid: reg for rid, reg in registrations.items() if reg.user_id != user_id
        }
        try:
            self.store.sync(USERS, REGISTRATIONS)
        except StorageError:
            self.store.put_user(user)
            self.store.registrations = registrations
            raise
        logger.info("Deleted user %s", user.username)
        return user

    def bootstrap_admin(self) -> User | None:
        """Create the configured admin account if no ADMIN exists."""
        if any(u.role == Role.ADMIN for u in self.store.users.values()):
            return None
        admin = self.store.config.admin
        existing = self.store.find_user_by_username(admin.username)
        if existing is not None:
            # Username taken by a demoted account: promote it back
            return self.update_role(existing.user_id, Role.ADMIN)
        logger.warning("No ADMIN account found, creating %s with the default password", admin.username)
        return self.create_user(admin.username, admin.password, Role.ADMIN, user_id=admin.user_id)

    def _require(self, user_id: str) -> User:
        user = self.store.get_user(user_id)
        if user is None:
            raise EntityNotFoundError(f"User {user_id} not found")
        return user
