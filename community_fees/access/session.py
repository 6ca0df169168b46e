"""Login session with an explicit login/logout lifecycle."""

import hashlib
import hmac
import logging

from community_fees.exceptions import AuthenticationError
from community_fees.models.community import User
from community_fees.store.community import CommunityDataStore

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """One-way digest of a password (SHA-256, hex)."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(password: str, password_hash: str) -> bool:
    return hmac.compare_digest(hash_password(password), password_hash)


class Session:
    """The logged-in user, persisted under the session key.

    Only the user id is persisted; the user is re-read from the store so
    role changes apply immediately.
    """

    def __init__(self, store: CommunityDataStore) -> None:
        self.store = store
        self._user_id: str | None = None

    @property
    def user(self) -> User | None:
        if self._user_id is None:
            return None
        return self.store.get_user(self._user_id)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def login(self, username: str, password: str) -> User:
        """Authenticate and start the session.

        Raises
        ------
        AuthenticationError
            Unknown username or wrong password.
        """
        user = self.store.find_user_by_username(username)
        if user is None:
            raise AuthenticationError("User does not exist")
        if not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", username)
            raise AuthenticationError("Incorrect password")

        self._user_id = user.user_id
        self.store.write_session(user.user_id)
        logger.info("User %s logged in", username)
        return user

    def logout(self) -> None:
        self._user_id = None
        self.store.clear_session()

    def restore(self) -> User | None:
        """Resume the persisted session; a stale session is cleared."""
        user_id = self.store.read_session()
        if user_id is None or self.store.get_user(user_id) is None:
            self._user_id = None
            if user_id is not None:
                self.store.clear_session()
            return None
        self._user_id = user_id
        return self.user
