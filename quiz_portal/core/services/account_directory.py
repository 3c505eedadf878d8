"""Service for user accounts, credential checks and the current session."""

from __future__ import annotations

import logging

from quiz_portal.constants.quiz_constants import DEFAULT_ACCOUNTS
from quiz_portal.constants.storage_constants import CURRENT_USER_KEY, USERS_KEY
from quiz_portal.core.context import AppContext
from quiz_portal.core.documents import DocumentCollection, DocumentRecord
from quiz_portal.core.models import Role, User

_logger = logging.getLogger(__name__)


class AccountDirectory:
    """Looks up users and tracks which one is signed in on this client."""

    def __init__(self, context: AppContext) -> None:
        self._users = DocumentCollection(context.store, USERS_KEY, User)
        self._current_user = DocumentRecord(context.store, CURRENT_USER_KEY, User)

    def initialize_defaults(self) -> bool:
        """Seed the default admin and student accounts if no users exist yet."""
        if self._users.exists():
            return False
        self._users.save(
            [
                User(id=user_id, username=username, password=password, role=Role(role))
                for user_id, username, password, role in DEFAULT_ACCOUNTS
            ]
        )
        _logger.info("Seeded %d default accounts", len(DEFAULT_ACCOUNTS))
        return True

    def list_users(self) -> list[User]:
        return self._users.load_or_empty()

    def authenticate(self, username: str, password: str) -> User | None:
        """Return the first user whose username and password both match exactly."""
        for user in self._users.load_or_empty():
            if user.username == username and user.password == password:
                return user
        _logger.info("Rejected credentials for username %r", username)
        return None

    def login(self, username: str, password: str) -> User | None:
        user = self.authenticate(username, password)
        if user is not None:
            self.start_session(user)
        return user

    def current_session(self) -> User | None:
        return self._current_user.load()

    def start_session(self, user: User) -> None:
        self._current_user.save(user)

    def end_session(self) -> None:
        self._current_user.clear()

    @staticmethod
    def has_role(user: User | None, role: Role) -> bool:
        """Role check used to route a valid login into the right flow."""
        return user is not None and user.role == role
