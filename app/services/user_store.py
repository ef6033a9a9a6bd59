"""In-memory user repository.

Holds every user record for the lifetime of the process. A single
reader/writer lock guards both the id→record mapping and the id counter:
reads run in parallel, writes are exclusive. Records are immutable, so a
reader only ever sees a whole old record or a whole new one.

Ids start at 1 and are never reused, even after a delete.
"""

from __future__ import annotations

import logging

from app.core.errors import NotFoundAppError
from app.schemas.user import User, UserInput
from app.utils.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)


def _not_found(user_id: int) -> NotFoundAppError:
    return NotFoundAppError(
        code="user_not_found",
        message="user not found",
        details={"user_id": user_id},
    )


class UserStore:
    """Concurrency-safe CRUD store for users with server-assigned ids."""

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._users: dict[int, User] = {}
        self._next_id = 1

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"UserStore(size={len(self._users)}, next_id={self._next_id})"

    def create(self, data: UserInput) -> User:
        """Insert a new user and return it with its assigned id."""
        with self._lock.write_locked():
            user = User(id=self._next_id, name=data.name, email=data.email)
            self._next_id += 1
            self._users[user.id] = user

        logger.debug("user_store.created", extra={"user_id": user.id})
        return user

    def get_all(self) -> list[User]:
        """Return a snapshot of all users (insertion order, not guaranteed)."""
        with self._lock.read_locked():
            return list(self._users.values())

    def get_by_id(self, user_id: int) -> User:
        """Fetch a single user.

        Raises:
            NotFoundAppError: If no user has this id.
        """
        with self._lock.read_locked():
            user = self._users.get(user_id)
        if user is None:
            raise _not_found(user_id)
        return user

    def update(self, user_id: int, data: UserInput) -> User:
        """Replace every mutable field of a user, keeping its id.

        This is a full replace: fields left at their default in ``data`` are
        cleared on the stored record.

        Raises:
            NotFoundAppError: If no user has this id.
        """
        with self._lock.write_locked():
            if user_id not in self._users:
                raise _not_found(user_id)
            user = User(id=user_id, name=data.name, email=data.email)
            self._users[user_id] = user

        logger.debug("user_store.updated", extra={"user_id": user_id})
        return user

    def delete(self, user_id: int) -> None:
        """Remove a user. Its id is never handed out again.

        Raises:
            NotFoundAppError: If no user has this id.
        """
        with self._lock.write_locked():
            if self._users.pop(user_id, None) is None:
                raise _not_found(user_id)

        logger.debug("user_store.deleted", extra={"user_id": user_id})

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._users)
