"""In-memory user directory used when no persistent database is available."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol, Union

import anyio

from .models import PublicUser, UserRecord, to_public
from .passwords import InvalidPasswordError, PasswordHasher, check_password

logger = logging.getLogger("storefront.directory")

_INITIAL_ID = 1

UserId = Union[int, str]


class DuplicateUserError(ValueError):
    """Raised when a user with the same normalised email already exists."""

    def __init__(self, email: str) -> None:
        super().__init__("User already exists")
        self.email = email


class UserStore(Protocol):
    """Method surface shared by the in-memory directory and durable backends."""

    async def create(self, name: str, email: str, password: str) -> PublicUser: ...

    async def find_by_email(self, email: str) -> Optional[UserRecord]: ...

    async def find_by_id(self, user_id: UserId) -> Optional[PublicUser]: ...

    async def verify_credential(self, user_id: UserId, password: str) -> bool: ...

    async def list_all(self) -> List[PublicUser]: ...


def normalize_email(value: str) -> str:
    return value.strip().lower()


def normalize_name(value: str) -> str:
    return value.strip()


def _coerce_id(user_id: UserId) -> Optional[int]:
    if isinstance(user_id, bool):
        return None
    if isinstance(user_id, int):
        return user_id
    try:
        return int(str(user_id).strip())
    except ValueError:
        return None


def _now() -> datetime:
    return datetime.now(timezone.utc)


class UserDirectory:
    """Process-local registry of user accounts keyed by id and email.

    Mutations and snapshot reads share one lock scoped to the whole table. The
    lock is only ever held for dictionary work, never across an ``await`` or
    while a password is being hashed, so concurrent logins and registrations
    keep flowing while bcrypt runs in a worker thread.
    """

    def __init__(self, *, hasher: PasswordHasher | None = None) -> None:
        self._hasher = hasher or PasswordHasher()
        self._lock = threading.Lock()
        self._users: Dict[int, UserRecord] = {}
        self._ids_by_email: Dict[str, int] = {}
        self._next_id = _INITIAL_ID

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def count(self) -> int:
        return len(self)

    @property
    def hasher(self) -> PasswordHasher:
        return self._hasher

    async def create(self, name: str, email: str, password: str) -> PublicUser:
        """Register a new user and return its public view.

        Raises :class:`DuplicateUserError` if the normalised email is taken and
        :class:`InvalidPasswordError` if the password contains a NUL character.
        """

        check_password(password)
        normalized_email = normalize_email(email)
        normalized_name = normalize_name(name)

        # Skip the expensive hash when the email is obviously taken; the
        # authoritative check happens again under the lock below.
        with self._lock:
            if normalized_email in self._ids_by_email:
                raise DuplicateUserError(normalized_email)

        password_hash = await anyio.to_thread.run_sync(self._hasher.hash, password)

        created_at = _now()
        with self._lock:
            if normalized_email in self._ids_by_email:
                raise DuplicateUserError(normalized_email)
            record = UserRecord(
                id=self._next_id,
                name=normalized_name,
                email=normalized_email,
                password_hash=password_hash,
                is_admin=False,
                created_at=created_at,
                updated_at=created_at,
            )
            self._next_id += 1
            self._users[record.id] = record
            self._ids_by_email[normalized_email] = record.id

        logger.info("User %s created in memory (id=%s)", record.email, record.id)
        return to_public(record)

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        """Return the full record, credential hash included, for ``email``."""

        normalized_email = normalize_email(email)
        with self._lock:
            user_id = self._ids_by_email.get(normalized_email)
            if user_id is None:
                return None
            return self._users[user_id]

    async def find_by_id(self, user_id: UserId) -> Optional[PublicUser]:
        record = self._get(user_id)
        if record is None:
            return None
        return to_public(record)

    async def verify_credential(self, user_id: UserId, password: str) -> bool:
        """Return ``True`` if ``password`` matches the stored hash.

        An unknown user and a wrong password both yield ``False``.
        """

        record = self._get(user_id)
        if record is None:
            return await anyio.to_thread.run_sync(self._hasher.dummy_verify)
        return await anyio.to_thread.run_sync(self._hasher.verify, password, record.password_hash)

    async def list_all(self) -> List[PublicUser]:
        with self._lock:
            records = list(self._users.values())
        return [to_public(record) for record in records]

    async def reset(self) -> None:
        """Drop every record and restart id assignment. Test/bootstrap use only."""

        with self._lock:
            self._users.clear()
            self._ids_by_email.clear()
            self._next_id = _INITIAL_ID
        logger.info("User directory reset")

    def _get(self, user_id: UserId) -> Optional[UserRecord]:
        key = _coerce_id(user_id)
        if key is None:
            return None
        with self._lock:
            return self._users.get(key)


__all__ = [
    "DuplicateUserError",
    "InvalidPasswordError",
    "UserDirectory",
    "UserStore",
    "normalize_email",
    "normalize_name",
]
