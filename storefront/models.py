"""Domain models for the in-memory user directory."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class PublicUser:
    """A user account as seen by anything outside the directory."""

    id: int
    name: str
    email: str
    is_admin: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserRecord:
    """A stored user account, including its credential hash.

    Only trusted callers (the login flow) should ever receive this type.
    """

    id: int
    name: str
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime
    updated_at: datetime
    is_admin: bool = False


def to_public(record: UserRecord) -> PublicUser:
    """Project a stored record onto its credential-free public view."""

    return PublicUser(
        id=record.id,
        name=record.name,
        email=record.email,
        is_admin=record.is_admin,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


__all__ = ["PublicUser", "UserRecord", "to_public"]
