"""Fallback in-memory identity store for the storefront backend."""

from __future__ import annotations

from typing import Any

from .directory import DuplicateUserError, UserDirectory, UserStore
from .models import PublicUser, UserRecord
from .passwords import PasswordHasher


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the HTTP application embedding the directory."""

    from .api import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "DuplicateUserError",
    "PasswordHasher",
    "PublicUser",
    "UserDirectory",
    "UserRecord",
    "UserStore",
    "create_app",
]
