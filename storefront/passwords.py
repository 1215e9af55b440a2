"""bcrypt password hashing for the user directory."""

from __future__ import annotations

from passlib.context import CryptContext

DEFAULT_ROUNDS = 12
MIN_ROUNDS = 4
MAX_ROUNDS = 31


class InvalidPasswordError(ValueError):
    """Raised when a password cannot be represented by the bcrypt scheme."""


def check_password(password: str) -> None:
    """Reject passwords bcrypt cannot hash; currently only NUL bytes."""

    if "\x00" in password:
        raise InvalidPasswordError("Password must not contain NUL characters")


class PasswordHasher:
    """Salted, adaptive password hashing backed by passlib's bcrypt handler.

    bcrypt only looks at the first 72 bytes of the UTF-8 encoded password;
    anything past that is ignored when hashing and verifying.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
            raise ValueError(f"bcrypt rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}")
        self._rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        check_password(password)
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return self._context.verify(password, hashed)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self) -> bool:
        """Spend the same time as a real verification; always ``False``."""

        self._context.dummy_verify()
        return False


__all__ = [
    "DEFAULT_ROUNDS",
    "InvalidPasswordError",
    "PasswordHasher",
    "check_password",
]
